from .auth_exceptions import InvalidCredentialError, AccountNotFoundError

__all__ = ["InvalidCredentialError", "AccountNotFoundError"]
