"""Exceptions for login and registration"""

from core.exceptions import AuthenticationError, NotFoundError


class InvalidCredentialError(AuthenticationError):
    """Password does not match the stored hash"""

    error_code = "INVALID_CREDENTIAL"

    def __init__(self):
        super().__init__("Invalid email or password")


class AccountNotFoundError(NotFoundError):
    """No account is registered under the e-mail address"""

    error_code = "ACCOUNT_NOT_FOUND"

    def __init__(self, email: str):
        super().__init__("Account", email, "No account found for this email")
