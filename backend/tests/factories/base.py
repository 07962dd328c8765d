# backend/tests/factories/base.py

from factory.alchemy import SQLAlchemyModelFactory


class _FactorySession:
    current = None


def bind_factory_session(session):
    """Point every factory at the session of the running test."""
    _FactorySession.current = session


class BaseFactory(SQLAlchemyModelFactory):
    """Base factory with session management for all test factories."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = lambda: _FactorySession.current  # noqa: E731
        sqlalchemy_session_persistence = "commit"

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        if _FactorySession.current is None:
            raise RuntimeError("No test session bound; use the db_session fixture")
        return super()._create(model_class, *args, **kwargs)
