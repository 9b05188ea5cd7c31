# users_api/infrastructure/database/session.py

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from users_api.config.settings import Settings, settings as default_settings
from users_api.infrastructure.database.base_model import BaseModel


def _build_engine(url: str, *, echo: bool = False) -> Engine:
    kwargs = {"echo": echo, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **kwargs)


# um engine por processo; create_app() o (re)configura com as settings recebidas
_engine: Engine | None = None
_engine_key: tuple[str, bool] | None = None

_SessionLocal = sessionmaker(
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def configure_engine(settings: Settings = default_settings) -> Engine:
    """Bind the session factory to ``settings.database_url``.

    Calling it again with the same URL keeps the current engine and its pool.
    """
    global _engine, _engine_key

    key = (settings.database_url, settings.debug)
    if _engine is not None and key == _engine_key:
        return _engine

    if _engine is not None:
        _engine.dispose()

    _engine = _build_engine(settings.database_url, echo=settings.debug)
    _engine_key = key
    _SessionLocal.configure(bind=_engine)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        return configure_engine()
    return _engine


def init_db() -> None:
    import users_api.infrastructure.database.models  # noqa: F401

    BaseModel.metadata.create_all(get_engine())


@contextmanager
def db_session() -> Iterator[Session]:
    get_engine()
    session: Session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
