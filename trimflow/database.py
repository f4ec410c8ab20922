import logging

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from trimflow.config import DATABASE_URL

logger = logging.getLogger(__name__)


def build_engine(url: str):
    """sqlite precisa de check_same_thread=False (rotas sync rodam em threadpool)."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(DATABASE_URL)


def create_db_and_tables(bind=None):
    # importa os modelos para registrar as tabelas no metadata
    from trimflow.models import appointment, barber, barbershop, business_hours, customer, service, user  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables ready")


def get_session():
    with Session(engine) as session:
        yield session
