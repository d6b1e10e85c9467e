"""Storage selection and schema management for the storefront domain."""

import os

from protean.domain import Domain
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from storefront.shared.errors import PersistenceUnavailable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_BACKEND_LABELS = {
    "memory": "In-Memory",
    "postgresql": "PostgreSQL",
    "sqlite": "SQLite",
}


def check_connection(database_uri: str) -> None:
    """Open and close one connection, raising PersistenceUnavailable on failure."""
    try:
        engine = create_engine(database_uri)
    except (SQLAlchemyError, ImportError) as exc:
        raise PersistenceUnavailable(f"Cannot build engine for database: {exc}") from exc

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise PersistenceUnavailable(f"Database unreachable: {exc}") from exc
    finally:
        engine.dispose()


def configure_storage(domain: Domain, database_uri: str | None = None) -> str:
    """Point the domain's default database at PostgreSQL when it is reachable.

    Must run before ``domain.init()``. Without a database URI, or when the
    server cannot be reached, the domain keeps the in-memory provider and the
    process carries on with volatile storage. Returns the backend label.
    """
    uri = database_uri or os.getenv("DATABASE_URL")
    if not uri:
        logger.info("storage_selected", backend="memory", reason="DATABASE_URL not set")
        return storage_backend(domain)

    try:
        check_connection(uri)
    except PersistenceUnavailable as exc:
        logger.warning("persistence_unavailable", error=str(exc), fallback="memory")
        return storage_backend(domain)

    domain.config["databases"]["default"] = {
        "provider": "postgresql",
        "database_uri": uri,
    }
    logger.info("storage_selected", backend="postgresql")
    return storage_backend(domain)


def storage_backend(domain: Domain) -> str:
    """Human-readable label of the default database provider."""
    provider = domain.config["databases"]["default"]["provider"]
    return _BACKEND_LABELS.get(provider, provider)


def setup_db(domain: Domain):
    """Setup database schema"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in ("sqlite", "postgresql"):
                engine = create_engine(provider.conn_info["database_uri"])

                for _, aggregate_record in domain.registry.aggregates.items():
                    if aggregate_record.cls.meta_.provider == provider.name:
                        domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

                for _, entity_record in domain.registry.entities.items():
                    if entity_record.cls.meta_.provider == provider.name:
                        domain.repository_for(entity_record.cls)._dao  # noqa: B018

                provider._metadata.create_all(engine)
                logger.info("schema_created", provider=provider.name)


def drop_db(domain: Domain):
    """Drop database schema"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in ("sqlite", "postgresql"):
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.drop_all(engine)
                logger.info("schema_dropped", provider=provider.name)
