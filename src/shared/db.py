"""Schema management for SQL-backed providers.

The in-memory provider used by default needs no schema, so both helpers are
no-ops unless the active environment configures sqlite or postgresql.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for provider in domain.providers.values():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider, create_engine(provider.conn_info["database_uri"])


def setup_db(domain: Domain) -> None:
    """Create tables for every aggregate and entity the domain persists."""
    with domain.domain_context():
        registry = domain.registry
        persisted = [record.cls for record in (*registry.aggregates.values(), *registry.entities.values())]

        for provider, engine in _sql_providers(domain):
            # Touching the DAO registers the element's model on the provider metadata
            for element in persisted:
                if element.meta_.provider == provider.name:
                    domain.repository_for(element)._dao  # noqa: B018
            provider._metadata.create_all(engine)


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider, engine in _sql_providers(domain):
            provider._metadata.drop_all(engine)
