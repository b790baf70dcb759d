"""Schema integrity tests for the record-keeping tables."""
from __future__ import annotations

from pathlib import Path

import pytest

sqlalchemy = pytest.importorskip("sqlalchemy")
alembic_command = pytest.importorskip("alembic.command")
alembic_config_module = pytest.importorskip("alembic.config")

sa = sqlalchemy
command = alembic_command
Config = alembic_config_module.Config


@pytest.fixture(scope="session")
def alembic_config(tmp_path_factory: pytest.TempPathFactory) -> Config:
    """Provide Alembic config bound to a temporary SQLite database."""

    project_root = Path(__file__).resolve().parents[2]
    db_path = tmp_path_factory.mktemp("db") / "test.db"

    config = Config(str(project_root / "alembic.ini"))
    config.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    config.set_main_option("script_location", str(project_root / "migrations"))
    return config


@pytest.fixture(scope="session")
def migrated_engine(alembic_config: Config):
    command.upgrade(alembic_config, "head")
    engine = sa.create_engine(alembic_config.get_main_option("sqlalchemy.url"))
    try:
        yield engine
    finally:
        engine.dispose()


def test_tables_exist(migrated_engine: sa.Engine) -> None:
    tables = set(sa.inspect(migrated_engine).get_table_names())
    assert {
        "issuers",
        "shareholders",
        "securities",
        "transfers",
        "shareholder_positions",
        "restriction_templates",
        "shareholder_restrictions",
        "users",
        "roles",
        "invited_users",
        "issuer_users",
    }.issubset(tables)


@pytest.mark.parametrize(
    "table_name",
    [
        "shareholders",
        "securities",
        "transfers",
        "shareholder_positions",
        "restriction_templates",
        "shareholder_restrictions",
        "issuer_users",
    ],
)
def test_issuer_id_present(table_name: str, migrated_engine: sa.Engine) -> None:
    columns = {column["name"] for column in sa.inspect(migrated_engine).get_columns(table_name)}
    assert "issuer_id" in columns


def test_foreign_keys_enforced(migrated_engine: sa.Engine) -> None:
    inspector = sa.inspect(migrated_engine)
    fk_expectations = {
        "shareholders": {"issuer_id": "issuers"},
        "securities": {"issuer_id": "issuers"},
        "transfers": {
            "issuer_id": "issuers",
            "shareholder_id": "shareholders",
            "restriction_id": "restriction_templates",
        },
        "shareholder_restrictions": {
            "issuer_id": "issuers",
            "shareholder_id": "shareholders",
            "restriction_id": "restriction_templates",
        },
        "issuer_users": {"user_id": "users", "issuer_id": "issuers", "role_id": "roles"},
        "invited_users": {"role_id": "roles", "issuer_id": "issuers"},
    }

    for table, expected in fk_expectations.items():
        fk_map = {
            tuple(fk["constrained_columns"]): fk["referred_table"]
            for fk in inspector.get_foreign_keys(table)
        }
        for column, target in expected.items():
            assert fk_map[(column,)] == target


def test_unique_constraints(migrated_engine: sa.Engine) -> None:
    inspector = sa.inspect(migrated_engine)
    unique_expectations = {
        "issuers": {"uq_issuers_issuer_name": {"issuer_name"}},
        "securities": {"uq_securities_issuer_cusip": {"issuer_id", "cusip"}},
        "users": {"uq_users_email": {"email"}},
        "roles": {"uq_roles_role_name": {"role_name"}},
    }

    for table, expected in unique_expectations.items():
        found = {
            constraint["name"]: set(constraint["column_names"])
            for constraint in inspector.get_unique_constraints(table)
        }
        for name, columns in expected.items():
            assert found[name] == columns


def test_lookup_indexes(migrated_engine: sa.Engine) -> None:
    inspector = sa.inspect(migrated_engine)
    index_expectations = {
        "shareholders": {"ix_shareholders_issuer_id", "ix_shareholders_email"},
        "transfers": {"ix_transfers_issuer_id", "ix_transfers_shareholder_id"},
        "issuer_users": {"ix_issuer_users_user_id", "ix_issuer_users_issuer_id"},
        "invited_users": {"ix_invited_users_email"},
    }

    for table, index_names in index_expectations.items():
        indexes = {index["name"] for index in inspector.get_indexes(table)}
        assert index_names.issubset(indexes)


def test_migration_matches_models(migrated_engine: sa.Engine) -> None:
    from transfer_agent.models import Base

    migrated = set(sa.inspect(migrated_engine).get_table_names())
    assert set(Base.metadata.tables).issubset(migrated)
