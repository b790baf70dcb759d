"""Initial record-keeping schema."""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from alembic import op

revision = "20250601_01"
down_revision = None
branch_labels = None
depends_on: Iterable[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:  # noqa: D401
    """Create issuer, holder, ledger and access tables."""

    op.create_table(
        "issuers",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("issuer_name", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("telephone", sa.String(length=64), nullable=True),
        sa.Column("tax_id", sa.String(length=64), nullable=True),
        sa.Column("incorporation", sa.String(length=255), nullable=True),
        sa.Column("underwriter", sa.String(length=255), nullable=True),
        sa.Column("share_info", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("forms_sl_status", sa.String(length=255), nullable=True),
        sa.Column("timeframe_for_separation", sa.String(length=255), nullable=True),
        sa.Column("separation_ratio", sa.String(length=255), nullable=True),
        sa.Column("exchange_platform", sa.String(length=255), nullable=True),
        sa.Column("timeframe_for_bc", sa.String(length=255), nullable=True),
        sa.Column("us_counsel", sa.String(length=255), nullable=True),
        sa.Column("offshore_counsel", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=True),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_issuers"),
        sa.UniqueConstraint("issuer_name", name="uq_issuers_issuer_name"),
    )

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("role_name", sa.String(length=64), nullable=False),
        sa.Column("display_name", sa.String(length=128), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_roles"),
        sa.UniqueConstraint("role_name", name="uq_roles_role_name"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("is_super_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_owner", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "shareholders",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("issuer_id", sa.String(length=36), nullable=False),
        sa.Column("account_number", sa.String(length=64), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("city", sa.String(length=128), nullable=True),
        sa.Column("state", sa.String(length=64), nullable=True),
        sa.Column("zip", sa.String(length=32), nullable=True),
        sa.Column("country", sa.String(length=64), nullable=True),
        sa.Column("taxpayer_id", sa.String(length=64), nullable=True),
        sa.Column("tin_status", sa.String(length=64), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("holder_type", sa.String(length=64), nullable=True),
        sa.Column("lei", sa.String(length=64), nullable=True),
        sa.Column("ownership_percentage", sa.Numeric(9, 4), nullable=False, server_default="0"),
        sa.Column("ofac_date", sa.Date(), nullable=True),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_shareholders"),
        sa.ForeignKeyConstraint(
            ["issuer_id"], ["issuers.id"], name="fk_shareholders_issuer_id_issuers", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_shareholders_issuer_id", "shareholders", ["issuer_id"])
    op.create_index("ix_shareholders_email", "shareholders", ["email"])

    op.create_table(
        "securities",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("issuer_id", sa.String(length=36), nullable=False),
        sa.Column("class_name", sa.String(length=255), nullable=False),
        sa.Column("cusip", sa.String(length=16), nullable=False),
        sa.Column("issue_name", sa.String(length=255), nullable=False),
        sa.Column("issue_ticker", sa.String(length=32), nullable=True),
        sa.Column("total_authorized_shares", sa.Numeric(20, 4), nullable=True),
        sa.Column("trading_platform", sa.String(length=128), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="active"),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_securities"),
        sa.ForeignKeyConstraint(
            ["issuer_id"], ["issuers.id"], name="fk_securities_issuer_id_issuers", ondelete="CASCADE"
        ),
        sa.UniqueConstraint("issuer_id", "cusip", name="uq_securities_issuer_cusip"),
    )
    op.create_index("ix_securities_issuer_id", "securities", ["issuer_id"])

    op.create_table(
        "restriction_templates",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("issuer_id", sa.String(length=36), nullable=False),
        sa.Column("restriction_type", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_restriction_templates"),
        sa.ForeignKeyConstraint(
            ["issuer_id"],
            ["issuers.id"],
            name="fk_restriction_templates_issuer_id_issuers",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_restriction_templates_issuer_id", "restriction_templates", ["issuer_id"])

    op.create_table(
        "transfers",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("issuer_id", sa.String(length=36), nullable=False),
        sa.Column("shareholder_id", sa.String(length=36), nullable=True),
        sa.Column("cusip", sa.String(length=16), nullable=True),
        sa.Column("transaction_type", sa.String(length=64), nullable=True),
        sa.Column("share_quantity", sa.Numeric(20, 4), nullable=False, server_default="0"),
        sa.Column("transaction_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="ACTIVE"),
        sa.Column("certificate_type", sa.String(length=64), nullable=False, server_default="Book Entry"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("restriction_id", sa.String(length=36), nullable=True),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_transfers"),
        sa.ForeignKeyConstraint(
            ["issuer_id"], ["issuers.id"], name="fk_transfers_issuer_id_issuers", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["shareholder_id"],
            ["shareholders.id"],
            name="fk_transfers_shareholder_id_shareholders",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["restriction_id"],
            ["restriction_templates.id"],
            name="fk_transfers_restriction_id_restriction_templates",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_transfers_issuer_id", "transfers", ["issuer_id"])
    op.create_index("ix_transfers_shareholder_id", "transfers", ["shareholder_id"])

    op.create_table(
        "shareholder_positions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("shareholder_id", sa.String(length=36), nullable=False),
        sa.Column("issuer_id", sa.String(length=36), nullable=False),
        sa.Column("security_id", sa.String(length=36), nullable=True),
        sa.Column("shares_owned", sa.Numeric(20, 4), nullable=False, server_default="0"),
        sa.Column("position_date", sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_shareholder_positions"),
        sa.ForeignKeyConstraint(
            ["shareholder_id"],
            ["shareholders.id"],
            name="fk_shareholder_positions_shareholder_id_shareholders",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["issuer_id"],
            ["issuers.id"],
            name="fk_shareholder_positions_issuer_id_issuers",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["security_id"],
            ["securities.id"],
            name="fk_shareholder_positions_security_id_securities",
            ondelete="SET NULL",
        ),
    )
    op.create_index(
        "ix_shareholder_positions_shareholder_id", "shareholder_positions", ["shareholder_id"]
    )

    op.create_table(
        "shareholder_restrictions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("issuer_id", sa.String(length=36), nullable=False),
        sa.Column("shareholder_id", sa.String(length=36), nullable=False),
        sa.Column("restriction_id", sa.String(length=36), nullable=False),
        sa.Column("cusip", sa.String(length=16), nullable=False),
        sa.Column("restricted_shares", sa.Numeric(20, 4), nullable=False),
        sa.Column("restriction_date", sa.Date(), nullable=False),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_shareholder_restrictions"),
        sa.ForeignKeyConstraint(
            ["issuer_id"],
            ["issuers.id"],
            name="fk_shareholder_restrictions_issuer_id_issuers",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["shareholder_id"],
            ["shareholders.id"],
            name="fk_shareholder_restrictions_shareholder_id_shareholders",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["restriction_id"],
            ["restriction_templates.id"],
            name="fk_shareholder_restrictions_restriction_id_restriction_templates",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_shareholder_restrictions_issuer_id", "shareholder_restrictions", ["issuer_id"]
    )

    op.create_table(
        "invited_users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("issuer_id", sa.String(length=36), nullable=True),
        sa.Column("invited_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_invited_users"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], name="fk_invited_users_role_id_roles"),
        sa.ForeignKeyConstraint(
            ["issuer_id"], ["issuers.id"], name="fk_invited_users_issuer_id_issuers", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_invited_users_email", "invited_users", ["email"])

    op.create_table(
        "issuer_users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("issuer_id", sa.String(length=36), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_issuer_users"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_issuer_users_user_id_users",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["issuer_id"], ["issuers.id"], name="fk_issuer_users_issuer_id_issuers", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], name="fk_issuer_users_role_id_roles"),
    )
    op.create_index("ix_issuer_users_user_id", "issuer_users", ["user_id"])
    op.create_index("ix_issuer_users_issuer_id", "issuer_users", ["issuer_id"])


def downgrade() -> None:  # noqa: D401
    """Drop all record-keeping tables."""

    op.drop_index("ix_issuer_users_issuer_id", table_name="issuer_users")
    op.drop_index("ix_issuer_users_user_id", table_name="issuer_users")
    op.drop_table("issuer_users")
    op.drop_index("ix_invited_users_email", table_name="invited_users")
    op.drop_table("invited_users")
    op.drop_index("ix_shareholder_restrictions_issuer_id", table_name="shareholder_restrictions")
    op.drop_table("shareholder_restrictions")
    op.drop_index("ix_shareholder_positions_shareholder_id", table_name="shareholder_positions")
    op.drop_table("shareholder_positions")
    op.drop_index("ix_transfers_shareholder_id", table_name="transfers")
    op.drop_index("ix_transfers_issuer_id", table_name="transfers")
    op.drop_table("transfers")
    op.drop_index("ix_restriction_templates_issuer_id", table_name="restriction_templates")
    op.drop_table("restriction_templates")
    op.drop_index("ix_securities_issuer_id", table_name="securities")
    op.drop_table("securities")
    op.drop_index("ix_shareholders_email", table_name="shareholders")
    op.drop_index("ix_shareholders_issuer_id", table_name="shareholders")
    op.drop_table("shareholders")
    op.drop_table("users")
    op.drop_table("roles")
    op.drop_table("issuers")
