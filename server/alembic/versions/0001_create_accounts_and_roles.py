"""create accounts, roles and addresses

Revision ID: 0001_create_accounts_and_roles
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_create_accounts_and_roles"
down_revision = None
branch_labels = None
depends_on = None

ROLE_NAMES = ("administrator", "duszpasterz", "kancelaria", "animator", "rodzic", "kandydat")


def upgrade() -> None:
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_roles_name", "roles", ["name"], unique=True)

    op.create_table(
        "cities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
    )
    op.create_index("ix_cities_name", "cities", ["name"])

    op.create_table(
        "streets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("city_id", sa.Integer(), sa.ForeignKey("cities.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("ix_streets_city_id", "streets", ["city_id"])

    op.create_table(
        "addresses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("street_id", sa.Integer(), sa.ForeignKey("streets.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("building_number", sa.String(length=20), nullable=False),
        sa.Column("unit_number", sa.String(length=20), nullable=True),
        sa.Column("postal_code", sa.String(length=10), nullable=True),
    )

    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("address_id", sa.Integer(), sa.ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)
    op.create_index("ix_accounts_deleted_at", "accounts", ["deleted_at"])

    op.create_table(
        "account_roles",
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "account_emails",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_account_emails_account_id", "account_emails", ["account_id"])
    op.create_index("ix_account_emails_email", "account_emails", ["email"])
    op.create_index(
        "uq_account_emails_primary",
        "account_emails",
        ["account_id"],
        unique=True,
        postgresql_where=sa.text("is_primary"),
        sqlite_where=sa.text("is_primary"),
    )

    op.create_table(
        "account_phones",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("number", sa.String(length=50), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_account_phones_account_id", "account_phones", ["account_id"])
    op.create_index(
        "uq_account_phones_primary",
        "account_phones",
        ["account_id"],
        unique=True,
        postgresql_where=sa.text("is_primary"),
        sqlite_where=sa.text("is_primary"),
    )

    op.bulk_insert(roles, [{"name": name} for name in ROLE_NAMES])


def downgrade() -> None:
    op.drop_index("uq_account_phones_primary", table_name="account_phones")
    op.drop_index("ix_account_phones_account_id", table_name="account_phones")
    op.drop_table("account_phones")
    op.drop_index("uq_account_emails_primary", table_name="account_emails")
    op.drop_index("ix_account_emails_email", table_name="account_emails")
    op.drop_index("ix_account_emails_account_id", table_name="account_emails")
    op.drop_table("account_emails")
    op.drop_table("account_roles")
    op.drop_index("ix_accounts_deleted_at", table_name="accounts")
    op.drop_index("ix_accounts_username", table_name="accounts")
    op.drop_table("accounts")
    op.drop_table("addresses")
    op.drop_index("ix_streets_city_id", table_name="streets")
    op.drop_table("streets")
    op.drop_index("ix_cities_name", table_name="cities")
    op.drop_table("cities")
    op.drop_index("ix_roles_name", table_name="roles")
    op.drop_table("roles")
