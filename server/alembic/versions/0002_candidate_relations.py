"""candidate relations: parents, witnesses, schools, groups, parishes

Revision ID: 0002_candidate_relations
Revises: 0001_create_accounts_and_roles
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0002_candidate_relations"
down_revision = "0001_create_accounts_and_roles"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "parents",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column("address_id", sa.Integer(), sa.ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True),
    )

    op.create_table(
        "parent_candidates",
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("parents.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("candidate_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_parent_candidates_candidate_id", "parent_candidates", ["candidate_id"])

    op.create_table(
        "witnesses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("candidate_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column("address_id", sa.Integer(), sa.ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True),
    )

    op.create_table(
        "witness_contacts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("witness_id", sa.Integer(), sa.ForeignKey("witnesses.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
    )

    op.create_table(
        "schools",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
    )

    op.create_table(
        "school_enrollments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("candidate_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("school_id", sa.Integer(), sa.ForeignKey("schools.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("grade", sa.String(length=20), nullable=False),
        sa.Column("school_year", sa.String(length=20), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "confirmation_names",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("candidate_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("justification", sa.Text(), nullable=False),
    )

    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("animator_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_index("ix_groups_animator_id", "groups", ["animator_id"])

    op.create_table(
        "group_memberships",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_group_memberships_group_id", "group_memberships", ["group_id"])

    op.create_table(
        "parish_invocations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
    )

    op.create_table(
        "parishes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "invocation_id",
            sa.Integer(),
            sa.ForeignKey("parish_invocations.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("address_id", sa.Integer(), sa.ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
    )

    op.create_table(
        "parish_memberships",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("parish_id", sa.Integer(), sa.ForeignKey("parishes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True),
    )
    op.create_index("ix_parish_memberships_parish_id", "parish_memberships", ["parish_id"])


def downgrade() -> None:
    op.drop_index("ix_parish_memberships_parish_id", table_name="parish_memberships")
    op.drop_table("parish_memberships")
    op.drop_table("parishes")
    op.drop_table("parish_invocations")
    op.drop_index("ix_group_memberships_group_id", table_name="group_memberships")
    op.drop_table("group_memberships")
    op.drop_index("ix_groups_animator_id", table_name="groups")
    op.drop_table("groups")
    op.drop_table("confirmation_names")
    op.drop_table("school_enrollments")
    op.drop_table("schools")
    op.drop_table("witness_contacts")
    op.drop_table("witnesses")
    op.drop_index("ix_parent_candidates_candidate_id", table_name="parent_candidates")
    op.drop_table("parent_candidates")
    op.drop_table("parents")
