"""Initial DealDesk schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Profiles (users)
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("avatar", sa.String(500)),
        *_timestamps(),
    )

    # Companies
    op.create_table(
        "companies",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("logo", sa.String(500)),
        sa.Column("industry", sa.String(100)),
        sa.Column("website", sa.String(500)),
        sa.Column("size", sa.String(50)),
        sa.Column("created_by", sa.Uuid),
        *_timestamps(),
    )
    op.create_index("ix_companies_name", "companies", ["name"])

    # Contacts
    op.create_table(
        "contacts",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50)),
        sa.Column("position", sa.String(200)),
        sa.Column("avatar", sa.String(500)),
        sa.Column("company_id", sa.Uuid, sa.ForeignKey("companies.id", ondelete="SET NULL")),
        *_timestamps(),
    )
    op.create_index("ix_contacts_name", "contacts", ["name"])
    op.create_index("ix_contacts_email", "contacts", ["email"])
    op.create_index("ix_contacts_company_id", "contacts", ["company_id"])

    # Deals
    op.create_table(
        "deals",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("value", sa.Float, nullable=False, server_default="0"),
        sa.Column("stage", sa.String(20), nullable=False, server_default="lead"),
        sa.Column("description", sa.Text),
        sa.Column("company_id", sa.Uuid, sa.ForeignKey("companies.id", ondelete="SET NULL")),
        sa.Column("assigned_to", sa.Uuid, sa.ForeignKey("profiles.id", ondelete="SET NULL")),
        *_timestamps(),
        sa.CheckConstraint(
            "stage IN ('lead', 'contact', 'proposal', 'negotiation', 'won', 'lost')",
            name="ck_deals_stage",
        ),
    )
    op.create_index("ix_deals_stage", "deals", ["stage"])
    op.create_index("ix_deals_company_id", "deals", ["company_id"])
    op.create_index("ix_deals_assigned_to", "deals", ["assigned_to"])

    # Activities (audit trail)
    op.create_table(
        "activities",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("entity_id", sa.Uuid),
        sa.Column("entity_type", sa.String(20)),
        sa.Column("user_id", sa.Uuid),
    )
    op.create_index("ix_activities_timestamp", "activities", ["timestamp"])
    op.create_index("ix_activities_entity_id", "activities", ["entity_id"])


def downgrade() -> None:
    op.drop_table("activities")
    op.drop_table("deals")
    op.drop_table("contacts")
    op.drop_table("companies")
    op.drop_table("profiles")
