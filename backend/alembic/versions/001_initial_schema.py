"""Initial schema: users, categories, locations, events, requests, compilations.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(250), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )
    op.create_index("ix_categories_id", "categories", ["id"])

    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
    )
    op.create_index("ix_locations_id", "locations", ["id"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(120), nullable=False),
        sa.Column("annotation", sa.String(2000), nullable=False),
        sa.Column("description", sa.String(7000), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("initiator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("state", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("event_date", sa.DateTime(), nullable=False),
        sa.Column("created_on", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("published_on", sa.DateTime(), nullable=True),
        sa.Column("paid", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("participant_limit", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("request_moderation", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("confirmed_requests", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("views", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("participant_limit >= 0", name="check_participant_limit_non_negative"),
        sa.CheckConstraint("confirmed_requests >= 0", name="check_confirmed_requests_non_negative"),
        sa.CheckConstraint("views >= 0", name="check_views_non_negative"),
        # A concurrent moderation that would overshoot the limit fails at commit
        sa.CheckConstraint(
            "participant_limit = 0 OR confirmed_requests <= participant_limit",
            name="check_confirmed_lte_limit",
        ),
        sa.CheckConstraint(
            "state IN ('PENDING', 'PUBLISHED', 'CANCELED')", name="check_event_state"
        ),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_category_id", "events", ["category_id"])
    op.create_index("ix_events_initiator_id", "events", ["initiator_id"])
    # Admin and public searches filter on date ranges
    op.create_index("ix_events_event_date", "events", ["event_date"])
    # Public listing: WHERE state = 'PUBLISHED' AND event_date >= now()
    op.create_index("ix_events_state_date", "events", ["state", "event_date"])

    op.create_table(
        "requests",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("requester_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("created", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        # One request per user per event
        sa.UniqueConstraint("event_id", "requester_id", name="uq_request_event_requester"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'REJECTED', 'CANCELED')",
            name="check_request_status",
        ),
    )
    op.create_index("ix_requests_id", "requests", ["id"])
    op.create_index("ix_requests_event_id", "requests", ["event_id"])
    op.create_index("ix_requests_requester_id", "requests", ["requester_id"])

    op.create_table(
        "compilations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(50), nullable=False),
        sa.Column("pinned", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.UniqueConstraint("title", name="uq_compilations_title"),
    )
    op.create_index("ix_compilations_id", "compilations", ["id"])

    op.create_table(
        "compilations_events",
        sa.Column(
            "compilation_id",
            sa.Integer(),
            sa.ForeignKey("compilations.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("compilations_events")
    op.drop_table("compilations")
    op.drop_table("requests")
    op.drop_table("events")
    op.drop_table("locations")
    op.drop_table("categories")
    op.drop_table("users")
