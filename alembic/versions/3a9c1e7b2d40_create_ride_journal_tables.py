"""create ride journal tables

Revision ID: 3a9c1e7b2d40
Revises:
Create Date: 2026-10-18 09:12:31.402118
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3a9c1e7b2d40"
down_revision = None
branch_labels = None
depends_on = None

VEHICLE_TYPES = ("car", "truck", "suv", "motorcycle", "van", "other")
EVENT_TYPES = ("repair", "modification", "story", "maintenance")


def _stamps():
    return [
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("CURRENT_TIMESTAMP")),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("first_name", sa.Text()),
        sa.Column("last_name", sa.Text()),
        sa.Column("bio", sa.Text()),
        *_stamps(),
    )
    op.create_unique_constraint("uq_users_username", "users", ["username"])
    op.create_unique_constraint("uq_users_email", "users", ["email"])

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text()),
        sa.Column("make", sa.Text()),
        sa.Column("model", sa.Text()),
        sa.Column("year", sa.Integer()),
        sa.Column("type", sa.Enum(*VEHICLE_TYPES, name="vehicle_type"), nullable=False),
        sa.Column("image", sa.Text(), nullable=False, server_default="default.png"),
        *_stamps(),
    )
    op.create_index("ix_vehicles_user_id", "vehicles", ["user_id"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("detail", sa.Text()),
        sa.Column("type", sa.Enum(*EVENT_TYPES, name="event_type"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("odometer", sa.Integer()),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_stamps(),
    )
    op.create_index("ix_events_user_id", "events", ["user_id"])
    op.create_index("ix_events_vehicle_id", "events", ["vehicle_id"])
    op.create_index("ix_events_created_at", "events", ["created_at"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_stamps(),
    )
    op.create_index("ix_comments_event_id", "comments", ["event_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])

    op.create_table(
        "images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("image", sa.Text(), nullable=False),
        *_stamps(),
    )
    op.create_index("ix_images_event_id", "images", ["event_id"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        *_stamps(),
        sa.UniqueConstraint("user_id", "event_id", name="uq_likes_user_event"),
    )
    op.create_index("ix_likes_user_id", "likes", ["user_id"])
    op.create_index("ix_likes_event_id", "likes", ["event_id"])


def downgrade() -> None:
    op.drop_table("likes")
    op.drop_table("images")
    op.drop_table("comments")
    op.drop_index("ix_events_created_at", table_name="events")
    op.drop_table("events")
    op.drop_table("vehicles")
    op.drop_constraint("uq_users_email", "users", type_="unique")
    op.drop_constraint("uq_users_username", "users", type_="unique")
    op.drop_table("users")
    sa.Enum(name="event_type").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="vehicle_type").drop(op.get_bind(), checkfirst=True)
