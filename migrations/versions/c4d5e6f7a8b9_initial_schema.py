"""Initial schema

Revision ID: c4d5e6f7a8b9
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c4d5e6f7a8b9"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create base tables (no dependencies)
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_users_email"), ["email"], unique=True)

    op.create_table(
        "movies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("director", sa.String(length=255), nullable=False),
        sa.Column("release_year", sa.Integer(), nullable=False),
        sa.Column("genre", sa.JSON(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("cast", sa.JSON(), nullable=False),
        sa.Column("language", sa.String(length=100), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("budget", sa.BigInteger(), nullable=True),
        sa.Column("box_office", sa.BigInteger(), nullable=True),
        sa.Column("awards", sa.JSON(), nullable=False),
        sa.Column("is_released", sa.Boolean(), nullable=False),
        sa.Column("movie_of_the_week", sa.Boolean(), nullable=False),
        sa.Column("trailer_url", sa.String(length=500), nullable=True),
        sa.Column("portrait_image", sa.String(length=500), nullable=True),
        sa.Column("landscape_image", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("rating >= 0 AND rating <= 10", name="ck_movie_rating_range"),
        sa.CheckConstraint("duration >= 1 AND duration <= 600", name="ck_movie_duration_range"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("movies", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_movies_title"), ["title"], unique=False)
        batch_op.create_index(batch_op.f("ix_movies_release_year"), ["release_year"], unique=False)
        batch_op.create_index(
            "uq_movies_movie_of_the_week",
            ["movie_of_the_week"],
            unique=True,
            sqlite_where=sa.text("movie_of_the_week = 1"),
            postgresql_where=sa.text("movie_of_the_week"),
        )

    op.create_table(
        "streaming_services",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("base_url", sa.String(length=500), nullable=False),
        sa.Column("icon", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_streaming_services_name_lower",
        "streaming_services",
        [sa.text("lower(name)")],
        unique=True,
    )

    op.create_table(
        "homepage_sections",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("movie_ids", sa.JSON(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("homepage_sections", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_homepage_sections_order"), ["order"], unique=False)

    # Create tables with foreign keys
    op.create_table(
        "movie_streaming_platforms",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("movie_id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("url", sa.String(length=500), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["movie_id"], ["movies.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["streaming_services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("movie_streaming_platforms", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_movie_streaming_platforms_movie_id"), ["movie_id"], unique=False
        )
        batch_op.create_index(
            batch_op.f("ix_movie_streaming_platforms_service_id"), ["service_id"], unique=False
        )

    # movie_id on reviews and watchlists has no foreign key
    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("movie_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("review_text", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "movie_id", name="uq_review_user_movie"),
    )
    with op.batch_alter_table("reviews", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_reviews_user_id"), ["user_id"], unique=False)
        batch_op.create_index(batch_op.f("ix_reviews_movie_id"), ["movie_id"], unique=False)
        batch_op.create_index(batch_op.f("ix_reviews_is_active"), ["is_active"], unique=False)

    op.create_table(
        "watchlists",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("movie_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=False),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 10)", name="ck_watchlist_rating_range"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "movie_id", name="uq_watchlist_user_movie"),
    )
    with op.batch_alter_table("watchlists", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_watchlists_user_id"), ["user_id"], unique=False)
        batch_op.create_index(batch_op.f("ix_watchlists_movie_id"), ["movie_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table("watchlists", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_watchlists_movie_id"))
        batch_op.drop_index(batch_op.f("ix_watchlists_user_id"))
    op.drop_table("watchlists")

    with op.batch_alter_table("reviews", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_reviews_is_active"))
        batch_op.drop_index(batch_op.f("ix_reviews_movie_id"))
        batch_op.drop_index(batch_op.f("ix_reviews_user_id"))
    op.drop_table("reviews")

    with op.batch_alter_table("movie_streaming_platforms", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_movie_streaming_platforms_service_id"))
        batch_op.drop_index(batch_op.f("ix_movie_streaming_platforms_movie_id"))
    op.drop_table("movie_streaming_platforms")

    with op.batch_alter_table("homepage_sections", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_homepage_sections_order"))
    op.drop_table("homepage_sections")

    op.drop_index("uq_streaming_services_name_lower", table_name="streaming_services")
    op.drop_table("streaming_services")

    with op.batch_alter_table("movies", schema=None) as batch_op:
        batch_op.drop_index("uq_movies_movie_of_the_week")
        batch_op.drop_index(batch_op.f("ix_movies_release_year"))
        batch_op.drop_index(batch_op.f("ix_movies_title"))
    op.drop_table("movies")

    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_users_email"))
    op.drop_table("users")
