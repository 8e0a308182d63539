"""Initial schema and seed data for Streamo

Revision ID: 20261018_000000
Revises: None
Create Date: 2026-10-18 00:00:00.000000

This is the initial migration that creates all tables of the Streamo back-office
and seeds the default site settings. This includes:
- Accounts and invitations
- Catalogue tables (releases, tracks and videos, stores)
- Royalty tables (CSV uploads, transactions, withdrawals)
- Notifications and site settings

Revision format: YYYYMMDD_HHMMSS_description

"""

from datetime import datetime, timezone
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables and seed initial data."""

    # Create st_users table
    op.create_table(
        "st_users",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(32), nullable=False, server_default="artist"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("split", sa.Float(), nullable=False, server_default="100"),
        sa.Column("profile_image", sa.String(512), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(32), nullable=True),
        sa.Column("introduction", sa.String(), nullable=True),
        sa.Column("country", sa.String(128), nullable=True),
        sa.Column("city", sa.String(128), nullable=True),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("address", sa.String(512), nullable=True),
        sa.Column("current_distributor", sa.String(255), nullable=True),
        sa.Column("distributor_number", sa.String(128), nullable=True),
        sa.Column("youtube", sa.String(512), nullable=True),
        sa.Column("facebook", sa.String(512), nullable=True),
        sa.Column("tiktok", sa.String(512), nullable=True),
        sa.Column("instagram", sa.String(512), nullable=True),
        sa.Column("document_type", sa.String(64), nullable=True),
        sa.Column("document_id", sa.String(128), nullable=True),
        sa.Column("document_picture", sa.String(512), nullable=True),
        sa.Column("invited_by", sa.String(32), nullable=True),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column("last_password_changed", sa.DateTime(), nullable=True),
        sa.Column("reset_code_hash", sa.String(255), nullable=True),
        sa.Column("reset_code_expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_st_users_email", "email", unique=True),
        sa.Index("ix_st_users_role", "role"),
        sa.Index("ix_st_users_is_approved", "is_approved"),
        sa.Index("ix_st_users_invited_by", "invited_by"),
        sa.Index("ix_st_users_created_at", "created_at"),
    )

    # Create st_releases table
    op.create_table(
        "st_releases",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("artist", sa.String(255), nullable=False),
        sa.Column("cover_art", sa.String(512), nullable=True),
        sa.Column("release_type", sa.String(16), nullable=False, server_default="Single"),
        sa.Column("format", sa.String(16), nullable=False, server_default="Digital"),
        sa.Column("genre", sa.String(128), nullable=True),
        sa.Column("language", sa.String(64), nullable=True),
        sa.Column("upc", sa.String(32), nullable=True),
        sa.Column("release_date", sa.Date(), nullable=True),
        sa.Column("featured_artist", sa.String(255), nullable=True),
        sa.Column("remixer_artist", sa.String(255), nullable=True),
        sa.Column("composer", sa.String(255), nullable=True),
        sa.Column("lyricist", sa.String(255), nullable=True),
        sa.Column("music_producer", sa.String(255), nullable=True),
        sa.Column("publisher", sa.String(255), nullable=True),
        sa.Column("singer", sa.String(255), nullable=True),
        sa.Column("music_director", sa.String(255), nullable=True),
        sa.Column("copyright_header", sa.String(255), nullable=True),
        sa.Column("stores", sa.JSON(), nullable=False),
        sa.Column("tracks", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="submitted"),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_st_releases_user_id", "user_id"),
        sa.Index("ix_st_releases_upc", "upc"),
        sa.Index("ix_st_releases_status", "status"),
        sa.Index("ix_st_releases_created_at", "created_at"),
    )

    # Create st_tracks table (audio tracks and music videos)
    op.create_table(
        "st_tracks",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("media_type", sa.String(8), nullable=False, server_default="audio"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("artist", sa.String(255), nullable=False),
        sa.Column("cover_art", sa.String(512), nullable=True),
        sa.Column("media_file", sa.String(512), nullable=True),
        sa.Column("release_type", sa.String(16), nullable=True),
        sa.Column("format", sa.String(16), nullable=True),
        sa.Column("genre", sa.String(128), nullable=True),
        sa.Column("language", sa.String(64), nullable=True),
        sa.Column("label", sa.String(255), nullable=True),
        sa.Column("recording_year", sa.Integer(), nullable=True),
        sa.Column("release_date", sa.Date(), nullable=True),
        sa.Column("isrc", sa.String(32), nullable=True),
        sa.Column("upc", sa.String(32), nullable=True),
        sa.Column("version", sa.String(64), nullable=True),
        sa.Column("content_rating", sa.String(32), nullable=True),
        sa.Column("lyrics", sa.String(), nullable=True),
        sa.Column("pricing", sa.String(64), nullable=True),
        sa.Column("credits", sa.JSON(), nullable=False),
        sa.Column("stores", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="submitted"),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_st_tracks_user_id", "user_id"),
        sa.Index("ix_st_tracks_media_type", "media_type"),
        sa.Index("ix_st_tracks_isrc", "isrc"),
        sa.Index("ix_st_tracks_status", "status"),
        sa.Index("ix_st_tracks_created_at", "created_at"),
    )

    # Create st_stores table
    op.create_table(
        "st_stores",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("icon", sa.String(512), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="Active"),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("videos_only", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("color", sa.String(16), nullable=True),
        sa.Column("url", sa.String(512), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_st_stores_name", "name", unique=True),
        sa.Index("ix_st_stores_status", "status"),
        sa.Index("ix_st_stores_category", "category"),
    )

    # Create st_csv_uploads table
    op.create_table(
        "st_csv_uploads",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("original_file_name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(512), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("mime_type", sa.String(128), nullable=False, server_default="text/csv"),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("processed_rows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_rows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("uploaded_by", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_st_csv_uploads_status", "status"),
        sa.Index("ix_st_csv_uploads_uploaded_by", "uploaded_by"),
        sa.Index("ix_st_csv_uploads_created_at", "created_at"),
    )

    # Create st_transactions table
    op.create_table(
        "st_transactions",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("csv_upload_id", sa.String(32), nullable=True),
        sa.Column("row_number", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("transaction_id", sa.String(128), nullable=False),
        sa.Column("title", sa.String(512), nullable=True),
        sa.Column("artist", sa.String(512), nullable=True),
        sa.Column("isrc", sa.String(32), nullable=True),
        sa.Column("upc", sa.String(32), nullable=True),
        sa.Column("label", sa.String(255), nullable=True),
        sa.Column("service_type", sa.String(128), nullable=True),
        sa.Column("territory", sa.String(64), nullable=True),
        sa.Column("transaction_type", sa.String(64), nullable=False, server_default="stream"),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("revenue", sa.Float(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(8), nullable=False, server_default="USD"),
        sa.Column("revenue_usd", sa.Float(), nullable=False, server_default="0"),
        sa.Column("transaction_date", sa.DateTime(), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("raw_data", sa.JSON(), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_st_transactions_csv_upload_id", "csv_upload_id"),
        sa.Index("ix_st_transactions_transaction_id", "transaction_id"),
        sa.Index("ix_st_transactions_isrc", "isrc"),
        sa.Index("ix_st_transactions_service_type", "service_type"),
        sa.Index("ix_st_transactions_territory", "territory"),
        sa.Index("ix_st_transactions_transaction_date", "transaction_date"),
        sa.Index("ix_st_transactions_user_id", "user_id"),
        sa.Index("ix_st_transactions_created_at", "created_at"),
    )

    # Create st_withdrawals table
    op.create_table(
        "st_withdrawals",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("payment_method", sa.String(16), nullable=False),
        sa.Column("bank_details", sa.JSON(), nullable=True),
        sa.Column("mobile_number", sa.String(32), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("processed_by", sa.String(32), nullable=True),
        sa.Column("processed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_st_withdrawals_user_id", "user_id"),
        sa.Index("ix_st_withdrawals_status", "status"),
        sa.Index("ix_st_withdrawals_created_at", "created_at"),
    )

    # Create st_notifications table
    op.create_table(
        "st_notifications",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False, server_default="info"),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("related_to", sa.String(16), nullable=False, server_default="general"),
        sa.Column("related_item_id", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_st_notifications_user_id", "user_id"),
        sa.Index("ix_st_notifications_is_read", "is_read"),
        sa.Index("ix_st_notifications_created_at", "created_at"),
    )

    # Create st_invitations table
    op.create_table(
        "st_invitations",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("code", sa.String(16), nullable=False),
        sa.Column("created_by", sa.String(32), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("used_by", sa.String(32), nullable=True),
        sa.Column("used_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_st_invitations_code", "code", unique=True),
        sa.Index("ix_st_invitations_created_by", "created_by"),
    )

    # Create st_site_settings table
    site_settings = op.create_table(
        "st_site_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("logo", sa.String(512), nullable=False),
        sa.Column("site_name", sa.String(255), nullable=False),
        sa.Column("primary_color", sa.String(7), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Seed the default branding
    op.bulk_insert(
        site_settings,
        [
            {
                "id": 1,
                "logo": "/images/logo.png",
                "site_name": "Music Dashboard",
                "primary_color": "#A365FF",
                "updated_at": datetime.now(timezone.utc).replace(tzinfo=None),
            }
        ],
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("st_site_settings")
    op.drop_table("st_invitations")
    op.drop_table("st_notifications")
    op.drop_table("st_withdrawals")
    op.drop_table("st_transactions")
    op.drop_table("st_csv_uploads")
    op.drop_table("st_stores")
    op.drop_table("st_tracks")
    op.drop_table("st_releases")
    op.drop_table("st_users")
