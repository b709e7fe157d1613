"""create initial tables

Revision ID: 20261018_01
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261018_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "upload_codes",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("code", sa.String(), nullable=False, unique=True),
        sa.Column("max_uses", sa.Integer(), nullable=False),
        sa.Column("current_uses", sa.Integer(), nullable=False),
        sa.Column("max_file_size_mb", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_upload_codes_code", "upload_codes", ["code"])
    op.create_index("ix_upload_codes_expires_at", "upload_codes", ["expires_at"])

    op.create_table(
        "files",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("original_name", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("storage_key", sa.String(), nullable=False),
        sa.Column("byte_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(), nullable=True),
        sa.Column("uploaded_by", sa.String(), nullable=False),
        sa.Column(
            "upload_code_id",
            sa.String(),
            sa.ForeignKey("upload_codes.id"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_files_expires_at", "files", ["expires_at"])
    op.create_index("idx_files_created_at", "files", ["created_at"])

    op.create_table(
        "download_links",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "file_id",
            sa.String(),
            sa.ForeignKey("files.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("code", sa.String(), nullable=False, unique=True),
        sa.Column("max_downloads", sa.Integer(), nullable=True),
        sa.Column("current_downloads", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_download_links_code", "download_links", ["code"])
    op.create_index("ix_download_links_file_id", "download_links", ["file_id"])

    op.create_table(
        "discord_panels",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("guild_id", sa.String(), nullable=False),
        sa.Column("channel_id", sa.String(), nullable=False),
        sa.Column("message_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("guild_id", "channel_id"),
    )

    op.create_table(
        "settings",
        sa.Column("key", sa.String(), primary_key=True, nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("settings")
    op.drop_table("discord_panels")
    op.drop_index("ix_download_links_file_id", table_name="download_links")
    op.drop_index("ix_download_links_code", table_name="download_links")
    op.drop_table("download_links")
    op.drop_index("idx_files_created_at", table_name="files")
    op.drop_index("idx_files_expires_at", table_name="files")
    op.drop_table("files")
    op.drop_index("ix_upload_codes_expires_at", table_name="upload_codes")
    op.drop_index("ix_upload_codes_code", table_name="upload_codes")
    op.drop_table("upload_codes")
