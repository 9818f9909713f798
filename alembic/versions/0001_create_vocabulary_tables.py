"""Create users, dictionary and user_progress tables"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_create_vocabulary_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "dictionary",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("term", sa.String(length=500), nullable=False),
        sa.Column("translation", sa.String(length=1000), nullable=False),
        sa.Column("example_sentence", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.CheckConstraint("length(term) > 0", name="ck_dictionary_term_not_empty"),
        sa.CheckConstraint("term = lower(term)", name="ck_dictionary_term_lowercase"),
        sa.CheckConstraint("length(translation) > 0", name="ck_dictionary_translation_not_empty"),
        sa.PrimaryKeyConstraint("id", name="pk_dictionary"),
    )
    op.create_index("ix_dictionary_term", "dictionary", ["term"], unique=True)
    op.create_index("ix_dictionary_created_at", "dictionary", ["created_at"], unique=False)

    op.create_table(
        "user_progress",
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("word_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("last_reviewed_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.CheckConstraint("status IN ('new', 'known', 'unknown')", name="ck_user_progress_status_domain"),
        sa.ForeignKeyConstraint(
            ["word_id"],
            ["dictionary.id"],
            name="fk_user_progress_word_id_dictionary",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("user_id", "word_id", name="pk_user_progress"),
    )
    op.create_index("ix_user_progress_user_id", "user_progress", ["user_id"], unique=False)
    op.create_index("ix_user_progress_word_id", "user_progress", ["word_id"], unique=False)
    op.create_index("ix_user_progress_status", "user_progress", ["status"], unique=False)
    op.create_index("ix_user_progress_last_reviewed_at", "user_progress", ["last_reviewed_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_user_progress_last_reviewed_at", table_name="user_progress")
    op.drop_index("ix_user_progress_status", table_name="user_progress")
    op.drop_index("ix_user_progress_word_id", table_name="user_progress")
    op.drop_index("ix_user_progress_user_id", table_name="user_progress")
    op.drop_table("user_progress")
    op.drop_index("ix_dictionary_created_at", table_name="dictionary")
    op.drop_index("ix_dictionary_term", table_name="dictionary")
    op.drop_table("dictionary")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
