"""initial schema for Lifebook

Revision ID: 0001_initial
Revises:
Create Date: 2026-03-01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def _owner(unique: bool = False):
    return sa.Column(
        "user_id",
        sa.Integer(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=not unique,
        unique=unique,
    )


def _json_list(name: str):
    return sa.Column(name, sa.Text(), nullable=False, server_default="[]")


def _upload_columns():
    return [
        sa.Column("original_name", sa.String(length=255), nullable=False),
        sa.Column("stored_name", sa.String(length=255), nullable=False),
        sa.Column("mime_type", sa.String(length=128)),
        sa.Column("size_bytes", sa.Integer(), nullable=False, server_default="0"),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("password_hash", sa.String(length=255), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("mood", sa.String(length=32)),
        _json_list("tags"),
        *_timestamps(),
    )
    op.create_index("ix_journal_entries_user_created_at", "journal_entries", ["user_id", "created_at"])

    op.create_table(
        "people",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("relationship", sa.String(length=128)),
        sa.Column("how_met", sa.Text()),
        _json_list("interests"),
        _json_list("personality_traits"),
        sa.Column("conversation_style", sa.String(length=64)),
        _json_list("shared_experiences"),
        _json_list("story_preferences"),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_people_user_name", "people", ["user_id", "name"])
    for table in ("person_text_uploads", "person_topics", "person_inside_jokes"):
        columns = {
            "person_text_uploads": _upload_columns(),
            "person_topics": [
                sa.Column("topic", sa.Text(), nullable=False),
                sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.false()),
            ],
            "person_inside_jokes": [
                sa.Column("content", sa.Text(), nullable=False),
                sa.Column("context", sa.Text()),
            ],
        }[table]
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            _owner(),
            sa.Column(
                "person_id", sa.Integer(), sa.ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True
            ),
            *columns,
            *_timestamps(),
        )

    op.create_table(
        "stories",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("journal_entry_id", sa.Integer(), sa.ForeignKey("journal_entries.id", ondelete="SET NULL")),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("tone", sa.String(length=64), nullable=False, server_default="casual"),
        sa.Column("duration_seconds", sa.Integer(), nullable=False, server_default="30"),
        _json_list("tags"),
        sa.Column("times_told", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("success_rating", sa.Integer()),
        *_timestamps(),
    )
    op.create_index("ix_stories_user_created_at", "stories", ["user_id", "created_at"])
    op.create_table(
        "story_people",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("story_id", sa.Integer(), sa.ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("person_id", sa.Integer(), sa.ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("story_id", "person_id", name="uq_story_people_pair"),
    )
    op.create_table(
        "practice_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("story_id", sa.Integer(), sa.ForeignKey("stories.id", ondelete="SET NULL")),
        sa.Column("session_type", sa.String(length=64), nullable=False),
        sa.Column("feedback", sa.Text()),
        sa.Column("rating", sa.Integer()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        "conversation_starters",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("story_id", sa.Integer(), sa.ForeignKey("stories.id", ondelete="SET NULL")),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("context", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "jokes",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=64)),
        sa.Column("difficulty", sa.String(length=16)),
        sa.Column("times_told", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("success_rating", sa.Integer()),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_table(
        "joke_people",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("joke_id", sa.Integer(), sa.ForeignKey("jokes.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("person_id", sa.Integer(), sa.ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("joke_id", "person_id", name="uq_joke_people_pair"),
    )

    op.create_table(
        "wellness_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("date", sa.Date(), nullable=False),
        _json_list("supplements"),
        _json_list("medication"),
        _json_list("diet_items"),
        sa.Column("diet_quality", sa.Integer()),
        sa.Column("exercise_minutes", sa.Integer()),
        sa.Column("exercise_intensity", sa.Integer()),
        sa.Column("sleep_quality", sa.Integer()),
        sa.Column("sleep_score", sa.Integer()),
        sa.Column("weight_kg", sa.Float()),
        sa.Column("height_cm", sa.Float()),
        sa.Column("bmi", sa.Float()),
        sa.Column("body_fat_percent", sa.Float()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "date", name="uq_wellness_entries_user_date"),
    )
    op.create_index("ix_wellness_entries_user_date", "wellness_entries", ["user_id", "date"])
    op.create_table(
        "wellness_presets",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(unique=True),
        _json_list("supplements"),
        _json_list("medication"),
        _json_list("diet_items"),
        sa.Column("weight_kg", sa.Float()),
        sa.Column("height_cm", sa.Float()),
        sa.Column("bmi", sa.Float()),
        sa.Column("body_fat_percent", sa.Float()),
        *_timestamps(),
    )

    op.create_table(
        "ai_conversations",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(length=255)),
        sa.Column("summary", sa.Text()),
        *_timestamps(),
    )
    op.create_table(
        "ai_messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column(
            "conversation_id", sa.Integer(), sa.ForeignKey("ai_conversations.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_ai_messages_conversation_created", "ai_messages", ["conversation_id", "created_at"])

    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("area", sa.String(length=64)),
        sa.Column("target_date", sa.Date()),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="active"),
        *_timestamps(),
    )
    op.create_table(
        "beliefs",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("current_belief", sa.Text(), nullable=False),
        sa.Column("desired_belief", sa.Text()),
        sa.Column("change_plan", sa.Text()),
        *_timestamps(),
    )
    op.create_table(
        "anxiety_triggers",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=64)),
        sa.Column("intensity", sa.Integer()),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_table(
        "protocols",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("when_to_use", sa.Text()),
        _json_list("steps"),
        sa.Column("cadence", sa.String(length=64)),
        *_timestamps(),
    )
    op.create_table(
        "identity_visions",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(unique=True),
        sa.Column("vision", sa.Text()),
        _json_list("core_values"),
        _json_list("principles"),
        *_timestamps(),
    )
    op.create_table(
        "dating_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(unique=True),
        sa.Column("partner_vision", sa.Text()),
        _json_list("must_haves"),
        _json_list("nice_to_haves"),
        _json_list("red_flags"),
        sa.Column("self_reflection_answers", sa.Text(), nullable=False, server_default="{}"),
        *_timestamps(),
    )
    op.create_table(
        "genome_uploads",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        *_upload_columns(),
        *_timestamps(),
    )
    op.create_table(
        "health_intake_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner(),
        sa.Column("source", sa.String(length=64), nullable=False),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column("event_date", sa.Date()),
        sa.Column("payload", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_health_intake_events_user_date", "health_intake_events", ["user_id", "event_date"])


def downgrade():
    for table in (
        "health_intake_events",
        "genome_uploads",
        "dating_profiles",
        "identity_visions",
        "protocols",
        "anxiety_triggers",
        "beliefs",
        "goals",
        "ai_messages",
        "ai_conversations",
        "wellness_presets",
        "wellness_entries",
        "joke_people",
        "jokes",
        "conversation_starters",
        "practice_sessions",
        "story_people",
        "stories",
        "person_inside_jokes",
        "person_topics",
        "person_text_uploads",
        "people",
        "journal_entries",
        "users",
    ):
        op.drop_table(table)
