"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_SLOT = sa.text("status IN ('pending', 'confirmed')")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("session_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("email = lower(email)", name="ck_users_email_lowercase"),
        sa.CheckConstraint("role IN ('instructor', 'student')", name="ck_users_role_valid"),
        sa.CheckConstraint(
            "session_rate IS NULL OR session_rate >= 0",
            name="ck_users_session_rate_positive",
        ),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_audit_logs_user_id_users"),
            nullable=True,
        ),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("details", sa.String(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"])

    op.create_table(
        "availability_windows",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column(
            "instructor_id",
            sa.Uuid(),
            sa.ForeignKey(
                "users.id",
                ondelete="CASCADE",
                name="fk_availability_windows_instructor_id_users",
            ),
            nullable=False,
        ),
        sa.Column("day_of_week", sa.String(9), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.CheckConstraint("start_time < end_time", name="ck_availability_windows_time_order"),
    )
    op.create_index(
        "ix_availability_instructor_day",
        "availability_windows",
        ["instructor_id", "day_of_week"],
    )

    op.create_table(
        "sessions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "instructor_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="RESTRICT", name="fk_sessions_instructor_id_users"),
            nullable=False,
        ),
        sa.Column(
            "student_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="RESTRICT", name="fk_sessions_student_id_users"),
            nullable=False,
        ),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("location_type", sa.String(32), nullable=False),
        sa.Column("location_address", sa.String(255), nullable=True),
        sa.Column("location_lat", sa.Float(), nullable=True),
        sa.Column("location_lng", sa.Float(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("review_rating", sa.SmallInteger(), nullable=True),
        sa.Column("review_comment", sa.Text(), nullable=True),
        sa.Column("review_created_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("start_time < end_time", name="ck_sessions_time_order"),
        sa.CheckConstraint("duration_minutes > 0", name="ck_sessions_duration_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_sessions_status_valid",
        ),
        sa.CheckConstraint(
            "location_type IN ('instructor_location', 'student_location', 'other')",
            name="ck_sessions_location_type_valid",
        ),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'paid', 'refunded')",
            name="ck_sessions_payment_status_valid",
        ),
        sa.CheckConstraint(
            "review_rating IS NULL OR (review_rating BETWEEN 1 AND 5)",
            name="ck_sessions_review_rating_range",
        ),
    )
    op.create_index(
        "uq_sessions_active_slot",
        "sessions",
        ["instructor_id", "session_date", "start_time", "end_time"],
        unique=True,
        postgresql_where=ACTIVE_SLOT,
        sqlite_where=ACTIVE_SLOT,
    )
    op.create_index("ix_sessions_instructor_date", "sessions", ["instructor_id", "session_date"])
    op.create_index("ix_sessions_student_date", "sessions", ["student_id", "session_date"])
    op.create_index("ix_sessions_status", "sessions", ["status"])

    op.create_table(
        "pending_bookings",
        sa.Column("token", sa.Uuid(), primary_key=True),
        sa.Column(
            "instructor_id",
            sa.Uuid(),
            sa.ForeignKey(
                "users.id",
                ondelete="CASCADE",
                name="fk_pending_bookings_instructor_id_users",
            ),
            nullable=False,
        ),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("location_type", sa.String(32), nullable=False),
        sa.Column("location_address", sa.String(255), nullable=True),
        sa.Column("location_lat", sa.Float(), nullable=True),
        sa.Column("location_lng", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_pending_bookings_expires_at", "pending_bookings", ["expires_at"])


def downgrade():
    op.drop_index("ix_pending_bookings_expires_at", table_name="pending_bookings")
    op.drop_table("pending_bookings")
    op.drop_index("ix_sessions_status", table_name="sessions")
    op.drop_index("ix_sessions_student_date", table_name="sessions")
    op.drop_index("ix_sessions_instructor_date", table_name="sessions")
    op.drop_index("uq_sessions_active_slot", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("ix_availability_instructor_day", table_name="availability_windows")
    op.drop_table("availability_windows")
    op.drop_index("ix_audit_logs_timestamp", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
