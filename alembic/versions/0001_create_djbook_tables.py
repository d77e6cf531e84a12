from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("dj_profile_id", sa.String(), nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "dj_profiles",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("genres", sa.JSON(), nullable=False),
        sa.Column("event_types", sa.JSON(), nullable=False),
        sa.Column("min_fee", sa.Integer(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("instagram", sa.String(), nullable=True),
        sa.Column("youtube", sa.String(), nullable=True),
        sa.Column("soundcloud", sa.String(), nullable=True),
        sa.Column("gallery", sa.JSON(), nullable=False),
        sa.Column("videos", sa.JSON(), nullable=False),
        sa.Column("profile_image", sa.String(), nullable=False),
        sa.Column("cover_image", sa.String(), nullable=False),
        sa.Column("plan", sa.String(), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        sa.Column("approval_status", sa.String(), nullable=False),
        sa.Column("avg_rating", sa.Float(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("live_venue_name", sa.String(), nullable=True),
        sa.Column("live_latitude", sa.Float(), nullable=True),
        sa.Column("live_longitude", sa.Float(), nullable=True),
        sa.Column("live_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_dj_profiles_user_id", "dj_profiles", ["user_id"], unique=True)
    op.create_index("ix_dj_profiles_slug", "dj_profiles", ["slug"], unique=True)
    op.create_index("ix_dj_profiles_city", "dj_profiles", ["city"], unique=False)
    op.create_index("ix_dj_profiles_approval_status", "dj_profiles", ["approval_status"], unique=False)

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("dj_profile_id", sa.String(), nullable=False),
        sa.Column("dj_name", sa.String(), nullable=False),
        sa.Column("dj_profile_image", sa.String(), nullable=False),
        sa.Column("customer_id", sa.String(), nullable=False),
        sa.Column("customer_name", sa.String(), nullable=False),
        sa.Column("customer_phone", sa.String(), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_bookings_dj_profile_id", "bookings", ["dj_profile_id"], unique=False)
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"], unique=False)
    op.create_index("ix_bookings_event_date", "bookings", ["event_date"], unique=False)
    op.create_index("ix_bookings_status", "bookings", ["status"], unique=False)

    op.create_table(
        "calendar_entries",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("dj_profile_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("booking_id", sa.String(), nullable=True),
        sa.UniqueConstraint("dj_profile_id", "date", name="uq_calendar_entries_dj_date"),
        sa.CheckConstraint("status <> 'AVAILABLE'", name="ck_calendar_entries_not_available"),
        sa.CheckConstraint(
            "(source = 'PLATFORM' AND booking_id IS NOT NULL) OR (source = 'MANUAL' AND booking_id IS NULL)",
            name="ck_calendar_entries_source_link",
        ),
    )
    op.create_index("ix_calendar_entries_dj_profile_id", "calendar_entries", ["dj_profile_id"], unique=False)
    op.create_index("ix_calendar_entries_booking_id", "calendar_entries", ["booking_id"], unique=False)

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("dj_profile_id", sa.String(), nullable=False),
        sa.Column("author_name", sa.String(), nullable=False),
        sa.Column("author_image", sa.String(), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )
    op.create_index("ix_reviews_dj_profile_id", "reviews", ["dj_profile_id"], unique=False)


def downgrade():
    op.drop_index("ix_reviews_dj_profile_id", table_name="reviews")
    op.drop_table("reviews")

    op.drop_index("ix_calendar_entries_booking_id", table_name="calendar_entries")
    op.drop_index("ix_calendar_entries_dj_profile_id", table_name="calendar_entries")
    op.drop_table("calendar_entries")

    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_event_date", table_name="bookings")
    op.drop_index("ix_bookings_customer_id", table_name="bookings")
    op.drop_index("ix_bookings_dj_profile_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_dj_profiles_approval_status", table_name="dj_profiles")
    op.drop_index("ix_dj_profiles_city", table_name="dj_profiles")
    op.drop_index("ix_dj_profiles_slug", table_name="dj_profiles")
    op.drop_index("ix_dj_profiles_user_id", table_name="dj_profiles")
    op.drop_table("dj_profiles")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
