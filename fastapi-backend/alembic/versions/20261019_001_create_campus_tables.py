"""
Create accounts, complaints, status history, events and feedback tables

Revision ID: 20261019_001_campus_tables
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op

revision = "20261019_001_campus_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # User and admin credentials share one table; uniqueness is per kind.
    op.execute(
        r"""
    CREATE TABLE IF NOT EXISTS accounts (
        id VARCHAR(36) PRIMARY KEY,
        kind VARCHAR(16) NOT NULL,
        username VARCHAR NOT NULL,
        email VARCHAR NOT NULL,
        password_hash VARCHAR NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        CONSTRAINT uq_accounts_kind_username UNIQUE (kind, username),
        CONSTRAINT uq_accounts_kind_email UNIQUE (kind, email)
    )
    """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_accounts_kind ON accounts (kind)")

    op.execute(
        r"""
    CREATE TABLE IF NOT EXISTS complaints (
        id VARCHAR(36) PRIMARY KEY,
        username VARCHAR NOT NULL,
        complaint_text TEXT NOT NULL,
        date TIMESTAMPTZ NOT NULL,
        location VARCHAR NOT NULL,
        sub_location VARCHAR,
        room_no VARCHAR,
        image_data BYTEA,
        image_content_type VARCHAR,
        status VARCHAR NOT NULL DEFAULT 'Yet to Begin',
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_complaints_date ON complaints (date)")

    op.execute(
        r"""
    CREATE TABLE IF NOT EXISTS status_records (
        id SERIAL PRIMARY KEY,
        complaint_id VARCHAR(36) NOT NULL REFERENCES complaints(id),
        complaint_text TEXT NOT NULL,
        location VARCHAR NOT NULL,
        sub_location VARCHAR,
        status VARCHAR NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """
    )
    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_status_records_complaint_id ON status_records (complaint_id)"
    )
    op.execute("COMMENT ON TABLE status_records IS 'Append-only complaint status history'")

    op.execute(
        r"""
    CREATE TABLE IF NOT EXISTS events (
        id SERIAL PRIMARY KEY,
        date VARCHAR NOT NULL,
        department VARCHAR NOT NULL,
        title VARCHAR NOT NULL,
        venue VARCHAR NOT NULL,
        time VARCHAR NOT NULL,
        time_period VARCHAR(2) NOT NULL CHECK (time_period IN ('AM', 'PM')),
        description TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """
    )

    op.execute(
        r"""
    CREATE TABLE IF NOT EXISTS feedback (
        id SERIAL PRIMARY KEY,
        date VARCHAR NOT NULL,
        description TEXT NOT NULL,
        rating DOUBLE PRECISION NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """
    )


def downgrade():
    op.execute("DROP TABLE IF EXISTS feedback")
    op.execute("DROP TABLE IF EXISTS events")
    op.execute("DROP TABLE IF EXISTS status_records")
    op.execute("DROP TABLE IF EXISTS complaints")
    op.execute("DROP TABLE IF EXISTS accounts")
