"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import Database
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Employees: natural key `code`, email kept unique only by convention
CREATE TABLE IF NOT EXISTS employee (
    code            VARCHAR(50) PRIMARY KEY,
    name            VARCHAR(200) NOT NULL,
    email           VARCHAR(320),
    created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Deals: business engagements, optionally approved by an employee
CREATE TABLE IF NOT EXISTS deal (
    code            VARCHAR(50) PRIMARY KEY,
    name            VARCHAR(200) NOT NULL,
    approver_code   VARCHAR(50) REFERENCES employee(code),
    created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Barriers: information-access restrictions
CREATE TABLE IF NOT EXISTS barrier (
    code            VARCHAR(50) PRIMARY KEY,
    name            VARCHAR(200) NOT NULL,
    approver_code   VARCHAR(50) REFERENCES employee(code),
    created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Deal membership: employee's role on a deal
CREATE TABLE IF NOT EXISTS deal_members (
    id              SERIAL PRIMARY KEY,
    deal_code       VARCHAR(50) NOT NULL REFERENCES deal(code) ON DELETE CASCADE,
    member_code     VARCHAR(50) NOT NULL REFERENCES employee(code),
    role            VARCHAR(100) NOT NULL
);

-- Barrier membership: time-bounded status of an employee behind a barrier
CREATE TABLE IF NOT EXISTS barrier_members (
    id              SERIAL PRIMARY KEY,
    barrier_code    VARCHAR(50) NOT NULL REFERENCES barrier(code) ON DELETE CASCADE,
    member_code     VARCHAR(50) NOT NULL REFERENCES employee(code),
    on_date         DATE NOT NULL,
    off_date        DATE,
    status          VARCHAR(50) NOT NULL,
    deal_code       VARCHAR(50) REFERENCES deal(code) ON DELETE SET NULL,
    role            VARCHAR(100),
    CHECK (off_date IS NULL OR on_date <= off_date)
);

-- Indexes for faster lookups
CREATE INDEX IF NOT EXISTS idx_employee_email_lower ON employee (LOWER(email));
CREATE INDEX IF NOT EXISTS idx_deal_members_deal ON deal_members (deal_code);
CREATE INDEX IF NOT EXISTS idx_barrier_members_barrier ON barrier_members (barrier_code);
CREATE INDEX IF NOT EXISTS idx_barrier_members_member ON barrier_members (member_code);
"""


def create_tables(database: Database) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        with database.transaction() as tx:
            tx.execute(SCHEMA_SQL)
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    from config import DATABASE_URL

    db = Database(DATABASE_URL)
    db.open()
    try:
        create_tables(db)
    finally:
        db.close()
    print("✅ Database schema created successfully.")
