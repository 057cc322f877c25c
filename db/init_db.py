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
-- Users table: farm owners who can sign in
CREATE TABLE IF NOT EXISTS users (
    user_id         SERIAL PRIMARY KEY,
    email           VARCHAR(255) UNIQUE NOT NULL,
    password_hash   CHAR(64) NOT NULL,
    first_name      VARCHAR(100),
    last_name       VARCHAR(100),
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Livestock: every animal belongs to one owner
CREATE TABLE IF NOT EXISTS livestock (
    livestock_id    SERIAL PRIMARY KEY,
    owner_id        INT NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
    tag_number      VARCHAR(50),
    species         VARCHAR(50),
    breed           VARCHAR(50),
    sex             VARCHAR(10),
    birth_date      DATE,
    weight          NUMERIC(8,2),
    notes           TEXT
);

CREATE TABLE IF NOT EXISTS vaccinations (
    vacc_id         SERIAL PRIMARY KEY,
    animal_id       INT NOT NULL REFERENCES livestock(livestock_id) ON DELETE CASCADE,
    vac_type        VARCHAR(100) NOT NULL,
    date_given      DATE NOT NULL DEFAULT CURRENT_DATE
);

CREATE TABLE IF NOT EXISTS vetvisit (
    visit_id        SERIAL PRIMARY KEY,
    livestock_id    INT NOT NULL REFERENCES livestock(livestock_id) ON DELETE CASCADE,
    visit_date      DATE NOT NULL DEFAULT CURRENT_DATE,
    vet_name        VARCHAR(100),
    cost            NUMERIC(10,2),
    reason          VARCHAR(255),
    notes           TEXT
);

CREATE TABLE IF NOT EXISTS pastures (
    pasture_id      SERIAL PRIMARY KEY,
    owner_id        INT NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
    name            VARCHAR(100),
    acreage         NUMERIC(8,2),
    notes           TEXT
);

CREATE TABLE IF NOT EXISTS pasture_maintenance (
    maintenance_id      SERIAL PRIMARY KEY,
    location            INT NOT NULL REFERENCES pastures(pasture_id) ON DELETE CASCADE,
    maintenance_type    VARCHAR(100) NOT NULL,
    cost                NUMERIC(10,2),
    notes               TEXT
);

CREATE TABLE IF NOT EXISTS medication (
    med_id          SERIAL PRIMARY KEY,
    livestock_id    INT NOT NULL REFERENCES livestock(livestock_id) ON DELETE CASCADE,
    medication_name VARCHAR(100) NOT NULL,
    start_date      DATE,
    end_date        DATE,
    med_interval    VARCHAR(50)
);

-- Calves extend a livestock row (calf_id is the calf's livestock_id)
CREATE TABLE IF NOT EXISTS calves (
    calf_id             INT PRIMARY KEY REFERENCES livestock(livestock_id) ON DELETE CASCADE,
    cow_id              INT REFERENCES livestock(livestock_id),
    sired_id            INT REFERENCES livestock(livestock_id),
    calf_subtype        VARCHAR(50),
    vaccine_complete    BOOLEAN DEFAULT FALSE,
    water_complete      BOOLEAN DEFAULT FALSE,
    feeder_complete     BOOLEAN DEFAULT FALSE
);

-- Indexes for the owner-scoped paged queries
CREATE INDEX IF NOT EXISTS idx_livestock_owner ON livestock(owner_id);
CREATE INDEX IF NOT EXISTS idx_pastures_owner ON pastures(owner_id);
CREATE INDEX IF NOT EXISTS idx_vaccinations_animal ON vaccinations(animal_id);
CREATE INDEX IF NOT EXISTS idx_vetvisit_livestock ON vetvisit(livestock_id);
CREATE INDEX IF NOT EXISTS idx_medication_livestock ON medication(livestock_id);
"""


def create_tables(database: Database) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        database.execute(SCHEMA_SQL)
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    db = Database.connect()
    try:
        create_tables(db)
    finally:
        db.close()
    print("Database schema created successfully.")
