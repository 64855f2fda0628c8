from tortoise import BaseDBAsyncClient

RUN_IN_TRANSACTION = True


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "users" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "username" VARCHAR(255),
    "name" VARCHAR(255),
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);
COMMENT ON TABLE "users" IS 'App user.';
CREATE TABLE IF NOT EXISTS "streaks" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "current_streak" INT NOT NULL DEFAULT 0,
    "longest_streak" INT NOT NULL DEFAULT 0,
    "last_activity_date" DATE,
    "streak_start_date" DATE,
    "is_frozen" BOOL NOT NULL DEFAULT False,
    "freezes_available" INT NOT NULL DEFAULT 0,
    "version" INT NOT NULL DEFAULT 0,
    "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "user_id" INT NOT NULL UNIQUE REFERENCES "users" ("id") ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS "idx_streaks_last_ac_5c1f0e" ON "streaks" ("last_activity_date");
CREATE TABLE IF NOT EXISTS "challenges" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "name" VARCHAR(255) NOT NULL,
    "description" TEXT,
    "type" VARCHAR(20) NOT NULL,
    "goal_amount" DOUBLE PRECISION NOT NULL,
    "start_date" TIMESTAMPTZ NOT NULL,
    "end_date" TIMESTAMPTZ NOT NULL,
    "is_public" BOOL NOT NULL DEFAULT False,
    "winners_announced" BOOL NOT NULL DEFAULT False,
    "ending_soon_notified_at" TIMESTAMPTZ,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "creator_id" INT NOT NULL REFERENCES "users" ("id") ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS "idx_challenges_start_d_3b8a21" ON "challenges" ("start_date");
CREATE INDEX IF NOT EXISTS "idx_challenges_end_dat_9d4e77" ON "challenges" ("end_date");
COMMENT ON COLUMN "challenges"."type" IS 'PUSH_UPS: PUSH_UPS\nRUNNING: RUNNING\nSIT_UPS: SIT_UPS';
CREATE TABLE IF NOT EXISTS "challenge_participants" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "current_progress" DOUBLE PRECISION NOT NULL DEFAULT 0,
    "joined_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "last_updated" TIMESTAMPTZ,
    "version" INT NOT NULL DEFAULT 0,
    "challenge_id" INT NOT NULL REFERENCES "challenges" ("id") ON DELETE CASCADE,
    "user_id" INT NOT NULL REFERENCES "users" ("id") ON DELETE CASCADE,
    CONSTRAINT "uid_challenge_p_challen_7a2c4f" UNIQUE ("challenge_id", "user_id")
);
CREATE TABLE IF NOT EXISTS "notifications" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "type" VARCHAR(40) NOT NULL,
    "title" VARCHAR(255) NOT NULL,
    "content" TEXT NOT NULL,
    "is_read" BOOL NOT NULL DEFAULT False,
    "dedupe_key" VARCHAR(255) NOT NULL UNIQUE,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "user_id" INT NOT NULL REFERENCES "users" ("id") ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS "aerich" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "version" VARCHAR(255) NOT NULL,
    "app" VARCHAR(100) NOT NULL,
    "content" JSONB NOT NULL
);"""


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        DROP TABLE IF EXISTS "notifications";
        DROP TABLE IF EXISTS "challenge_participants";
        DROP TABLE IF EXISTS "challenges";
        DROP TABLE IF EXISTS "streaks";
        DROP TABLE IF EXISTS "users";
    """
