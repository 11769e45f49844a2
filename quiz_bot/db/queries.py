from quiz_bot.db.database import get_db


async def ensure_user(user_id: int, username: str | None = None, first_name: str | None = None):
    """Create or update a user record."""
    db = await get_db()
    await db.execute(
        """INSERT INTO users (user_id, username, first_name)
           VALUES (?, ?, ?)
           ON CONFLICT(user_id) DO UPDATE SET
               username = excluded.username,
               first_name = excluded.first_name,
               last_active = datetime('now')""",
        (user_id, username, first_name),
    )
    await db.commit()


async def get_value(key: str) -> str | None:
    """Read a raw value from the key-value table."""
    db = await get_db()
    cursor = await db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
    row = await cursor.fetchone()
    return row["value"] if row else None


async def set_value(key: str, value: str) -> None:
    """Insert or overwrite a value in the key-value table."""
    db = await get_db()
    await db.execute(
        """INSERT INTO kv_store (key, value)
           VALUES (?, ?)
           ON CONFLICT(key) DO UPDATE SET
               value = excluded.value,
               updated_at = datetime('now')""",
        (key, value),
    )
    await db.commit()
