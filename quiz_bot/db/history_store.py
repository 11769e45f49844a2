import json
import logging

from quiz_bot.db.queries import get_value, set_value
from quiz_bot.quiz.history import HISTORY_KEY

logger = logging.getLogger(__name__)


class SqliteHistoryStore:
    """Question history kept as a JSON array in the kv_store table.

    Each user gets their own record under ``quiz_question_history:<user_id>``.
    """

    def __init__(self, user_id: int):
        self.key = f"{HISTORY_KEY}:{user_id}"

    async def load(self) -> list[str]:
        raw = await get_value(self.key)
        if raw is None:
            return []
        try:
            ids = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored history under %s is not valid JSON, starting fresh", self.key)
            return []
        if not isinstance(ids, list):
            logger.warning("Stored history under %s is not a list, starting fresh", self.key)
            return []
        return [str(qid) for qid in ids]

    async def save(self, ids: list[str]) -> None:
        await set_value(self.key, json.dumps(ids, ensure_ascii=False))
