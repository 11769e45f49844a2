"""Bounded record of question ids already served to the user, newest first."""
import logging
from typing import Iterable, Protocol

logger = logging.getLogger(__name__)

HISTORY_KEY = "quiz_question_history"
MAX_HISTORY = 50


class HistoryBackend(Protocol):
    async def load(self) -> list[str]: ...

    async def save(self, ids: list[str]) -> None: ...


def merge_history(existing: Iterable[str], new_ids: Iterable[str], limit: int = MAX_HISTORY) -> list[str]:
    """Put new ids in front, keep the first occurrence of each id, cut to limit."""
    merged: list[str] = []
    seen: set[str] = set()
    for qid in [*new_ids, *existing]:
        if qid in seen:
            continue
        seen.add(qid)
        merged.append(qid)
    return merged[:limit]


class MemoryHistoryStore:
    """In-process backend. Nothing survives a restart."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids = list(ids)

    async def load(self) -> list[str]:
        return list(self._ids)

    async def save(self, ids: list[str]) -> None:
        self._ids = list(ids)


class QuestionHistory:
    """History operations over an injected backend."""

    def __init__(self, backend: HistoryBackend, limit: int = MAX_HISTORY):
        self.backend = backend
        self.limit = limit

    async def load(self) -> list[str]:
        return await self.backend.load()

    async def record(self, new_ids: Iterable[str]) -> list[str]:
        history = merge_history(await self.backend.load(), new_ids, self.limit)
        await self.backend.save(history)
        logger.debug("History now holds %d ids", len(history))
        return history
