"""JSON-array log of listener questions.

The whole file is read, extended and written back. Writers inside one
process are serialized by a lock and each write replaces the file
atomically; separate processes sharing the file can still lose updates.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiofiles

from techlife.questions.models import QuestionListing, QuestionSubmission, get_category_name
from techlife.utils.errors import StorageWriteError

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100

RU_MONTHS_SHORT = (
    "янв.",
    "февр.",
    "мар.",
    "апр.",
    "мая",
    "июн.",
    "июл.",
    "авг.",
    "сент.",
    "окт.",
    "нояб.",
    "дек.",
)


class QuestionStore:
    """Append-only store for listener questions.

    Example:
        >>> store = QuestionStore(Path("content/listener-questions.json"))
        >>> await store.append(submission)
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = asyncio.Lock()

    async def read_all(self) -> list[dict[str, Any]]:
        """Read every stored question.

        A missing or unreadable file counts as an empty log.
        """
        if not self.path.exists():
            return []

        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
            data = json.loads(content)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Question log %s unreadable, treating as empty: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning("Question log %s is not a JSON array, treating as empty", self.path)
            return []
        return data

    async def append(self, submission: QuestionSubmission) -> None:
        """Append one submission to the log, creating it if needed.

        Raises:
            StorageWriteError: If the log could not be written
        """
        async with self._lock:
            questions = await self.read_all()
            questions.append(submission.model_dump(by_alias=True))

            temp_file = self.path.with_suffix(self.path.suffix + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                async with aiofiles.open(temp_file, "w", encoding="utf-8") as f:
                    await f.write(json.dumps(questions, ensure_ascii=False, indent=2))
                await asyncio.to_thread(temp_file.replace, self.path)
            except OSError as e:
                logger.error("Error saving question to %s: %s", self.path, e)
                if temp_file.exists():
                    temp_file.unlink()
                raise StorageWriteError("Произошла ошибка при сохранении вопроса") from e

        logger.info("Stored question from %s (%d total)", submission.ip, len(questions))

    async def list_for_admin(self) -> list[QuestionListing]:
        """Stored questions prepared for display, newest first.

        Entries with missing or odd fields are still listed; entries with an
        unreadable timestamp go last.
        """
        listings = []
        for raw in await self.read_all():
            if not isinstance(raw, dict):
                logger.warning("Skipping non-object entry in question log: %r", raw)
                continue
            try:
                listing = QuestionListing.model_validate(raw)
            except ValueError as e:
                logger.warning("Skipping malformed stored question: %s", e)
                continue
            listings.append(_with_display_fields(listing))

        listings.sort(
            key=lambda item: (item.submitted_at is not None, item.submitted_at or _OLDEST),
            reverse=True,
        )
        return listings


_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _parse_timestamp(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _with_display_fields(listing: QuestionListing) -> QuestionListing:
    submitted_at = _parse_timestamp(listing.timestamp)
    if submitted_at is not None:
        formatted_date = (
            f"{submitted_at.day} {RU_MONTHS_SHORT[submitted_at.month - 1]} {submitted_at.year}"
        )
        formatted_time = submitted_at.strftime("%H:%M")
    else:
        formatted_date = formatted_time = ""

    return listing.model_copy(
        update={
            "category_name": get_category_name(listing.category),
            "question_preview": listing.question[:PREVIEW_LENGTH],
            "formatted_date": formatted_date,
            "formatted_time": formatted_time,
            "submitted_at": submitted_at,
        }
    )
