"""Tests for the question log."""

import asyncio
import json
from pathlib import Path

import pytest

from techlife.questions.models import QuestionSubmission, get_category_name
from techlife.questions.store import QuestionStore
from techlife.utils.errors import StorageWriteError


def make_submission(
    question: str = "Вопрос", timestamp: str = "2024-03-01T09:05:00.000Z", **kwargs
) -> QuestionSubmission:
    fields = {"name": "Анонимный слушатель", "ip": "127.0.0.1", **kwargs}
    return QuestionSubmission(timestamp=timestamp, question=question, **fields)


class TestQuestionStore:
    """Tests for QuestionStore."""

    @pytest.mark.asyncio
    async def test_read_missing_file(self, tmp_path: Path) -> None:
        assert await QuestionStore(tmp_path / "q.json").read_all() == []

    @pytest.mark.asyncio
    async def test_read_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "q.json"
        path.write_text("[{broken", encoding="utf-8")
        assert await QuestionStore(path).read_all() == []

    @pytest.mark.asyncio
    async def test_read_non_array(self, tmp_path: Path) -> None:
        path = tmp_path / "q.json"
        path.write_text('{"questions": []}', encoding="utf-8")
        assert await QuestionStore(path).read_all() == []

    @pytest.mark.asyncio
    async def test_append_creates_file_and_parents(self, tmp_path: Path) -> None:
        path = tmp_path / "content" / "q.json"
        store = QuestionStore(path)

        await store.append(make_submission(user_agent="Firefox"))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == [
            {
                "timestamp": "2024-03-01T09:05:00.000Z",
                "name": "Анонимный слушатель",
                "email": None,
                "question": "Вопрос",
                "category": "other",
                "ip": "127.0.0.1",
                "userAgent": "Firefox",
            }
        ]
        assert "Анонимный" in path.read_text(encoding="utf-8")
        assert not path.with_suffix(".json.tmp").exists()

    @pytest.mark.asyncio
    async def test_append_preserves_existing_entries(self, tmp_path: Path) -> None:
        path = tmp_path / "q.json"
        path.write_text(json.dumps([{"legacy": True}]), encoding="utf-8")

        await QuestionStore(path).append(make_submission())

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0] == {"legacy": True}
        assert len(data) == 2

    @pytest.mark.asyncio
    async def test_concurrent_appends_are_not_lost(self, tmp_path: Path) -> None:
        path = tmp_path / "q.json"
        store = QuestionStore(path)

        await asyncio.gather(*(store.append(make_submission(f"Вопрос {i}")) for i in range(10)))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert sorted(item["question"] for item in data) == sorted(
            f"Вопрос {i}" for i in range(10)
        )

    @pytest.mark.asyncio
    async def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = QuestionStore(blocker / "q.json")

        with pytest.raises(StorageWriteError) as exc_info:
            await store.append(make_submission())

        assert exc_info.value.status_code == 500


class TestListForAdmin:
    @pytest.mark.asyncio
    async def test_newest_first_with_display_fields(self, tmp_path: Path) -> None:
        store = QuestionStore(tmp_path / "q.json")
        await store.append(make_submission("Старый", timestamp="2024-01-15T08:30:00.000Z"))
        await store.append(
            make_submission("x" * 150, timestamp="2024-03-01T09:05:00.000Z", category="travel")
        )

        listings = await store.list_for_admin()

        newest, oldest = listings
        assert newest.question_preview == "x" * 100
        assert newest.category_name == "Путешествия"
        assert newest.formatted_date == "1 мар. 2024"
        assert newest.formatted_time == "09:05"
        assert oldest.question == "Старый"
        assert oldest.formatted_date == "15 янв. 2024"
        assert oldest.category_name == "Другое"

    @pytest.mark.asyncio
    async def test_incomplete_entries_still_listed(self, tmp_path: Path) -> None:
        """Test entries missing name or ip, or with odd types, are shown."""
        path = tmp_path / "q.json"
        path.write_text(
            json.dumps(
                [
                    {"timestamp": "2024-01-01T10:00:00.000Z", "question": "Без имени"},
                    {"timestamp": "2023-12-01T10:00:00.000Z", "question": 42, "name": None},
                    "not an object",
                ],
                ensure_ascii=False,
            ),
            encoding="utf-8",
        )

        listings = await QuestionStore(path).list_for_admin()

        assert [item.question for item in listings] == ["Без имени", "42"]
        assert listings[0].ip == ""
        assert listings[1].name == ""
        assert listings[1].category_name == "Другое"

    @pytest.mark.asyncio
    async def test_sorted_by_instant_not_by_text(self, tmp_path: Path) -> None:
        path = tmp_path / "q.json"
        path.write_text(
            json.dumps(
                [
                    {"timestamp": "2024-03-01T10:00:00+03:00", "question": "earlier"},
                    {"timestamp": "2024-03-01T08:00:00.000Z", "question": "later"},
                    {"timestamp": "вчера", "question": "unknown"},
                ]
            ),
            encoding="utf-8",
        )

        listings = await QuestionStore(path).list_for_admin()

        assert [item.question for item in listings] == ["later", "earlier", "unknown"]
        assert listings[1].formatted_time == "07:00"
        assert listings[2].formatted_date == ""


def test_unknown_category_name() -> None:
    assert get_category_name("unknown") == "Другое"
    assert get_category_name(None) == "Другое"
    assert get_category_name("technology") == "Технологии"
