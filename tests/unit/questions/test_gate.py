"""Tests for the listener question submission gate."""

import json
from pathlib import Path

import pytest

from techlife.config.schema import QuestionsConfig
from techlife.questions.gate import (
    PRIVACY_REQUIRED_MESSAGE,
    QUESTION_REQUIRED_MESSAGE,
    SubmissionGate,
)
from techlife.questions.models import ClientInfo, GateOutcome, QuestionForm
from techlife.questions.store import QuestionStore
from techlife.utils.errors import RateLimitExceededError, ValidationError

START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "listener-questions.json"


@pytest.fixture
def gate(log_path: Path, clock: FakeClock) -> SubmissionGate:
    return SubmissionGate(QuestionsConfig(), QuestionStore(log_path), clock=clock)


def make_form(clock: FakeClock, **overrides) -> QuestionForm:
    """A form opened ten seconds ago with a question and consent."""
    fields = {
        "question": "Как вы готовите выпуски?",
        "privacy": "on",
        "formStartTime": str(clock.now - 10_000),
    }
    fields.update(overrides)
    return QuestionForm.model_validate(fields)


CLIENT = ClientInfo(ip="203.0.113.7", user_agent="pytest")


class TestBotTraps:
    """Honeypot and timing checks drop silently."""

    @pytest.mark.asyncio
    async def test_honeypot_leaves_log_untouched(
        self, gate: SubmissionGate, clock: FakeClock, log_path: Path
    ) -> None:
        await gate.submit(make_form(clock), CLIENT)
        before = log_path.read_bytes()

        outcome = await gate.submit(make_form(clock, website="http://spam.example"), CLIENT)

        assert outcome is GateOutcome.DROPPED_HONEYPOT
        assert not outcome.stored
        assert log_path.read_bytes() == before

    @pytest.mark.asyncio
    async def test_honeypot_does_not_create_log(
        self, gate: SubmissionGate, clock: FakeClock, log_path: Path
    ) -> None:
        outcome = await gate.submit(make_form(clock, website="x"), CLIENT)
        assert outcome is GateOutcome.DROPPED_HONEYPOT
        assert not log_path.exists()

    @pytest.mark.asyncio
    async def test_fast_submission_dropped(
        self, gate: SubmissionGate, clock: FakeClock, log_path: Path
    ) -> None:
        """Test a form submitted one second after it was opened."""
        form = make_form(clock, formStartTime=str(clock.now - 1_000))

        outcome = await gate.submit(form, CLIENT)

        assert outcome is GateOutcome.DROPPED_TOO_FAST
        assert not log_path.exists()

    @pytest.mark.asyncio
    async def test_bot_traps_do_not_consume_rate_limit(
        self, gate: SubmissionGate, clock: FakeClock
    ) -> None:
        for _ in range(5):
            await gate.submit(make_form(clock, website="x"), CLIENT)
        assert gate.rate_limiter.count(CLIENT.ip) == 0

    def test_missing_or_garbled_start_time_skips_timing(
        self, gate: SubmissionGate, clock: FakeClock
    ) -> None:
        assert not gate.is_too_fast(make_form(clock, formStartTime=None))
        assert not gate.is_too_fast(make_form(clock, formStartTime="yesterday"))

    def test_exact_threshold_is_allowed(self, gate: SubmissionGate, clock: FakeClock) -> None:
        form = make_form(clock, formStartTime=clock.now - 3_000)
        assert not gate.is_too_fast(form)

    def test_whitespace_honeypot_is_empty(self, gate: SubmissionGate, clock: FakeClock) -> None:
        assert not gate.is_honeypot_filled(make_form(clock, website="   "))


class TestQuestionForm:
    """Loose typing of posted fields."""

    def test_numbers_become_text(self) -> None:
        form = QuestionForm.model_validate({"name": 42, "question": 7, "formStartTime": 1000})
        assert form.name == "42"
        assert form.question == "7"
        assert form.form_start_time == "1000"

    def test_structured_values_count_as_missing(self) -> None:
        form = QuestionForm.model_validate({"question": ["a"], "email": {"x": 1}})
        assert form.question is None
        assert form.email is None

    @pytest.mark.parametrize("value", [1, True, ["x"], {"a": 1}])
    def test_any_honeypot_value_is_filled(self, gate: SubmissionGate, value) -> None:
        form = QuestionForm.model_validate({"question": "q", "website": value})
        assert gate.is_honeypot_filled(form)


class TestRateLimit:
    """Per-IP submission limit."""

    @pytest.mark.asyncio
    async def test_fourth_submission_rejected(
        self, gate: SubmissionGate, clock: FakeClock, log_path: Path
    ) -> None:
        for _ in range(3):
            assert await gate.submit(make_form(clock), CLIENT) is GateOutcome.ACCEPTED
            clock.advance(1_000)

        with pytest.raises(RateLimitExceededError) as exc_info:
            await gate.submit(make_form(clock), CLIENT)

        assert exc_info.value.status_code == 429
        assert len(json.loads(log_path.read_text(encoding="utf-8"))) == 3

    @pytest.mark.asyncio
    async def test_accepted_again_after_window(
        self, gate: SubmissionGate, clock: FakeClock
    ) -> None:
        for _ in range(3):
            await gate.submit(make_form(clock), CLIENT)

        clock.advance(60_000)

        assert await gate.submit(make_form(clock), CLIENT) is GateOutcome.ACCEPTED

    @pytest.mark.asyncio
    async def test_limit_is_per_ip(self, gate: SubmissionGate, clock: FakeClock) -> None:
        for _ in range(3):
            await gate.submit(make_form(clock), CLIENT)

        other = ClientInfo(ip="198.51.100.1")
        assert await gate.submit(make_form(clock), other) is GateOutcome.ACCEPTED


class TestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("question", [None, "", "   \n"])
    async def test_blank_question_rejected(
        self, gate: SubmissionGate, clock: FakeClock, log_path: Path, question
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await gate.submit(make_form(clock, question=question), CLIENT)

        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == QUESTION_REQUIRED_MESSAGE
        assert not log_path.exists()

    @pytest.mark.asyncio
    async def test_missing_privacy_rejected(self, gate: SubmissionGate, clock: FakeClock) -> None:
        with pytest.raises(ValidationError, match=PRIVACY_REQUIRED_MESSAGE):
            await gate.submit(make_form(clock, privacy=None), CLIENT)


class TestStoredRecord:
    @pytest.mark.asyncio
    async def test_defaults_and_trimming(
        self, gate: SubmissionGate, clock: FakeClock, log_path: Path
    ) -> None:
        form = make_form(clock, question="  Что почитать?  ", name="   ", email="")

        await gate.submit(form, CLIENT)

        [stored] = json.loads(log_path.read_text(encoding="utf-8"))
        assert stored["question"] == "Что почитать?"
        assert stored["name"] == "Анонимный слушатель"
        assert stored["email"] is None
        assert stored["category"] == "other"
        assert stored["ip"] == "203.0.113.7"
        assert stored["userAgent"] == "pytest"
        assert stored["timestamp"] == "2023-11-14T22:13:20.000Z"

    @pytest.mark.asyncio
    async def test_submitted_fields_kept(
        self, gate: SubmissionGate, clock: FakeClock, log_path: Path
    ) -> None:
        form = make_form(clock, name="Анна", email="anna@example.com", category="travel")

        await gate.submit(form, CLIENT)

        [stored] = json.loads(log_path.read_text(encoding="utf-8"))
        assert stored["name"] == "Анна"
        assert stored["email"] == "anna@example.com"
        assert stored["category"] == "travel"
