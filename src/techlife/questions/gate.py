"""Submission gate for listener questions.

Each submission passes through, in order:

1. Honeypot: the hidden ``website`` field must be empty.
2. Timing: the form must have been open for at least ``min_form_time_ms``.
3. Rate limit: a client may submit ``max_submissions`` times per window.
4. Validation: a non-empty question and privacy consent are required.
5. Persist: append to the question log.

Bots caught by steps 1 and 2 get the normal success response so they
cannot tell they were detected; nothing is written for them.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from techlife.config.schema import QuestionsConfig
from techlife.questions.models import ClientInfo, GateOutcome, QuestionForm, QuestionSubmission
from techlife.questions.store import QuestionStore
from techlife.utils.errors import RateLimitExceededError, ValidationError
from techlife.utils.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Вопрос успешно отправлен"
RATE_LIMIT_MESSAGE = (
    "Слишком много запросов. Пожалуйста, подождите минуту перед следующей отправкой."
)
QUESTION_REQUIRED_MESSAGE = "Вопрос обязателен для заполнения"
PRIVACY_REQUIRED_MESSAGE = "Необходимо согласиться на обработку данных"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _parse_start_time(value: str | int | None) -> int | None:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _clean(value: str | None) -> str:
    return value.strip() if value else ""


class SubmissionGate:
    """Decides whether a question submission gets written.

    Example:
        >>> gate = SubmissionGate(QuestionsConfig(), QuestionStore(path))
        >>> outcome = await gate.submit(form, ClientInfo(ip="203.0.113.7"))
    """

    def __init__(
        self,
        config: QuestionsConfig,
        store: QuestionStore,
        rate_limiter: SlidingWindowRateLimiter | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the gate.

        Args:
            config: Gate thresholds and defaults
            store: Question log to append to
            rate_limiter: Per-IP limiter (built from config if None)
            clock: Millisecond clock, shared with the limiter when built here
        """
        self.config = config
        self.store = store
        self.clock = clock
        self.rate_limiter = rate_limiter or SlidingWindowRateLimiter(
            max_events=config.max_submissions,
            window_ms=config.rate_limit_window_ms,
            max_clients=config.max_tracked_clients,
            clock=clock,
        )

    def is_honeypot_filled(self, form: QuestionForm) -> bool:
        return bool(_clean(form.website))

    def is_too_fast(self, form: QuestionForm) -> bool:
        started = _parse_start_time(form.form_start_time)
        if started is None:
            return False
        return self.clock() - started < self.config.min_form_time_ms

    def validate(self, form: QuestionForm) -> None:
        """Check required fields.

        Raises:
            ValidationError: If the question is blank or consent is missing
        """
        if not _clean(form.question):
            raise ValidationError(QUESTION_REQUIRED_MESSAGE, field="question")
        if not form.privacy:
            raise ValidationError(PRIVACY_REQUIRED_MESSAGE, field="privacy")

    def build_submission(self, form: QuestionForm, client: ClientInfo) -> QuestionSubmission:
        timestamp = datetime.fromtimestamp(self.clock() / 1000, tz=timezone.utc)
        return QuestionSubmission(
            timestamp=timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            name=_clean(form.name) or self.config.default_name,
            email=_clean(form.email) or None,
            question=_clean(form.question),
            category=form.category or self.config.default_category,
            ip=client.ip,
            user_agent=client.user_agent,
        )

    async def submit(self, form: QuestionForm, client: ClientInfo) -> GateOutcome:
        """Run a submission through the gate.

        Returns:
            ACCEPTED if stored, or the DROPPED_* outcome for suspected bots

        Raises:
            RateLimitExceededError: Client exceeded the submission rate
            ValidationError: Required field missing
            StorageWriteError: Question log could not be written
        """
        if self.is_honeypot_filled(form):
            logger.info("Bot detected (honeypot): IP %s", client.ip)
            return GateOutcome.DROPPED_HONEYPOT

        if self.is_too_fast(form):
            logger.info("Bot detected (too fast): IP %s", client.ip)
            return GateOutcome.DROPPED_TOO_FAST

        if not self.rate_limiter.hit(client.ip):
            logger.warning("Rate limit exceeded: IP %s", client.ip)
            raise RateLimitExceededError(RATE_LIMIT_MESSAGE)

        self.validate(form)

        await self.store.append(self.build_submission(form, client))
        return GateOutcome.ACCEPTED
