"""
Timed Exam Session.

A countdown + answer capture + grading state machine. The session itself is
synchronous and knows nothing about time; ExamCountdown drives its tick()
once per second on the event loop, and ExamSessionRegistry keeps at most one
live session per user.
"""
import asyncio
import enum
from typing import Callable, Dict, Optional, Tuple

from eduhub.config import settings
from eduhub.schemas import Exam, ExamResult


FinishCallback = Callable[[ExamResult], None]


class ExamStatus(str, enum.Enum):
    NOT_READY = "NOT_READY"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    ABANDONED = "ABANDONED"


def duration_seconds(exam: Exam, default_seconds: Optional[int] = None) -> int:
    """Countdown length; zero, negative or missing durations use the default."""
    if exam.duration_minutes and exam.duration_minutes > 0:
        return exam.duration_minutes * 60
    return default_seconds if default_seconds is not None else settings.default_exam_seconds


def grade(exam: Exam, answers: Dict[str, str]) -> ExamResult:
    """Count questions whose recorded answer matches; unanswered ones are wrong."""
    score = sum(1 for q in exam.questions if answers.get(q.id) == q.correct_answer)
    return ExamResult(score=score, total=len(exam.questions))


class ExamSession:
    """Ephemeral state of one user taking one exam. Never persisted."""

    def __init__(
        self,
        exam: Exam,
        on_finish: Optional[FinishCallback] = None,
        default_seconds: Optional[int] = None,
    ):
        self.exam = exam
        self.current_index = 0
        self.answers: Dict[str, str] = {}
        self.remaining_seconds = duration_seconds(exam, default_seconds)
        self.result: Optional[ExamResult] = None
        self._on_finish = on_finish
        # One-shot latch shared by the timer and manual submit
        self._submitting = False
        self._question_ids = {q.id for q in exam.questions}

        if exam.questions:
            self.status = ExamStatus.IN_PROGRESS
        else:
            self.status = ExamStatus.NOT_READY
            self.result = ExamResult(score=0, total=0)

    @property
    def total_questions(self) -> int:
        return len(self.exam.questions)

    @property
    def is_terminal(self) -> bool:
        return self.status != ExamStatus.IN_PROGRESS

    @property
    def current_question_id(self) -> Optional[str]:
        if not self.exam.questions:
            return None
        return self.exam.questions[self.current_index].id

    def select_answer(self, question_id: str, answer: str) -> bool:
        """Record or overwrite an answer. Never touches the countdown."""
        if self.status != ExamStatus.IN_PROGRESS or question_id not in self._question_ids:
            return False
        self.answers[question_id] = answer
        return True

    def navigate(self, direction: int) -> int:
        """Move the cursor one step forward or back, clamped to the question list."""
        if self.status == ExamStatus.IN_PROGRESS and direction:
            step = 1 if direction > 0 else -1
            self.current_index = min(max(self.current_index + step, 0), self.total_questions - 1)
        return self.current_index

    def tick(self) -> Optional[ExamResult]:
        """One second elapsed. Auto-submits when the clock reaches zero."""
        if self.status != ExamStatus.IN_PROGRESS:
            return None
        self.remaining_seconds = max(self.remaining_seconds - 1, 0)
        if self.remaining_seconds == 0:
            return self.finish()
        return None

    def submit(self, confirmed: bool) -> Optional[ExamResult]:
        """Manual submit; does nothing unless the user confirmed."""
        if not confirmed:
            return None
        return self.finish()

    def finish(self) -> Optional[ExamResult]:
        """
        Grade and emit the result exactly once.

        Whichever of timer expiry or manual submit gets here first wins;
        every later call returns None.
        """
        if self._submitting or self.status != ExamStatus.IN_PROGRESS:
            return None
        self._submitting = True

        self.result = grade(self.exam, self.answers)
        self.status = ExamStatus.FINISHED
        if self._on_finish:
            self._on_finish(self.result)
        return self.result

    def dismiss(self) -> Optional[ExamResult]:
        """Leave a NOT_READY exam, handing (0, 0) back to the host once."""
        if self.status != ExamStatus.NOT_READY or self._submitting:
            return None
        self._submitting = True
        if self._on_finish:
            self._on_finish(self.result)
        return self.result

    def abandon(self) -> None:
        """Discard without grading. Closes the latch so a late tick cannot grade."""
        if self.status == ExamStatus.IN_PROGRESS:
            self._submitting = True
            self.status = ExamStatus.ABANDONED


class ExamCountdown:
    """Ticks an ExamSession once per interval on the running event loop."""

    def __init__(self, session: ExamSession, interval: float = 1.0):
        self.session = session
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._task is None and not self.session.is_terminal:
            self._task = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while not self.session.is_terminal:
            await asyncio.sleep(self.interval)
            self.session.tick()

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()


class ExamSessionRegistry:
    """At most one live exam per user, plus the last emitted result for display."""

    def __init__(self):
        self.active: Dict[str, Tuple[ExamSession, ExamCountdown]] = {}
        self.results: Dict[str, ExamResult] = {}

    def get(self, user_id: str) -> Optional[ExamSession]:
        entry = self.active.get(user_id)
        return entry[0] if entry else None

    def start(
        self,
        user_id: str,
        exam: Exam,
        on_finish: Optional[FinishCallback] = None,
        interval: float = 1.0,
    ) -> Optional[ExamSession]:
        """
        Open a session for user_id. Returns None if one is already running.

        A finished or not-ready session left behind is replaced.
        """
        current = self.get(user_id)
        if current is not None and current.status == ExamStatus.IN_PROGRESS:
            return None
        self.discard(user_id)

        def _finished(result: ExamResult) -> None:
            self.results[user_id] = result
            entry = self.active.get(user_id)
            if entry is not None:
                entry[1].cancel()
            if on_finish:
                on_finish(result)

        session = ExamSession(exam, on_finish=_finished)
        countdown = ExamCountdown(session, interval=interval)
        self.active[user_id] = (session, countdown)
        countdown.start()
        return session

    def discard(self, user_id: str) -> None:
        """Abandon and forget the user's session, if any."""
        entry = self.active.pop(user_id, None)
        if entry is None:
            return
        session, countdown = entry
        countdown.cancel()
        session.abandon()

    def close_all(self) -> None:
        for user_id in list(self.active):
            self.discard(user_id)
