# assessments/services.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from cores import audit
from exams.models import Exam
from users.enrollment import can_attempt

from .exceptions import (
    AlreadyAttempted,
    AlreadySubmitted,
    AttemptNotSubmitted,
    InvalidTestConfiguration,
    NotEnrolled,
    NotStarted,
    TestUnavailable,
)
from .models import Attempt, AnswerSlot
from .scoring import QuestionKey, SubmittedAnswer, latest_answers, percentage, score_answers

logger = logging.getLogger(__name__)


def _as_submitted(answer: Any) -> SubmittedAnswer:
    if isinstance(answer, SubmittedAnswer):
        return answer
    return SubmittedAnswer(
        question_id=int(answer["question_id"]),
        selected_option=answer.get("selected_option"),
        text_answer=answer.get("text_answer"),
    )


class AttemptService:
    """
    Opens and closes attempts.

    An attempt is written exactly twice: the insert on open and the scoring
    update on submit. Both happen inside a single transaction, and both rely
    on the database (unique constraint, conditional update) rather than on a
    read-then-write check.
    """

    # -------------------------------------------------
    # open
    # -------------------------------------------------
    @staticmethod
    def open(*, exam_id: int, user, now=None) -> Attempt:
        now = now or timezone.now()

        exam = Exam.objects.filter(id=exam_id, is_active=True).first()
        if exam is None:
            raise TestUnavailable()

        if not can_attempt(user, exam):
            raise NotEnrolled()

        questions = list(exam.questions.prefetch_related("options"))
        AttemptService._validate_questions(exam, questions, user)
        total_marks = sum((q.marks for q in questions), Decimal("0"))

        try:
            with transaction.atomic():
                attempt = Attempt.objects.create(
                    exam=exam,
                    user=user,
                    start_time=now,
                    total_marks=total_marks,
                )
                AnswerSlot.objects.bulk_create([
                    AnswerSlot(
                        attempt=attempt,
                        question=q,
                        position=index,
                        marks=q.marks,
                        negative_marks=q.negative_marks,
                    )
                    for index, q in enumerate(questions)
                ])
                audit.record(user, "ATTEMPT_OPENED", attempt, f"exam={exam.pk} total_marks={total_marks}")
        except IntegrityError:
            logger.warning(f"Duplicate open rejected: exam={exam.pk} user={user.pk}")
            audit.record(user, "DUPLICATE_OPEN", exam, f"user={user.pk}")
            raise AlreadyAttempted()

        logger.info(
            f"Attempt {attempt.pk} opened: exam={exam.pk} user={user.pk} "
            f"questions={len(questions)} total_marks={total_marks}"
        )
        attempt.question_count = len(questions)
        return attempt

    @staticmethod
    def _validate_questions(exam: Exam, questions, user) -> None:
        problems = []
        if not questions:
            problems.append("test has no questions")
        for question in questions:
            for error in question.configuration_errors():
                problems.append(f"question {question.pk}: {error}")

        if not problems and sum(q.marks for q in questions) <= 0:
            problems.append("total marks must be positive")

        if problems:
            details = "; ".join(problems)
            logger.error(f"Exam {exam.pk} cannot be attempted: {details}")
            audit.record(user, "INVALID_TEST", exam, details)
            raise InvalidTestConfiguration(f"This test cannot be attempted: {details}")

    # -------------------------------------------------
    # submit
    # -------------------------------------------------
    @staticmethod
    def submit(
        *,
        attempt_id: int,
        user,
        answers: Iterable[Mapping[str, Any] | SubmittedAnswer],
        time_taken: int = 0,
        auto_submitted: bool = False,
        now=None,
    ) -> Attempt:
        now = now or timezone.now()
        submitted = [_as_submitted(a) for a in answers]

        try:
            with transaction.atomic():
                attempt = AttemptService._close(
                    attempt_id=attempt_id,
                    user=user,
                    answers=submitted,
                    time_taken=time_taken,
                    auto_submitted=auto_submitted,
                    now=now,
                )
        except AlreadySubmitted:
            logger.warning(f"Duplicate submit ignored: attempt={attempt_id} user={user.pk}")
            audit.record(user, "DUPLICATE_SUBMIT", Attempt(pk=attempt_id), f"auto_submitted={auto_submitted}")
            raise

        logger.info(
            f"Attempt {attempt.pk} submitted: score={attempt.score}/{attempt.total_marks} "
            f"({attempt.percentage}%) auto={attempt.auto_submitted} late={attempt.submitted_late}"
        )
        return attempt

    @staticmethod
    def _close(*, attempt_id, user, answers, time_taken, auto_submitted, now) -> Attempt:
        attempt = (
            Attempt.objects
            .select_for_update()
            .select_related("exam")
            .filter(id=attempt_id, user=user)
            .first()
        )
        if attempt is None:
            raise NotStarted()
        if attempt.submitted_at is not None:
            raise AlreadySubmitted()

        slots = list(
            attempt.answers
            .select_related("question")
            .prefetch_related("question__options")
        )
        keys = {
            slot.question_id: QuestionKey.from_question(
                slot.question, marks=slot.marks, negative_marks=slot.negative_marks
            )
            for slot in slots
            if slot.question_id is not None
        }

        sheet = score_answers(
            keys, answers, clamp_negative=getattr(settings, "ATTEMPT_CLAMP_NEGATIVE_SCORE", False)
        )
        for question_id in sheet.dropped:
            logger.warning(f"Attempt {attempt.pk}: dropped answer for unresolvable question {question_id}")
            audit.record(user, "ANSWER_DROPPED", attempt, f"question={question_id}")

        elapsed = max(0, int((now - attempt.start_time).total_seconds()))
        attempt.score = sheet.score
        attempt.percentage = percentage(sheet.score, attempt.total_marks)
        attempt.time_taken = max(0, int(time_taken or 0))
        attempt.elapsed_seconds = elapsed
        attempt.submitted_late = elapsed > attempt.exam.duration_seconds
        attempt.auto_submitted = bool(auto_submitted)
        attempt.submitted_at = now

        # Compare-and-set: only the first submit finds submitted_at empty
        updated = Attempt.objects.filter(pk=attempt.pk, submitted_at__isnull=True).update(
            score=attempt.score,
            percentage=attempt.percentage,
            time_taken=attempt.time_taken,
            elapsed_seconds=attempt.elapsed_seconds,
            submitted_late=attempt.submitted_late,
            auto_submitted=attempt.auto_submitted,
            submitted_at=attempt.submitted_at,
        )
        if updated != 1:
            raise AlreadySubmitted()

        collapsed = latest_answers(answers)
        changed = []
        orphaned = []
        for slot in slots:
            if slot.question_id is None:
                orphaned.append(slot.pk)
                continue
            verdict = sheet.verdict_for(slot.question_id)
            if verdict is None:
                continue
            answer = collapsed[slot.question_id]
            # Stored the way it was graded, whatever else the payload carried
            if slot.question.is_choice:
                slot.answer_kind = AnswerSlot.Kind.CHOICE
                slot.selected_option = answer.selected_option
                slot.text_answer = None
            else:
                slot.answer_kind = AnswerSlot.Kind.TEXT
                slot.selected_option = None
                slot.text_answer = answer.text_answer
            slot.is_correct = verdict.is_correct
            slot.marks_awarded = verdict.marks_awarded
            changed.append(slot)

        if changed:
            AnswerSlot.objects.bulk_update(
                changed,
                ["answer_kind", "selected_option", "text_answer", "is_correct", "marks_awarded"],
            )
        if orphaned:
            AnswerSlot.objects.filter(pk__in=orphaned).delete()

        audit.record(
            user, "ATTEMPT_SUBMITTED", attempt,
            f"score={attempt.score} percentage={attempt.percentage} auto_submitted={attempt.auto_submitted}",
        )
        return attempt

    # -------------------------------------------------
    # read side
    # -------------------------------------------------
    @staticmethod
    def status(*, exam_id: int, user) -> Attempt:
        """Deadline data for a client that lost its local state."""
        attempt = Attempt.objects.select_related("exam").filter(exam_id=exam_id, user=user).first()
        if attempt is None:
            raise NotStarted()
        return attempt

    @staticmethod
    def summary(*, attempt_id: int, user) -> Attempt:
        visible = Q(user=user)
        if user.is_staff:
            visible = Q()
        elif not getattr(user, "is_student", False):
            visible |= Q(exam__created_by=user)

        attempt = (
            Attempt.objects
            .select_related("exam", "user")
            .prefetch_related("answers__question__options")
            .filter(visible, id=attempt_id)
            .first()
        )
        if attempt is None:
            raise NotStarted()
        if attempt.submitted_at is None:
            raise AttemptNotSubmitted()
        return attempt


def remaining_seconds(attempt: Attempt, now: Optional[Any] = None) -> int:
    if attempt.submitted_at is not None:
        return 0
    now = now or timezone.now()
    elapsed = int((now - attempt.start_time).total_seconds())
    return max(0, attempt.exam.duration_seconds - elapsed)
