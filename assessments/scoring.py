# assessments/scoring.py
"""
Scoring engine for attempts.

Everything here is a pure function over frozen value objects: no database
access, no clock. The attempt service builds ``QuestionKey`` snapshots from the
ORM and hands them over together with the submitted answers.

Policy:
- choice questions: correct iff the selected index points at the correct
  option; a missing, negative or out-of-range index is simply incorrect.
- fill in the blank: trimmed, case-insensitive equality; blank is incorrect.
- a correct answer earns ``marks``, an incorrect one loses ``negative_marks``.
- a question with no submitted answer (or an entry carrying neither an
  option nor a text) contributes nothing. An empty string is an answer.
- answers whose question cannot be resolved are dropped, not scored.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .exceptions import InvalidTestConfiguration, QuestionUnresolvable

CHOICE = "choice"
TEXT = "text"
UNANSWERED = ""

CHOICE_TYPES = ("multiple_choice", "true_false")
FILL_IN_BLANK = "fill_in_blank"

ZERO = Decimal("0")
TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class QuestionKey:
    question_id: int
    question_type: str
    marks: Decimal
    negative_marks: Decimal = ZERO
    # is_correct flags in display order
    options: Tuple[bool, ...] = ()
    correct_answer: str = ""

    @classmethod
    def from_question(cls, question, marks=None, negative_marks=None) -> "QuestionKey":
        """Snapshot ``question``; ``marks``/``negative_marks`` override the live values."""
        if marks is None:
            marks = question.marks
        if negative_marks is None:
            negative_marks = question.negative_marks
        return cls(
            question_id=question.pk,
            question_type=question.question_type,
            marks=Decimal(marks),
            negative_marks=Decimal(negative_marks or 0),
            options=tuple(bool(o.is_correct) for o in question.options.all()),
            correct_answer=question.correct_answer or "",
        )

    @property
    def is_choice(self) -> bool:
        return self.question_type in CHOICE_TYPES


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: int
    selected_option: Optional[int] = None
    text_answer: Optional[str] = None

    @property
    def kind(self) -> str:
        if self.selected_option is not None:
            return CHOICE
        if self.text_answer is not None:
            return TEXT
        return UNANSWERED


@dataclass(frozen=True)
class AnswerVerdict:
    question_id: int
    is_correct: bool
    marks_awarded: Decimal


@dataclass(frozen=True)
class ScoreSheet:
    verdicts: Tuple[AnswerVerdict, ...]
    score: Decimal
    dropped: Tuple[int, ...] = ()

    def verdict_for(self, question_id: int) -> Optional[AnswerVerdict]:
        for verdict in self.verdicts:
            if verdict.question_id == question_id:
                return verdict
        return None


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def grade_choice(key: QuestionKey, selected_option: Optional[int]) -> bool:
    if selected_option is None or isinstance(selected_option, bool):
        return False
    if not isinstance(selected_option, int):
        return False
    # Negative indexes must not wrap around to the last option
    if selected_option < 0 or selected_option >= len(key.options):
        return False
    return key.options[selected_option]


def grade_text(key: QuestionKey, text_answer: Optional[str]) -> bool:
    ans = _norm(text_answer)
    cor = _norm(key.correct_answer)
    if ans == "":
        return False
    return cor != "" and ans == cor


def grade_answer(key: QuestionKey, answer: SubmittedAnswer) -> AnswerVerdict:
    if key.is_choice:
        is_correct = grade_choice(key, answer.selected_option)
    elif key.question_type == FILL_IN_BLANK:
        is_correct = grade_text(key, answer.text_answer)
    else:
        is_correct = False

    if is_correct:
        awarded = key.marks
    else:
        awarded = -key.negative_marks if key.negative_marks else ZERO
    return AnswerVerdict(question_id=key.question_id, is_correct=is_correct, marks_awarded=awarded)


def latest_answers(answers: Iterable[SubmittedAnswer]) -> Dict[int, SubmittedAnswer]:
    """Collapse repeated answers for one question; the last one wins."""
    collapsed: Dict[int, SubmittedAnswer] = {}
    for answer in answers:
        collapsed.pop(answer.question_id, None)
        collapsed[answer.question_id] = answer
    return collapsed


def resolve_question(keys: Mapping[int, QuestionKey], question_id: int) -> QuestionKey:
    key = keys.get(question_id)
    if key is None:
        raise QuestionUnresolvable(question_id)
    return key


def score_answers(
    keys: Mapping[int, QuestionKey],
    answers: Iterable[SubmittedAnswer],
    *,
    clamp_negative: bool = False,
) -> ScoreSheet:
    verdicts = []
    dropped = []
    score = ZERO

    for question_id, answer in latest_answers(answers).items():
        try:
            key = resolve_question(keys, question_id)
        except QuestionUnresolvable:
            dropped.append(question_id)
            continue
        # An empty entry counts as not answering: no credit, no penalty
        if answer.kind == UNANSWERED:
            continue
        verdict = grade_answer(key, answer)
        verdicts.append(verdict)
        score += verdict.marks_awarded

    if clamp_negative and score < ZERO:
        score = ZERO

    return ScoreSheet(verdicts=tuple(verdicts), score=score, dropped=tuple(dropped))


def percentage(score: Decimal, total_marks: Decimal) -> Decimal:
    total = Decimal(total_marks)
    if total <= ZERO:
        raise InvalidTestConfiguration("Total marks must be positive to compute a percentage.")
    return (Decimal(score) * 100 / total).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
