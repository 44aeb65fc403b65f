# assessments/models.py
from decimal import Decimal

from django.db import models
from django.conf import settings
from exams.models import Exam, Question


class Attempt(models.Model):
    """A participant's single engagement with one test."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='attempts')
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='attempts')
    start_time = models.DateTimeField()

    # Frozen from the question set at open time
    total_marks = models.DecimalField(max_digits=8, decimal_places=2)

    score = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal('0'))
    percentage = models.DecimalField(max_digits=7, decimal_places=2, default=Decimal('0'))

    # Client-reported, advisory only
    time_taken = models.PositiveIntegerField(default=0)
    # Server-side submitted_at - start_time
    elapsed_seconds = models.PositiveIntegerField(null=True, blank=True)
    submitted_late = models.BooleanField(default=False)

    auto_submitted = models.BooleanField(default=False)
    submitted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['exam', 'user'], name='unique_attempt_per_participant'),
        ]

    def __str__(self):
        return f"{self.user} - {self.exam.title}"

    @property
    def status(self):
        return "closed" if self.submitted_at else "open"

    @property
    def is_submitted(self):
        return self.submitted_at is not None


class AnswerSlot(models.Model):
    class Kind(models.TextChoices):
        UNANSWERED = "", "Unanswered"
        CHOICE = "choice", "Selected option"
        TEXT = "text", "Text answer"

    attempt = models.ForeignKey(Attempt, related_name='answers', on_delete=models.CASCADE)
    # Null once the question is deleted; such slots are dropped at submit
    question = models.ForeignKey(Question, null=True, on_delete=models.SET_NULL, related_name='+')
    position = models.PositiveIntegerField(default=0)
    # Marking frozen at open time, alongside Attempt.total_marks
    marks = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('1'))
    negative_marks = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0'))

    answer_kind = models.CharField(max_length=10, choices=Kind.choices, blank=True, default=Kind.UNANSWERED)
    selected_option = models.IntegerField(null=True, blank=True)
    text_answer = models.TextField(null=True, blank=True)

    is_correct = models.BooleanField(null=True)
    marks_awarded = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0'))

    class Meta:
        ordering = ['position', 'id']
        constraints = [
            models.UniqueConstraint(fields=['attempt', 'question'], name='unique_slot_per_question'),
        ]

    def __str__(self):
        return f"{self.attempt_id}:{self.question_id} ({self.answer_kind or 'unanswered'})"
