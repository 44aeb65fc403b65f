# exams/models.py
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum


class Exam(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    duration_minutes = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    is_active = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_exams',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    @property
    def duration_seconds(self):
        return self.duration_minutes * 60

    def total_marks(self):
        return self.questions.aggregate(total=Sum('marks'))['total'] or Decimal('0')


class Question(models.Model):
    class QuestionType(models.TextChoices):
        MULTIPLE_CHOICE = "multiple_choice", "Multiple Choice"
        TRUE_FALSE = "true_false", "True / False"
        FILL_IN_BLANK = "fill_in_blank", "Fill in the Blank"

    CHOICE_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE)

    exam = models.ForeignKey(Exam, related_name='questions', on_delete=models.CASCADE)
    position = models.PositiveIntegerField(default=0)

    text = models.TextField()
    image = models.URLField(blank=True)
    question_type = models.CharField(
        max_length=20, choices=QuestionType.choices, default=QuestionType.MULTIPLE_CHOICE
    )

    marks = models.DecimalField(
        max_digits=6, decimal_places=2, default=Decimal('1'),
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    negative_marks = models.DecimalField(
        max_digits=6, decimal_places=2, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
    )

    # Fill-in-blank only
    correct_answer = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.text[:50]}..."

    @property
    def is_choice(self):
        return self.question_type in self.CHOICE_TYPES

    def configuration_errors(self):
        """Return a list of reasons this question cannot be scored."""
        errors = []
        if self.marks is None or self.marks <= 0:
            errors.append("marks must be positive")
        if self.negative_marks is not None and self.negative_marks < 0:
            errors.append("negative marks cannot be below zero")

        if self.is_choice:
            options = list(self.options.all())
            if len(options) < 2:
                errors.append("needs at least two options")
            correct = sum(1 for option in options if option.is_correct)
            if correct != 1:
                errors.append(f"needs exactly one correct option, has {correct}")
        elif not self.correct_answer.strip():
            errors.append("fill in the blank needs a correct answer")
        return errors


class Option(models.Model):
    question = models.ForeignKey(Question, related_name='options', on_delete=models.CASCADE)
    position = models.PositiveIntegerField(default=0)
    text = models.CharField(max_length=255)
    image = models.URLField(blank=True)
    is_correct = models.BooleanField(default=False)

    class Meta:
        ordering = ['position', 'id']

    def __str__(self):
        return self.text
