from django.db import models
from django.conf import settings


class AuditLog(models.Model):
    ACTION_CHOICES = [
        ('ATTEMPT_OPENED', 'Attempt Opened'),
        ('ATTEMPT_SUBMITTED', 'Attempt Submitted'),
        ('DUPLICATE_OPEN', 'Duplicate Open Rejected'),
        ('DUPLICATE_SUBMIT', 'Duplicate Submit Rejected'),
        ('ANSWER_DROPPED', 'Answer Dropped'),
        ('INVALID_TEST', 'Invalid Test Configuration'),
    ]

    actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    target_model = models.CharField(max_length=50, help_text="e.g., Attempt, Exam")
    target_object_id = models.CharField(max_length=100, blank=True, null=True)
    details = models.TextField(blank=True, help_text="Description of what happened")
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']

    def __str__(self):
        return f"{self.actor} - {self.action} - {self.timestamp}"
