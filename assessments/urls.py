from django.urls import path
from .views import StartExamView, AttemptStatusView, SubmitAttemptView, AttemptSummaryView

urlpatterns = [
    # Student Exam Flow
    path('exams/<int:exam_id>/start/', StartExamView.as_view(), name='start-exam'),
    path('exams/<int:exam_id>/attempt/', AttemptStatusView.as_view(), name='attempt-status'),
    path('attempts/<int:attempt_id>/submit/', SubmitAttemptView.as_view(), name='submit-attempt'),

    # Review (after submission only)
    path('attempts/<int:attempt_id>/', AttemptSummaryView.as_view(), name='attempt-summary'),
]
