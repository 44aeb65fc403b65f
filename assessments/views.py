from django.utils import timezone
from rest_framework import permissions, status, views
from rest_framework.response import Response

from .exceptions import AttemptError
from .serializers import (
    AttemptOpenSerializer,
    AttemptStatusSerializer,
    AttemptSubmitSerializer,
    AttemptResultSerializer,
    AttemptSummarySerializer,
)
from .services import AttemptService


def attempt_error_response(exc):
    return Response({"error": str(exc), "code": exc.code}, status=exc.status_code)


class StartExamView(views.APIView):
    """
    Participant opens their single attempt at a test.
    A second call for the same test is rejected, never resumed.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, exam_id):
        now = timezone.now()
        try:
            attempt = AttemptService.open(exam_id=exam_id, user=request.user, now=now)
        except AttemptError as exc:
            return attempt_error_response(exc)

        serializer = AttemptOpenSerializer(attempt, context={'now': now})
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class AttemptStatusView(views.APIView):
    """Start time and remaining time of the caller's attempt; never answers."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, exam_id):
        try:
            attempt = AttemptService.status(exam_id=exam_id, user=request.user)
        except AttemptError as exc:
            return attempt_error_response(exc)
        return Response(AttemptStatusSerializer(attempt, context={'now': timezone.now()}).data)


class SubmitAttemptView(views.APIView):
    """
    Participant submits answers. Scored immediately, accepted once.
    Payload: { "answers": [ { "question_id": 1, "selected_option": 0 }, ... ],
               "time_taken": 300, "auto_submitted": false }
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, attempt_id):
        serializer = AttemptSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            attempt = AttemptService.submit(
                attempt_id=attempt_id,
                user=request.user,
                answers=data['answers'],
                time_taken=data['time_taken'],
                auto_submitted=data['auto_submitted'],
            )
        except AttemptError as exc:
            return attempt_error_response(exc)

        return Response({"status": "Submitted", **AttemptResultSerializer(attempt).data})


class AttemptSummaryView(views.APIView):
    """Review of a submitted attempt, including the answer key."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, attempt_id):
        try:
            attempt = AttemptService.summary(attempt_id=attempt_id, user=request.user)
        except AttemptError as exc:
            return attempt_error_response(exc)
        return Response(AttemptSummarySerializer(attempt).data)
