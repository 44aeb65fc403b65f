from rest_framework import viewsets, permissions, filters
from rest_framework.exceptions import PermissionDenied

from users.enrollment import can_attempt
from .models import Exam
from .serializers import ExamListSerializer, ExamDetailSerializer


class ExamViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only test catalogue. Authoring happens in the admin site.

    Students only see active tests from teachers they are enrolled with and
    never receive the answer key. Teachers see their own tests, staff see all.
    """
    permission_classes = [permissions.IsAuthenticated]

    # Enable search on title
    filter_backends = [filters.SearchFilter]
    search_fields = ['title']

    def get_queryset(self):
        user = self.request.user
        queryset = Exam.objects.select_related('created_by')
        if user.is_staff:
            return queryset
        if user.role == user.Role.STUDENT:
            return queryset.filter(is_active=True, created_by__in=user.enrolled_teachers.all())
        return queryset.filter(created_by=user)

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return ExamDetailSerializer
        return ExamListSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        user = self.request.user
        context['reveal_answers'] = user.is_staff or user.role == user.Role.TEACHER
        return context

    def get_object(self):
        exam = super().get_object()
        if not can_attempt(self.request.user, exam):
            raise PermissionDenied("You must enroll with this teacher to view this test.")
        return exam
