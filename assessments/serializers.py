from django.conf import settings
from django.utils import timezone
from rest_framework import serializers

from exams.serializers import QuestionSerializer
from .models import Attempt, AnswerSlot
from .services import remaining_seconds


# --- Open / resume ---

class AttemptOpenSerializer(serializers.ModelSerializer):
    """Everything a client needs to derive its deadline."""
    attempt_id = serializers.IntegerField(source='id', read_only=True)
    exam_id = serializers.IntegerField(read_only=True)
    duration_seconds = serializers.IntegerField(source='exam.duration_seconds', read_only=True)
    question_count = serializers.SerializerMethodField()
    server_time = serializers.SerializerMethodField()
    focus_loss_limit = serializers.SerializerMethodField()
    submit_timeout_seconds = serializers.SerializerMethodField()

    class Meta:
        model = Attempt
        fields = ['attempt_id', 'exam_id', 'start_time', 'duration_seconds', 'total_marks',
                  'question_count', 'server_time', 'focus_loss_limit', 'submit_timeout_seconds']

    def get_question_count(self, obj):
        count = getattr(obj, 'question_count', None)
        if count is None:
            count = obj.answers.count()
        return count

    def get_server_time(self, obj):
        return serializers.DateTimeField().to_representation(self.context.get('now') or timezone.now())

    def get_focus_loss_limit(self, obj):
        return settings.ATTEMPT_FOCUS_LOSS_LIMIT

    def get_submit_timeout_seconds(self, obj):
        return settings.ATTEMPT_CLIENT_TIMEOUT_SECONDS


class AttemptStatusSerializer(AttemptOpenSerializer):
    submitted = serializers.BooleanField(source='is_submitted', read_only=True)
    remaining_seconds = serializers.SerializerMethodField()

    class Meta(AttemptOpenSerializer.Meta):
        fields = AttemptOpenSerializer.Meta.fields + ['submitted', 'remaining_seconds']

    def get_remaining_seconds(self, obj):
        return remaining_seconds(obj, self.context.get('now'))


# --- Submit ---

class AnswerSubmitSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    selected_option = serializers.IntegerField(required=False, allow_null=True)
    text_answer = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, trim_whitespace=False, max_length=1000
    )


class AttemptSubmitSerializer(serializers.Serializer):
    answers = AnswerSubmitSerializer(many=True, allow_empty=True)
    time_taken = serializers.IntegerField(min_value=0, required=False, default=0)
    auto_submitted = serializers.BooleanField(required=False, default=False)


class AttemptResultSerializer(serializers.ModelSerializer):
    class Meta:
        model = Attempt
        fields = ['score', 'total_marks', 'percentage']


# --- Review ---

class AnswerSlotReviewSerializer(serializers.ModelSerializer):
    question = QuestionSerializer(read_only=True)

    class Meta:
        model = AnswerSlot
        fields = ['question', 'answer_kind', 'selected_option', 'text_answer', 'is_correct',
                  'marks', 'marks_awarded']


class AttemptSummarySerializer(serializers.ModelSerializer):
    """Frozen answer sheet joined with question content, for after submission."""
    exam_id = serializers.IntegerField(read_only=True)
    exam_title = serializers.CharField(source='exam.title', read_only=True)
    participant = serializers.CharField(source='user.email', read_only=True)
    answers = AnswerSlotReviewSerializer(many=True, read_only=True)

    class Meta:
        model = Attempt
        fields = ['id', 'exam_id', 'exam_title', 'participant', 'status', 'start_time', 'submitted_at',
                  'score', 'total_marks', 'percentage', 'time_taken', 'elapsed_seconds',
                  'submitted_late', 'auto_submitted', 'answers']
