# exams/serializers.py
from rest_framework import serializers
from .models import Exam, Question, Option

# --- Option Serializers ---

class OptionPublicSerializer(serializers.ModelSerializer):
    """Option as shown to a candidate: no correctness flag."""
    class Meta:
        model = Option
        fields = ['text', 'image']


class OptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Option
        fields = ['text', 'image', 'is_correct']

# --- Question Serializers ---

class QuestionPublicSerializer(serializers.ModelSerializer):
    options = OptionPublicSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = ['id', 'text', 'image', 'question_type', 'marks', 'negative_marks', 'options']


class QuestionSerializer(QuestionPublicSerializer):
    """Full question including the answer key, for owners and staff."""
    options = OptionSerializer(many=True, read_only=True)

    class Meta(QuestionPublicSerializer.Meta):
        fields = QuestionPublicSerializer.Meta.fields + ['correct_answer']

# --- Exam Serializers ---

class ExamListSerializer(serializers.ModelSerializer):
    created_by = serializers.CharField(source='created_by.get_full_name', read_only=True, default='')
    total_questions = serializers.IntegerField(source='questions.count', read_only=True)

    class Meta:
        model = Exam
        fields = ['id', 'title', 'description', 'duration_minutes', 'is_active',
                  'created_by', 'total_questions', 'created_at']


class ExamDetailSerializer(ExamListSerializer):
    """
    Detailed view. Answers are only revealed when the serializer context
    carries reveal_answers=True (owner or staff).
    """
    questions = serializers.SerializerMethodField()

    class Meta(ExamListSerializer.Meta):
        fields = ExamListSerializer.Meta.fields + ['questions']

    def get_questions(self, obj):
        serializer_class = QuestionSerializer if self.context.get('reveal_answers') else QuestionPublicSerializer
        questions = obj.questions.prefetch_related('options')
        return serializer_class(questions, many=True, context=self.context).data
