from django.contrib import admin

# Test authoring lives here; the API only reads these records.
from .models import Exam, Question, Option


class OptionInline(admin.TabularInline):
    model = Option
    extra = 2


class QuestionInline(admin.StackedInline):
    model = Question
    extra = 0
    show_change_link = True


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ('title', 'duration_minutes', 'is_active', 'created_by', 'created_at')
    list_filter = ('is_active',)
    inlines = [QuestionInline]


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'exam', 'question_type', 'marks', 'negative_marks')
    list_filter = ('question_type',)
    inlines = [OptionInline]
