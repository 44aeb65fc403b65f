from django.contrib import admin

from .models import Attempt, AnswerSlot


class AnswerSlotInline(admin.TabularInline):
    model = AnswerSlot
    extra = 0
    can_delete = False
    readonly_fields = ('question', 'answer_kind', 'selected_option', 'text_answer', 'is_correct', 'marks_awarded')


@admin.register(Attempt)
class AttemptAdmin(admin.ModelAdmin):
    list_display = ('user', 'exam', 'start_time', 'submitted_at', 'score', 'total_marks', 'percentage', 'auto_submitted')
    list_filter = ('auto_submitted', 'submitted_late')
    inlines = [AnswerSlotInline]

    # Attempts are written only by the attempt service
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in Attempt._meta.fields]
