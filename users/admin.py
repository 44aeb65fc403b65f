from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class PlatformUserAdmin(UserAdmin):
    list_display = ('email', 'username', 'role', 'teacher_code', 'is_staff')
    list_filter = ('role', 'is_staff')
    fieldsets = UserAdmin.fieldsets + (
        ('Platform', {'fields': ('role', 'teacher_code', 'enrolled_teachers', 'avatar')}),
    )
    filter_horizontal = ('enrolled_teachers',)
