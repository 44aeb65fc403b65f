# users/models.py
import random

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    class Role(models.TextChoices):
        STUDENT = "student", "Student"
        TEACHER = "teacher", "Teacher"
        ADMIN = "admin", "Admin"

    # Enforce unique email for authentication
    email = models.EmailField(unique=True)

    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STUDENT)
    avatar = models.ImageField(upload_to="avatars/", blank=True, null=True)

    # Code students use to enroll with a teacher
    teacher_code = models.CharField(max_length=4, unique=True, null=True, blank=True)
    enrolled_teachers = models.ManyToManyField(
        "self",
        symmetrical=False,
        related_name="students",
        blank=True,
        limit_choices_to={"role": Role.TEACHER},
    )

    # Set email as the main field for authentication
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username', 'first_name', 'last_name']

    def save(self, *args, **kwargs):
        if self.role == self.Role.TEACHER and not self.teacher_code:
            self.teacher_code = self._generate_teacher_code()
        super().save(*args, **kwargs)

    @classmethod
    def _generate_teacher_code(cls):
        while True:
            code = str(random.randint(1000, 9999))
            if not cls.objects.filter(teacher_code=code).exists():
                return code

    @property
    def is_student(self):
        return self.role == self.Role.STUDENT

    def __str__(self):
        return self.email
