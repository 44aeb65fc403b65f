from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from assessments.tests.helpers import make_exam, make_student, make_teacher, make_user
from users.enrollment import can_attempt
from users.models import User


class TeacherCodeTests(APITestCase):
    def test_teachers_get_a_unique_code(self):
        first = make_teacher("a@example.com")
        second = make_teacher("b@example.com")
        self.assertRegex(first.teacher_code, r"^\d{4}$")
        self.assertNotEqual(first.teacher_code, second.teacher_code)

    def test_students_have_no_code(self):
        self.assertIsNone(make_student().teacher_code)


class EnrollmentTests(APITestCase):
    def setUp(self):
        self.teacher = make_teacher()
        self.exam = make_exam(self.teacher)

    def test_enrolled_student_may_attempt(self):
        self.assertTrue(can_attempt(make_student(self.teacher), self.exam))

    def test_unenrolled_student_may_not(self):
        self.assertFalse(can_attempt(make_student(), self.exam))

    def test_teachers_only_attempt_their_own_tests(self):
        self.assertTrue(can_attempt(self.teacher, self.exam))
        self.assertFalse(can_attempt(make_teacher("other@example.com"), self.exam))

    def test_staff_may_attempt_anything(self):
        admin = make_user("admin@example.com", role=User.Role.ADMIN, is_staff=True)
        self.assertTrue(can_attempt(admin, self.exam))


class AuthAPITests(APITestCase):
    def test_register_then_login(self):
        response = self.client.post(reverse("register"), {
            "email": "new@example.com",
            "first_name": "New",
            "last_name": "Student",
            "password": "long-enough-pass",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(email="new@example.com").role, User.Role.STUDENT)

        response = self.client.post(reverse("login"), {
            "email": "new@example.com",
            "password": "long-enough-pass",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.json())
        self.assertEqual(response.json()["user"]["email"], "new@example.com")

    def test_admin_role_cannot_be_self_registered(self):
        response = self.client.post(reverse("register"), {
            "email": "sneaky@example.com",
            "first_name": "S",
            "last_name": "N",
            "password": "long-enough-pass",
            "role": "admin",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
