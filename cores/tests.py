from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from assessments.tests.helpers import make_exam, make_teacher
from cores import audit
from cores.models import AuditLog


class AuditTests(TestCase):
    def test_record_targets_instance(self):
        teacher = make_teacher()
        exam = make_exam(teacher)
        entry = audit.record(teacher, "INVALID_TEST", exam, "no questions")

        self.assertEqual(entry.actor, teacher)
        self.assertEqual(entry.target_model, "Exam")
        self.assertEqual(entry.target_object_id, str(exam.pk))
        self.assertEqual(AuditLog.objects.get().details, "no questions")

    def test_anonymous_actor_is_stored_as_null(self):
        exam = make_exam(make_teacher())
        entry = audit.record(AnonymousUser(), "INVALID_TEST", exam)
        self.assertIsNone(entry.actor)
