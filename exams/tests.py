from decimal import Decimal

from django.test import TestCase

from assessments.tests.helpers import add_blank_question, add_choice_question, make_exam, make_teacher
from exams.models import Option, Question


class QuestionConfigurationTests(TestCase):
    def setUp(self):
        self.exam = make_exam(make_teacher())

    def test_well_formed_questions_have_no_errors(self):
        self.assertEqual(add_choice_question(self.exam, correct=0).configuration_errors(), [])
        self.assertEqual(add_blank_question(self.exam).configuration_errors(), [])

    def test_choice_question_needs_two_options(self):
        question = add_choice_question(self.exam, correct=0, options=("Only",))
        self.assertIn("needs at least two options", question.configuration_errors())

    def test_choice_question_needs_exactly_one_correct_option(self):
        question = add_choice_question(self.exam, correct=5)
        self.assertEqual(question.configuration_errors(), ["needs exactly one correct option, has 0"])

        Option.objects.filter(question=question).update(is_correct=True)
        self.assertEqual(question.configuration_errors(), ["needs exactly one correct option, has 3"])

    def test_blank_question_needs_answer(self):
        question = add_blank_question(self.exam, answer="")
        self.assertEqual(question.configuration_errors(), ["fill in the blank needs a correct answer"])

    def test_zero_marks_rejected(self):
        question = add_blank_question(self.exam)
        question.marks = Decimal("0")
        self.assertIn("marks must be positive", question.configuration_errors())


class ExamTests(TestCase):
    def test_total_marks_and_duration(self):
        exam = make_exam(make_teacher(), duration_minutes=45)
        add_choice_question(exam, correct=0, marks="2")
        add_blank_question(exam, marks="1.5", position=1)
        self.assertEqual(exam.total_marks(), Decimal("3.5"))
        self.assertEqual(exam.duration_seconds, 2700)

    def test_questions_keep_authored_order(self):
        exam = make_exam(make_teacher())
        second = add_blank_question(exam, position=1)
        first = add_choice_question(exam, correct=0, position=0)
        self.assertEqual(list(exam.questions.all()), [first, second])
        self.assertTrue(first.is_choice)
        self.assertFalse(second.is_choice)
        self.assertEqual(second.question_type, Question.QuestionType.FILL_IN_BLANK)
