from decimal import Decimal

from django.contrib.auth import get_user_model

from exams.models import Exam, Question, Option

User = get_user_model()


def make_user(email, role=User.Role.STUDENT, **extra):
    return User.objects.create_user(
        username=email,
        email=email,
        password="pass12345",
        first_name="Test",
        last_name="User",
        role=role,
        **extra,
    )


def make_teacher(email="teacher@example.com"):
    return make_user(email, role=User.Role.TEACHER)


def make_student(teacher=None, email="student@example.com"):
    student = make_user(email)
    if teacher is not None:
        student.enrolled_teachers.add(teacher)
    return student


def make_exam(teacher, duration_minutes=30, is_active=True, title="Capitals"):
    return Exam.objects.create(
        title=title,
        duration_minutes=duration_minutes,
        is_active=is_active,
        created_by=teacher,
    )


def add_choice_question(exam, correct=0, options=("A", "B", "C"), marks="1", negative_marks="0", position=0):
    question = Question.objects.create(
        exam=exam,
        position=position,
        text="Pick one",
        question_type=Question.QuestionType.MULTIPLE_CHOICE,
        marks=Decimal(marks),
        negative_marks=Decimal(negative_marks),
    )
    for index, text in enumerate(options):
        Option.objects.create(question=question, position=index, text=text, is_correct=(index == correct))
    return question


def add_blank_question(exam, answer="Paris", marks="1", negative_marks="0", position=0):
    return Question.objects.create(
        exam=exam,
        position=position,
        text="Capital of France?",
        question_type=Question.QuestionType.FILL_IN_BLANK,
        correct_answer=answer,
        marks=Decimal(marks),
        negative_marks=Decimal(negative_marks),
    )
