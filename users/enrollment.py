# users/enrollment.py
"""
Enrollment check consulted before an attempt is opened.

Students may attempt a test only when enrolled with the teacher who created
it. Staff may attempt anything; a teacher may attempt (preview) only their own
tests.
"""


def can_attempt(user, exam):
    if not user or not user.is_authenticated:
        return False

    if user.is_staff:
        return True

    if user.role == user.Role.STUDENT:
        if exam.created_by_id is None:
            return False
        return user.enrolled_teachers.filter(pk=exam.created_by_id).exists()

    return exam.created_by_id == user.pk
