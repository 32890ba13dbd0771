from __future__ import annotations

import pytest

from campus_attendance.core.enums import Role, StoreErrorKind
from campus_attendance.core.exceptions import AuthorizationError, DuplicateEnrollmentError, StoreError, ValidationError


def _enroll(stack, lecture_id, student_id=2, role=Role.STUDENT):
    return stack.container.enrollment_service.enroll(current_role=role, student_id=student_id, lecture_id=lecture_id)


def test_enroll_creates_enrollment(stack, lecture, at):
    enrollment_id = _enroll(stack, lecture.lecture_id)

    assert enrollment_id == 1
    row = stack.enrollments.get(lecture_id=lecture.lecture_id, student_id=2)
    assert row.enrolled_at == at(9, 30)
    assert stack.container.enrollment_service.is_enrolled(lecture_id=lecture.lecture_id, student_id=2)


def test_enrolling_is_allowed_in_any_lecture_state(stack, lecture, at):
    stack.clock.set(at(23, 0))
    assert _enroll(stack, lecture.lecture_id)


def test_second_enrollment_is_a_friendly_error(stack, lecture):
    _enroll(stack, lecture.lecture_id)

    with pytest.raises(DuplicateEnrollmentError, match="You are already enrolled in this lecture!"):
        _enroll(stack, lecture.lecture_id)
    assert stack.enrollments.add_calls == 1


def test_duplicate_reported_by_store_is_a_friendly_error(stack, lecture):
    stack.enrollments.fail_with = StoreErrorKind.DUPLICATE

    with pytest.raises(DuplicateEnrollmentError):
        _enroll(stack, lecture.lecture_id)


def test_store_outage(stack, lecture):
    stack.enrollments.fail_with = StoreErrorKind.UNAVAILABLE

    with pytest.raises(StoreError):
        _enroll(stack, lecture.lecture_id)


def test_unknown_lecture(stack):
    with pytest.raises(ValidationError, match="Lecture not found"):
        _enroll(stack, 404)


def test_only_students_enroll(stack, lecture):
    with pytest.raises(AuthorizationError):
        _enroll(stack, lecture.lecture_id, student_id=1, role=Role.LECTURER)
