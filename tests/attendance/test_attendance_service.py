from __future__ import annotations

import pytest

from campus_attendance.core.enums import AttendanceAction, ParticipationStage, RejectionReason, Role, StoreErrorKind
from campus_attendance.core.exceptions import (
    AttendanceNotAllowedError,
    AuthorizationError,
    DuplicateAttendanceError,
    StoreError,
    ValidationError,
)

STUDENT_ID = 2


def _enroll(stack, lecture, student_id=STUDENT_ID):
    stack.enrollments.add(lecture_id=lecture.lecture_id, student_id=student_id, enrolled_at=stack.clock.now())


def _submit(stack, lecture, answer="Paris", **kwargs):
    return stack.container.attendance_service.submit(
        current_role=kwargs.pop("current_role", Role.STUDENT),
        student_id=kwargs.pop("student_id", STUDENT_ID),
        lecture_id=lecture.lecture_id,
        answer=answer,
        **kwargs,
    )


def test_correct_answer_while_live_is_recorded(stack, lecture, at):
    _enroll(stack, lecture)

    result = _submit(stack, lecture, answer="  paris ", now=at(9, 30))

    assert result.is_correct is True
    assert result.stage == ParticipationStage.ATTENDED
    rec = stack.attendance.get_for_student(lecture_id=lecture.lecture_id, student_id=STUDENT_ID)
    assert rec.student_answer == "paris"
    assert rec.marked_at == at(9, 30)


def test_second_attempt_is_rejected_as_already_marked(stack, lecture, at):
    _enroll(stack, lecture)
    _submit(stack, lecture, now=at(9, 30))

    with pytest.raises(DuplicateAttendanceError, match="already marked"):
        _submit(stack, lecture, now=at(9, 35))
    assert stack.attendance.add_calls == 1


def test_incorrect_answer_still_counts_and_blocks_a_retry(stack, lecture, at):
    _enroll(stack, lecture)

    result = _submit(stack, lecture, answer="London", now=at(9, 30))
    assert result.is_correct is False

    with pytest.raises(DuplicateAttendanceError):
        _submit(stack, lecture, answer="Paris", now=at(9, 31))


@pytest.mark.parametrize(
    "hour, minute, message",
    [(8, 30, "not available yet"), (10, 1, "closed")],
)
def test_outside_the_window_is_not_live(stack, lecture, at, hour, minute, message):
    _enroll(stack, lecture)

    with pytest.raises(AttendanceNotAllowedError, match=message) as exc:
        _submit(stack, lecture, now=at(hour, minute))

    assert exc.value.reason == RejectionReason.NOT_LIVE
    assert stack.attendance.add_calls == 0


def test_boundary_instants_are_accepted(stack, lecture, at):
    _enroll(stack, lecture)
    _enroll(stack, lecture, student_id=3)

    assert _submit(stack, lecture, now=at(9, 0)).is_correct
    assert _submit(stack, lecture, student_id=3, now=at(10, 0)).is_correct


def test_not_enrolled_is_rejected(stack, lecture, at):
    with pytest.raises(AttendanceNotAllowedError) as exc:
        _submit(stack, lecture, now=at(9, 30))

    assert exc.value.reason == RejectionReason.NOT_ENROLLED
    assert stack.attendance.add_calls == 0


@pytest.mark.parametrize("answer", ["", "   ", None])
def test_empty_answer_fails_before_any_store_call(stack, lecture, at, answer):
    _enroll(stack, lecture)
    stack.lectures.lectures.clear()

    with pytest.raises(ValidationError, match="Please enter an answer"):
        _submit(stack, lecture, answer=answer, now=at(9, 30))
    assert stack.attendance.add_calls == 0


def test_lecturer_cannot_mark_attendance(stack, lecture, at):
    with pytest.raises(AuthorizationError):
        _submit(stack, lecture, current_role=Role.LECTURER, now=at(9, 30))


def test_unknown_lecture(stack, lecture, at):
    with pytest.raises(ValidationError, match="Lecture not found"):
        stack.container.attendance_service.submit(
            current_role=Role.STUDENT, student_id=STUDENT_ID, lecture_id=404, answer="x", now=at(9, 30)
        )


def test_store_duplicate_from_a_concurrent_submit_maps_to_friendly_error(stack, lecture, at):
    _enroll(stack, lecture)
    stack.attendance.fail_with = StoreErrorKind.DUPLICATE

    with pytest.raises(DuplicateAttendanceError, match="You have already marked attendance for this lecture!"):
        _submit(stack, lecture, now=at(9, 30))


def test_store_outage_is_reported_as_store_error(stack, lecture, at):
    _enroll(stack, lecture)
    stack.attendance.fail_with = StoreErrorKind.UNAVAILABLE

    with pytest.raises(StoreError):
        _submit(stack, lecture, now=at(9, 30))


def test_uses_injected_clock_when_now_is_omitted(stack, lecture, at):
    _enroll(stack, lecture)
    stack.clock.set(at(11, 0))

    with pytest.raises(AttendanceNotAllowedError):
        _submit(stack, lecture)

    stack.clock.set(at(9, 45))
    assert _submit(stack, lecture).is_correct


def test_prompt_reflects_eligibility(stack, lecture, at):
    svc = stack.container.attendance_service

    assert svc.prompt(student_id=STUDENT_ID, lecture_id=lecture.lecture_id, now=at(9, 30)).action == AttendanceAction.ENROLL
    _enroll(stack, lecture)
    assert svc.prompt(student_id=STUDENT_ID, lecture_id=lecture.lecture_id, now=at(8, 0)).action == AttendanceAction.NOT_YET_AVAILABLE
    assert svc.prompt(student_id=STUDENT_ID, lecture_id=lecture.lecture_id, now=at(9, 30)).action == AttendanceAction.MARK_ATTENDANCE
    _submit(stack, lecture, now=at(9, 30))
    assert svc.prompt(student_id=STUDENT_ID, lecture_id=lecture.lecture_id, now=at(9, 40)).action == AttendanceAction.ALREADY_MARKED


def test_participation_stage(stack, lecture, at):
    svc = stack.container.attendance_service
    p = lambda: svc.participation(lecture_id=lecture.lecture_id, student_id=STUDENT_ID)

    assert p().stage == ParticipationStage.UNENROLLED
    _enroll(stack, lecture)
    assert p().stage == ParticipationStage.ENROLLED
    _submit(stack, lecture, now=at(9, 30))
    assert p().stage == ParticipationStage.ATTENDED


def test_roster_export_lists_every_enrolled_student(stack, lecture, at):
    _enroll(stack, lecture)
    _enroll(stack, lecture, student_id=3)
    _submit(stack, lecture, answer="lyon", now=at(9, 30))

    rows = stack.container.attendance_service.roster_export_rows(
        current_role=Role.LECTURER, lecturer_id=1, lecture_id=lecture.lecture_id
    )

    assert [r["student_number"] for r in rows] == ["S0001", "S0002"]
    assert rows[0]["result"] == "incorrect"
    assert rows[0]["answer"] == "lyon"
    assert rows[1]["result"] == "-"
    assert rows[1]["marked_at"] == ""
    assert rows[0]["lecture_date"] == "2026-03-02"


def test_roster_export_is_owner_only(stack, lecture):
    with pytest.raises(AuthorizationError):
        stack.container.attendance_service.roster_export_rows(
            current_role=Role.LECTURER, lecturer_id=99, lecture_id=lecture.lecture_id
        )
    with pytest.raises(AuthorizationError):
        stack.container.attendance_service.roster_export_rows(
            current_role=Role.STUDENT, lecturer_id=1, lecture_id=lecture.lecture_id
        )
