from __future__ import annotations

from ..core.enums import AttendanceAction, LifecycleState, RejectionReason
from ..lectures.model import Lecture
from .eligibility import eligibility
from .model import Authorization, Participation, Verdict

_REJECTIONS = {
    AttendanceAction.ENROLL: RejectionReason.NOT_ENROLLED,
    AttendanceAction.ALREADY_MARKED: RejectionReason.ALREADY_MARKED,
    AttendanceAction.NOT_YET_AVAILABLE: RejectionReason.NOT_LIVE,
    AttendanceAction.CLOSED: RejectionReason.NOT_LIVE,
}


def normalize_answer(value: str) -> str:
    return (value or "").strip().casefold()


def validate(submitted_answer: str, expected_answer: str) -> Verdict:
    return Verdict(is_correct=normalize_answer(submitted_answer) == normalize_answer(expected_answer))


def authorize(lecture: Lecture, participation: Participation, state: LifecycleState) -> Authorization:
    if participation.lecture_id != lecture.lecture_id:
        raise ValueError("participation does not belong to this lecture")

    action = eligibility(state, participation.is_enrolled, participation.has_attended)
    if action == AttendanceAction.MARK_ATTENDANCE:
        return Authorization()
    return Authorization(reason=_REJECTIONS[action])
