from __future__ import annotations

from ..core.enums import AttendanceAction, LifecycleState

ACTION_LABELS = {
    AttendanceAction.ENROLL: "Enroll in Lecture",
    AttendanceAction.MARK_ATTENDANCE: "Mark Attendance",
    AttendanceAction.ALREADY_MARKED: "Attendance Marked",
    AttendanceAction.NOT_YET_AVAILABLE: "Attendance not available yet",
    AttendanceAction.CLOSED: "Attendance closed",
}


def eligibility(state: LifecycleState, is_enrolled: bool, has_attended: bool) -> AttendanceAction:
    """Classify what a student may do with a lecture. First matching rule wins."""
    if not is_enrolled:
        return AttendanceAction.ENROLL
    if has_attended:
        return AttendanceAction.ALREADY_MARKED
    if state == LifecycleState.LIVE:
        return AttendanceAction.MARK_ATTENDANCE
    if state == LifecycleState.NOT_STARTED:
        return AttendanceAction.NOT_YET_AVAILABLE
    return AttendanceAction.CLOSED


def action_label(action: AttendanceAction) -> str:
    return ACTION_LABELS[action]
