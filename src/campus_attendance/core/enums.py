from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    STUDENT = "student"
    LECTURER = "lecturer"


class LifecycleState(str, Enum):
    """Temporal state of a lecture, derived from its schedule and the current time."""

    NOT_STARTED = "NOT_STARTED"
    LIVE = "LIVE"
    ENDED = "ENDED"


class AttendanceAction(str, Enum):
    """What a student may do with a lecture right now."""

    ENROLL = "ENROLL"
    MARK_ATTENDANCE = "MARK_ATTENDANCE"
    ALREADY_MARKED = "ALREADY_MARKED"
    NOT_YET_AVAILABLE = "NOT_YET_AVAILABLE"
    CLOSED = "CLOSED"


class ParticipationStage(str, Enum):
    """Per-student, per-lecture progression: UNENROLLED -> ENROLLED -> ATTENDED."""

    UNENROLLED = "UNENROLLED"
    ENROLLED = "ENROLLED"
    ATTENDED = "ATTENDED"


class RejectionReason(str, Enum):
    NOT_ENROLLED = "NOT_ENROLLED"
    NOT_LIVE = "NOT_LIVE"
    ALREADY_MARKED = "ALREADY_MARKED"


class StoreErrorKind(str, Enum):
    """Store failures the domain layer is allowed to know about."""

    DUPLICATE = "DUPLICATE"
    UNAVAILABLE = "UNAVAILABLE"
