from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import Clock
from ..core.constants import DUPLICATE_ENROLLMENT_MESSAGE
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DuplicateEnrollmentError, StoreError, ValidationError
from ..lectures.repository import LectureRepository
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Use case: a student enrolls in a lecture (UNENROLLED -> ENROLLED)."""

    def __init__(self, enrollments: EnrollmentRepository, lectures: LectureRepository, clock: Clock):
        self._enrollments = enrollments
        self._lectures = lectures
        self._clock = clock

    def is_enrolled(self, *, lecture_id: int, student_id: int) -> bool:
        return self._enrollments.get(lecture_id=int(lecture_id), student_id=int(student_id)) is not None

    def enroll(self, *, current_role: Role, student_id: int, lecture_id: int, now: Optional[datetime] = None) -> int:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can enroll in lectures")

        lecture = self._lectures.get_by_id(int(lecture_id))
        if not lecture:
            raise ValidationError("Lecture not found")

        if self.is_enrolled(lecture_id=lecture.lecture_id, student_id=student_id):
            raise DuplicateEnrollmentError(DUPLICATE_ENROLLMENT_MESSAGE)

        now = now or self._clock.now()
        result = self._enrollments.add(lecture_id=lecture.lecture_id, student_id=int(student_id), enrolled_at=now)
        if result.is_duplicate:
            # Lost a race with another tab; the store's constraint decides.
            raise DuplicateEnrollmentError(DUPLICATE_ENROLLMENT_MESSAGE)
        if not result.ok:
            raise StoreError("Failed to enroll in lecture, please try again")

        logger.info("Student %s enrolled in lecture %s", student_id, lecture.lecture_id)
        return int(result.value)
