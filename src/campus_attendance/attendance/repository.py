from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Protocol, Sequence, Set

from ..core.results import StoreResult
from .model import AttendanceRecord, RosterRow


class AttendanceRepository(Protocol):
    def get_for_student(self, *, lecture_id: int, student_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def add(
        self,
        *,
        lecture_id: int,
        student_id: int,
        student_answer: str,
        is_correct: bool,
        marked_at: datetime,
    ) -> StoreResult[int]:
        """Insert the attendance record. A second record for the pair is a DUPLICATE failure."""

        raise NotImplementedError

    def lecture_ids_for_student(self, student_id: int) -> Set[int]:
        raise NotImplementedError

    def count_by_lecture(self, lecture_ids: Sequence[int]) -> Mapping[int, int]:
        raise NotImplementedError

    def get_roster(self, lecture_id: int) -> Sequence[RosterRow]:
        """Enrolled students of a lecture joined with their submission, if any."""

        raise NotImplementedError
