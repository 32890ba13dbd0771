from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Protocol, Sequence, Set

from ..core.results import StoreResult
from .model import Enrollment


class EnrollmentRepository(Protocol):
    def get(self, *, lecture_id: int, student_id: int) -> Optional[Enrollment]:
        raise NotImplementedError

    def add(self, *, lecture_id: int, student_id: int, enrolled_at: datetime) -> StoreResult[int]:
        """Insert an enrollment. An existing (lecture, student) pair is a DUPLICATE failure."""

        raise NotImplementedError

    def lecture_ids_for_student(self, student_id: int) -> Set[int]:
        raise NotImplementedError

    def count_by_lecture(self, lecture_ids: Sequence[int]) -> Mapping[int, int]:
        raise NotImplementedError
