from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.results import StoreResult
from .model import Lecture, NewLecture


class LectureRepository(Protocol):
    def get_by_id(self, lecture_id: int) -> Optional[Lecture]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Lecture]:
        """All lectures, earliest first (date, then start time)."""

        raise NotImplementedError

    def list_for_lecturer(self, lecturer_id: int) -> Sequence[Lecture]:
        """Lectures owned by a lecturer, newest first."""

        raise NotImplementedError

    def create(self, *, lecturer_id: int, lecture: NewLecture) -> StoreResult[int]:
        raise NotImplementedError
