from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a campus profile (student or lecturer).

    Plain data object; no DB access code lives here.
    """

    user_id: int
    email: str
    full_name: str
    password_hash: str
    role: Role
    student_number: Optional[str] = None
    department: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @property
    def is_lecturer(self) -> bool:
        return self.role == Role.LECTURER
