from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from ..core.results import StoreResult
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        full_name: str,
        password_hash: str,
        role: Role,
        student_number: Optional[str] = None,
        department: Optional[str] = None,
    ) -> StoreResult[int]:
        """Insert a profile. A taken email comes back as a DUPLICATE failure."""

        raise NotImplementedError

    def get_names(self, user_ids: Sequence[int]) -> Mapping[int, str]:
        raise NotImplementedError
