from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, StoreError, UnauthenticatedError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after sign-in."""

    user_id: int
    full_name: str
    email: str
    role: Role


class AuthService:
    """Use cases: sign up, sign in, resolve the current user."""

    def __init__(self, users: UserRepository):
        self._users = users

    @staticmethod
    def _to_session(user: User) -> SessionUser:
        return SessionUser(user_id=user.user_id, full_name=user.full_name, email=user.email, role=user.role)

    def sign_in(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("User %s signed in as %s", user.user_id, user.role.value)
        return self._to_session(user)

    def sign_up(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        role: Role,
        student_number: Optional[str] = None,
        department: Optional[str] = None,
    ) -> SessionUser:
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        full_name = require_non_empty(full_name, "Full name")

        if role == Role.STUDENT:
            student_number = require_non_empty(student_number, "Student ID")
        else:
            student_number = None
        department = optional_text(department)

        result = self._users.create_user(
            email=email,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            role=role,
            student_number=student_number,
            department=department,
        )
        if result.is_duplicate:
            raise ValidationError("An account with this email already exists")
        if not result.ok:
            raise StoreError("Could not create the account, please try again")

        logger.info("Registered %s account %s", role.value, result.value)
        return SessionUser(user_id=int(result.value), full_name=full_name, email=email, role=role)

    def get_current_user(self, user_id: Optional[int]) -> User:
        if not user_id:
            raise UnauthenticatedError("Not authenticated")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise UnauthenticatedError("Not authenticated")
        return user
