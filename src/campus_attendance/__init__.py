"""Campus lecture attendance package.

Organized by feature modules (users, lectures, enrollments, attendance) with a
thin Flask controller layer over service and repository layers.
"""
from __future__ import annotations

from .main import create_app

__all__ = ["create_app"]
