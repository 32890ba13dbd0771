from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, session, url_for

from ..common.decorators import api_role_required, role_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DuplicateEnrollmentError, StoreError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _enroll(lecture_id: int) -> int:
        return container.enrollment_service.enroll(
            current_role=Role(session.get("role")),
            student_id=int(session["user_id"]),
            lecture_id=lecture_id,
        )

    @app.route("/lectures/<int:lecture_id>/enroll", methods=["POST"], endpoint="enroll")
    @role_required(Role.STUDENT)
    def enroll(lecture_id: int):
        try:
            _enroll(lecture_id)
            flash("Enrolled in lecture!", "success")
        except DuplicateEnrollmentError as e:
            flash(str(e), "info")
        except (ValidationError, AuthorizationError, StoreError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Enrollment failed")
            flash("System error while enrolling", "danger")
        return redirect(url_for("student_dashboard"))

    @app.route("/api/lectures/<int:lecture_id>/enroll", methods=["POST"], endpoint="api_enroll")
    @api_role_required(Role.STUDENT)
    def api_enroll(lecture_id: int):
        try:
            enrollment_id = _enroll(lecture_id)
            return jsonify({"success": True, "enrollment_id": enrollment_id, "message": "Enrolled in lecture!"}), 201
        except DuplicateEnrollmentError as e:
            return jsonify({"success": False, "message": str(e)}), 409
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except StoreError as e:
            return jsonify({"success": False, "message": str(e)}), 503
        except Exception:
            logger.exception("Enrollment failed")
            return jsonify({"success": False, "message": "System error while enrolling"}), 500
