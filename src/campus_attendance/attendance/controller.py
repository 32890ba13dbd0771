from __future__ import annotations

import csv
import io
import logging

import qrcode
from flask import Flask, flash, jsonify, redirect, render_template, request, send_file, session, url_for

from ..common.decorators import api_role_required, current_user_view, role_required
from ..core.enums import AttendanceAction, Role
from ..core.exceptions import (
    AuthorizationError,
    DuplicateAttendanceError,
    StoreError,
    ValidationError,
)
from ..container import Container
from .eligibility import action_label

logger = logging.getLogger(__name__)

ROSTER_FIELDS = [
    "course_code",
    "lecture_date",
    "student_number",
    "full_name",
    "email",
    "enrolled_at",
    "marked_at",
    "answer",
    "result",
]


def register(app: Flask, container: Container) -> None:
    def _submit(lecture_id: int, answer: str):
        return container.attendance_service.submit(
            current_role=Role(session.get("role")),
            student_id=int(session["user_id"]),
            lecture_id=lecture_id,
            answer=answer,
        )

    def _render_forbidden() -> tuple[str, int]:
        return render_template("403.html", current_user=current_user_view()), 403

    @app.route("/lectures/<int:lecture_id>/attendance", methods=["GET", "POST"], endpoint="mark_attendance")
    @role_required(Role.STUDENT)
    def mark_attendance(lecture_id: int):
        if request.method == "POST":
            answer = request.form.get("answer", "")
            try:
                result = _submit(lecture_id, answer)
                if result.is_correct:
                    flash("Attendance recorded. Correct answer!", "success")
                else:
                    flash("Attendance recorded, but the answer was incorrect.", "warning")
                return redirect(url_for("student_dashboard"))
            except DuplicateAttendanceError as e:
                flash(str(e), "info")
                return redirect(url_for("student_dashboard"))
            except ValidationError as e:
                flash(str(e), "warning")
            except (AuthorizationError, StoreError) as e:
                flash(str(e), "danger")
                return redirect(url_for("student_dashboard"))
            except Exception:
                logger.exception("Marking attendance failed")
                flash("System error while marking attendance", "danger")

        try:
            prompt = container.attendance_service.prompt(student_id=int(session["user_id"]), lecture_id=lecture_id)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("student_dashboard"))

        if prompt.action != AttendanceAction.MARK_ATTENDANCE:
            flash(action_label(prompt.action), "info")
            return redirect(url_for("student_dashboard"))

        return render_template("student/mark_attendance.html", lecture=prompt.lecture, active_page="student_dashboard")

    @app.route("/api/lectures/<int:lecture_id>/attendance", methods=["POST"], endpoint="api_mark_attendance")
    @api_role_required(Role.STUDENT)
    def api_mark_attendance(lecture_id: int):
        data = request.get_json(silent=True) or {}
        try:
            answer = data.get("answer")
            result = _submit(lecture_id, answer if isinstance(answer, str) else "")
            return jsonify(
                {
                    "success": True,
                    "attendance_id": result.attendance_id,
                    "is_correct": result.is_correct,
                    "stage": result.stage.value,
                    "message": "Attendance recorded",
                }
            ), 201
        except DuplicateAttendanceError as e:
            return jsonify({"success": False, "message": str(e)}), 409
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthorizationError as e:
            reason = getattr(e, "reason", None)
            return jsonify({"success": False, "message": str(e), "reason": reason.value if reason else None}), 403
        except StoreError as e:
            return jsonify({"success": False, "message": str(e)}), 503
        except Exception:
            logger.exception("Marking attendance failed")
            return jsonify({"success": False, "message": "System error while marking attendance"}), 500

    @app.route("/lecturer/lectures/<int:lecture_id>/attendance.csv", endpoint="export_attendance")
    @role_required(Role.LECTURER)
    def export_attendance(lecture_id: int):
        try:
            rows = container.attendance_service.roster_export_rows(
                current_role=Role(session.get("role")),
                lecturer_id=int(session["user_id"]),
                lecture_id=lecture_id,
            )
        except AuthorizationError:
            return _render_forbidden()
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("lecturer_dashboard"))

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=ROSTER_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=lecture_{lecture_id}_attendance.csv"},
        )

    @app.route("/lecturer/lectures/<int:lecture_id>/qr.png", endpoint="lecture_qr")
    @role_required(Role.LECTURER)
    def lecture_qr(lecture_id: int):
        """QR code students scan to open the lecture's attendance page."""
        try:
            lecture = container.attendance_service.get_lecture(lecture_id)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("lecturer_dashboard"))
        if lecture.lecturer_id != int(session["user_id"]):
            return _render_forbidden()

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(url_for("mark_attendance", lecture_id=lecture.lecture_id, _external=True))
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")
