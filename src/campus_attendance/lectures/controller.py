from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.decorators import role_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/student", endpoint="student_dashboard")
    @role_required(Role.STUDENT)
    def student_dashboard():
        board = container.lecture_service.student_dashboard(student_id=int(session["user_id"]))
        return render_template(
            "student/dashboard.html",
            name=session.get("name"),
            board=board,
            refresh_seconds=app.config["STATE_REFRESH_SECONDS"],
            active_page="student_dashboard",
        )

    @app.route("/lecturer", endpoint="lecturer_dashboard")
    @role_required(Role.LECTURER)
    def lecturer_dashboard():
        board = container.lecture_service.lecturer_dashboard(lecturer_id=int(session["user_id"]))
        return render_template(
            "lecturer/dashboard.html",
            name=session.get("name"),
            board=board,
            refresh_seconds=app.config["STATE_REFRESH_SECONDS"],
            active_page="lecturer_dashboard",
        )

    @app.route("/lecturer/lectures/new", methods=["GET", "POST"], endpoint="create_lecture")
    @role_required(Role.LECTURER)
    def create_lecture():
        form = request.form
        if request.method == "POST":
            try:
                container.lecture_service.create_lecture(
                    current_role=Role(session.get("role")),
                    lecturer_id=int(session["user_id"]),
                    course_name=form.get("course_name", ""),
                    course_code=form.get("course_code", ""),
                    lecture_date=form.get("date", ""),
                    start_time=form.get("start_time", ""),
                    end_time=form.get("end_time", ""),
                    location=form.get("location", ""),
                    attendance_question=form.get("attendance_question", ""),
                    attendance_answer=form.get("attendance_answer", ""),
                )
                flash("Lecture created!", "success")
                return redirect(url_for("lecturer_dashboard"))
            except (ValidationError, AuthorizationError, StoreError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating lecture failed")
                flash("System error while creating the lecture", "danger")

        return render_template("lecturer/create_lecture.html", form=form, active_page="create_lecture")

    @app.route("/api/lectures/states", methods=["GET"], endpoint="api_lecture_states")
    def api_lecture_states():
        """Polled by dashboards to refresh Upcoming/Live/Ended badges."""
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Not authenticated"}), 401

        try:
            snapshot = container.lecture_service.state_snapshot(
                viewer_id=int(session["user_id"]),
                role=Role(session.get("role")),
            )
            return jsonify({"success": True, **snapshot}), 200
        except Exception:
            logger.exception("Lecture state refresh failed")
            return jsonify({"success": False, "message": "Failed to load lectures"}), 500
