from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.decorators import login_required
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, StoreError, ValidationError
from ..container import Container
from .service import SessionUser

logger = logging.getLogger(__name__)


def _start_session(s_user: SessionUser, *, remember: bool) -> None:
    session.clear()
    session.permanent = remember
    session["user_id"] = s_user.user_id
    session["name"] = s_user.full_name
    session["email"] = s_user.email
    session["role"] = s_user.role.value


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["csrf_token"] = lambda: ""
    app.permanent_session_lifetime = timedelta(days=7)

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            try:
                s_user = container.auth_service.sign_in(
                    request.form.get("email", ""),
                    request.form.get("password", ""),
                )
                _start_session(s_user, remember=bool(request.form.get("remember_me")))
                flash("Signed in successfully!", "success")
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.exception("Sign-in failed")
                if bool(app.config.get("DEBUG", False)):
                    flash(f"System error while signing in: {e}", "danger")
                else:
                    flash("System error while signing in", "danger")

        return render_template("login.html")

    @app.route("/register", methods=["GET", "POST"], endpoint="register")
    def register_account():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        form = request.form
        if request.method == "POST":
            try:
                try:
                    role = Role(form.get("role", Role.STUDENT.value))
                except ValueError:
                    raise ValidationError("Unknown account type")

                s_user = container.auth_service.sign_up(
                    email=form.get("email", ""),
                    password=form.get("password", ""),
                    full_name=form.get("full_name", ""),
                    role=role,
                    student_number=form.get("student_number"),
                    department=form.get("department"),
                )
                _start_session(s_user, remember=False)
                flash("Account created. Welcome!", "success")
                return redirect(url_for("dashboard"))
            except (ValidationError, StoreError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Sign-up failed")
                flash("System error while creating the account", "danger")

        return render_template("register.html", form=form, roles=list(Role))

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        if session.get("role") == Role.LECTURER.value:
            return redirect(url_for("lecturer_dashboard"))
        return redirect(url_for("student_dashboard"))
