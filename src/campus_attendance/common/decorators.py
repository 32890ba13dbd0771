from __future__ import annotations

from functools import wraps

from flask import flash, jsonify, redirect, render_template, session, url_for

from ..core.enums import Role


def current_user_view() -> dict:
    return {"full_name": session.get("name"), "role": session.get("role")}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            flash("Please sign in to continue.", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return redirect(url_for("login"))

            if session.get("role") != role.value:
                return render_template("403.html", current_user=current_user_view()), 403

            return view(*args, **kwargs)

        return wrapper

    return decorator


def api_role_required(role: Role):
    """JSON flavour of role_required: 401 without a session, 403 for the wrong role."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Not authenticated"}), 401

            if session.get("role") != role.value:
                return jsonify({"success": False, "message": "You do not have permission"}), 403

            return view(*args, **kwargs)

        return wrapper

    return decorator
