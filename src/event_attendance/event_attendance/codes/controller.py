from __future__ import annotations

import io

from flask import Flask, jsonify, send_file

from ..common.http import admin_required, handles_domain_errors, json_body, login_required
from ..container import Container
from .model import AttendanceCode


def _code_payload(code: AttendanceCode) -> dict:
    return {
        "event_id": code.event_id,
        "attendance_code": code.code,
        "created_at": code.created_at.isoformat(),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/events/<int:event_id>/attendance-code", methods=["POST"], endpoint="attendance_code_generate")
    @admin_required
    @handles_domain_errors
    def generate(event_id: int):
        code = container.code_manager.generate(event_id)
        return jsonify(_code_payload(code)), 201

    @app.route("/events/<int:event_id>/attendance-code", methods=["GET"], endpoint="attendance_code_get")
    @admin_required
    @handles_domain_errors
    def get_active(event_id: int):
        return jsonify(_code_payload(container.code_manager.get_active(event_id)))

    @app.route("/events/<int:event_id>/attendance-code", methods=["DELETE"], endpoint="attendance_code_revoke")
    @admin_required
    @handles_domain_errors
    def revoke(event_id: int):
        container.code_manager.revoke(event_id)
        return "", 204

    @app.route("/events/<int:event_id>/attendance-code/qr", methods=["GET"], endpoint="attendance_code_qr")
    @admin_required
    @handles_domain_errors
    def qr_image(event_id: int):
        """QR image of the active code, for the projector at the venue."""

        png = container.code_manager.render_qr_png(event_id)
        return send_file(io.BytesIO(png), mimetype="image/png")

    @app.route("/events/<int:event_id>/attendance-code/check", methods=["POST"], endpoint="attendance_code_check")
    @login_required
    @handles_domain_errors
    def check(event_id: int):
        result = container.code_manager.check(event_id, json_body().get("attendance_code"))
        return jsonify({"is_valid": result.is_valid, "message": result.message})
