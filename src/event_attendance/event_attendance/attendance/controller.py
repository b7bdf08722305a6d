from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import (
    admin_required,
    current_member_id,
    current_role,
    handles_domain_errors,
    json_body,
    login_required,
)
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/events/<int:event_id>/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    @handles_domain_errors
    def check_in(event_id: int):
        data = json_body()
        result = container.checkin_processor.check_in(
            event_id,
            current_member_id(),
            submitted_code=data.get("attendance_code"),
        )
        payload = {"success": True, "created": result.created, "message": result.message, **result.record.to_dict()}
        return jsonify(payload), (201 if result.created else 200)

    @app.route("/events/<int:event_id>/attendance/my", methods=["GET"], endpoint="attendance_my_for_event")
    @login_required
    @handles_domain_errors
    def my_attendance_for_event(event_id: int):
        record = container.query_service.my_attendance(current_member_id(), event_id)
        return jsonify(record.to_dict())

    @app.route("/events/attendance/my", methods=["GET"], endpoint="attendance_my_history")
    @login_required
    @handles_domain_errors
    def my_history():
        records = container.query_service.my_history(
            current_member_id(),
            status_filter=request.args.get("status"),
        )
        return jsonify({"attendances": [r.to_dict() for r in records], "total": len(records)})

    @app.route("/events/<int:event_id>/attendance", methods=["GET"], endpoint="attendance_roster")
    @admin_required
    @handles_domain_errors
    def roster(event_id: int):
        rows = container.query_service.roster_with_status(
            event_id,
            status_filter=request.args.get("status"),
            member_id_filter=request.args.get("member_id"),
        )
        return jsonify({"attendances": [r.to_dict() for r in rows], "total": len(rows)})

    @app.route("/events/<int:event_id>/attendance.csv", methods=["GET"], endpoint="attendance_roster_csv")
    @admin_required
    @handles_domain_errors
    def roster_csv(event_id: int):
        csv_bytes = container.query_service.export_roster_csv(event_id).encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=event_{event_id}_attendance.csv"},
        )

    @app.route("/events/<int:event_id>/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @admin_required
    @handles_domain_errors
    def stats(event_id: int):
        return jsonify(asdict(container.query_service.stats(event_id)))

    @app.route("/events/<int:event_id>/attendance/<member_id>", methods=["PUT"], endpoint="attendance_set_status")
    @admin_required
    @handles_domain_errors
    def set_status(event_id: int, member_id: str):
        data = json_body()
        if "status" not in data:
            raise ValidationError("status를 입력해 주세요")
        record = container.override_service.set_status(
            current_role=current_role(),
            admin_member_id=current_member_id(),
            event_id=event_id,
            member_id=member_id,
            status=data.get("status"),
            reason=data.get("reason"),
            checked_in_at=parse_iso_datetime(data.get("checked_in_at")),
        )
        return jsonify(record.to_dict())

    @app.route(
        "/events/<int:event_id>/attendance/<member_id>/reason",
        methods=["PUT"],
        endpoint="attendance_update_reason",
    )
    @admin_required
    @handles_domain_errors
    def update_reason(event_id: int, member_id: str):
        data = json_body()
        record = container.override_service.update_excused_reason(
            current_role=current_role(),
            admin_member_id=current_member_id(),
            event_id=event_id,
            member_id=member_id,
            reason=data.get("reason") or "",
        )
        return jsonify(record.to_dict())

    @app.route("/events/<int:event_id>/attendance/<member_id>", methods=["DELETE"], endpoint="attendance_clear")
    @admin_required
    @handles_domain_errors
    def clear(event_id: int, member_id: str):
        deleted = container.override_service.clear(
            current_role=current_role(),
            admin_member_id=current_member_id(),
            event_id=event_id,
            member_id=member_id,
        )
        return jsonify({"success": True, "deleted": deleted})

    @app.route("/events/<int:event_id>/attendance/bulk", methods=["POST"], endpoint="attendance_bulk")
    @admin_required
    @handles_domain_errors
    def bulk(event_id: int):
        entries = json_body().get("attendances")
        if not isinstance(entries, list):
            raise ValidationError("attendances는 목록이어야 합니다")
        result = container.override_service.bulk_set(
            current_role=current_role(),
            admin_member_id=current_member_id(),
            event_id=event_id,
            entries=entries,
        )
        return jsonify(
            {
                "message": f"{result.created}건 생성, {result.updated}건 수정",
                "created": result.created,
                "updated": result.updated,
                "errors": result.errors,
            }
        )
