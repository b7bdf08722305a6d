from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import admin_required, handles_domain_errors, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/events/<int:event_id>/participants", methods=["GET"], endpoint="participants_list")
    @admin_required
    @handles_domain_errors
    def list_participants(event_id: int):
        rows = container.participant_roster.list(event_id)
        return jsonify(
            {
                "participants": [
                    {
                        "event_id": p.event_id,
                        "member_id": p.member_id,
                        "added_at": p.added_at.isoformat() if p.added_at else None,
                    }
                    for p in rows
                ],
                "total": len(rows),
            }
        )

    @app.route("/events/<int:event_id>/participants", methods=["POST"], endpoint="participants_add")
    @admin_required
    @handles_domain_errors
    def add_participants(event_id: int):
        change = container.participant_roster.add(event_id, json_body().get("member_ids"))
        return jsonify(
            {
                "message": f"{change.added}명 추가",
                "added": change.added,
                "already_exists": change.already_exists,
            }
        )

    @app.route("/events/<int:event_id>/participants", methods=["DELETE"], endpoint="participants_remove")
    @admin_required
    @handles_domain_errors
    def remove_participants(event_id: int):
        change = container.participant_roster.remove(event_id, json_body().get("member_ids"))
        return jsonify({"message": f"{change.removed}명 제거", "removed": change.removed})
