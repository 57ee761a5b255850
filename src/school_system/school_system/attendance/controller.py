from __future__ import annotations

from flask import Flask, jsonify

from ..common.guards import current_user
from ..common.http import json_body
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_guard

    @app.route("/attendances", methods=["GET"], endpoint="attendances_list")
    @auth.required()
    def attendances_list():
        records = container.attendance_service.list_for(current_user())
        return jsonify({"attendances": [r.to_dict() for r in records]})

    @app.route("/attendances", methods=["POST"], endpoint="attendances_create")
    @auth.required(Role.TEACHER, Role.ADMIN)
    def attendances_create():
        record = container.attendance_service.record(current_role=current_user().role, data=json_body())
        return jsonify({"attendance": record.to_dict()}), 201
