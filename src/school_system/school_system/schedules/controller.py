from __future__ import annotations

from flask import Flask, jsonify

from ..common.guards import current_user
from ..common.http import json_body
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_guard
    schedules = container.schedule_service

    @app.route("/schedules", methods=["GET"], endpoint="schedules_list")
    @auth.required()
    def schedules_list():
        return jsonify({"schedules": [schedules.populate(s) for s in schedules.list_all()]})

    @app.route("/schedules", methods=["POST"], endpoint="schedules_create")
    @auth.required(Role.ADMIN)
    def schedules_create():
        schedule = schedules.create(current_role=current_user().role, data=json_body())
        return jsonify({"schedule": schedule.to_dict()}), 201

    @app.route("/schedules/<int:schedule_id>", methods=["GET"], endpoint="schedules_get")
    @auth.required()
    def schedules_get(schedule_id: int):
        return jsonify({"schedule": schedules.populate(schedules.get(schedule_id))})

    @app.route("/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    @auth.required(Role.ADMIN)
    def schedules_delete(schedule_id: int):
        schedules.delete(current_role=current_user().role, schedule_id=schedule_id)
        return jsonify({"message": "Schedule deleted successfully"})
