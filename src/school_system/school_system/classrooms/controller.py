from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import optional_iso_datetime
from ..common.guards import current_user
from ..common.http import json_body
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_guard

    @app.route("/classrooms", methods=["GET"], endpoint="classrooms_list")
    @auth.required()
    def classrooms_list():
        return jsonify({"classrooms": [c.to_dict() for c in container.classroom_service.list_all()]})

    @app.route("/classrooms", methods=["POST"], endpoint="classrooms_create")
    @auth.required(Role.ADMIN)
    def classrooms_create():
        classroom = container.classroom_service.create(current_role=current_user().role, data=json_body())
        return jsonify({"classroom": classroom.to_dict()}), 201

    @app.route("/classrooms/schedule/all", methods=["GET"], endpoint="classrooms_schedule_all")
    @auth.required()
    def classrooms_schedule_all():
        result = container.availability_resolver.for_all_classrooms(
            view=request.args.get("view"),
            reference=optional_iso_datetime(request.args.get("date"), "date"),
        )
        return jsonify(result)

    @app.route("/classrooms/<int:classroom_id>", methods=["GET"], endpoint="classrooms_get")
    @auth.required()
    def classrooms_get(classroom_id: int):
        return jsonify({"classroom": container.classroom_service.get(classroom_id).to_dict()})

    @app.route("/classrooms/<int:classroom_id>", methods=["PUT"], endpoint="classrooms_update")
    @auth.required(Role.ADMIN)
    def classrooms_update(classroom_id: int):
        classroom = container.classroom_service.update(
            current_role=current_user().role, classroom_id=classroom_id, data=json_body()
        )
        return jsonify({"classroom": classroom.to_dict()})

    @app.route("/classrooms/<int:classroom_id>", methods=["DELETE"], endpoint="classrooms_delete")
    @auth.required(Role.ADMIN)
    def classrooms_delete(classroom_id: int):
        container.classroom_service.delete(current_role=current_user().role, classroom_id=classroom_id)
        return jsonify({"message": "Classroom deleted successfully"})

    @app.route("/classrooms/<int:classroom_id>/schedule", methods=["GET"], endpoint="classrooms_schedule")
    @auth.required()
    def classrooms_schedule(classroom_id: int):
        result = container.availability_resolver.for_classroom(
            classroom_id,
            view=request.args.get("view"),
            reference=optional_iso_datetime(request.args.get("date"), "date"),
        )
        return jsonify(result)
