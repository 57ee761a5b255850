from __future__ import annotations

from flask import Flask, jsonify

from ..common.guards import current_user
from ..common.http import json_body
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_guard
    groups = container.group_service

    @app.route("/groups", methods=["GET"], endpoint="groups_list")
    @auth.required()
    def groups_list():
        return jsonify({"groups": [groups.populate(g) for g in groups.list_for(current_user())]})

    @app.route("/groups", methods=["POST"], endpoint="groups_create")
    @auth.required(Role.ADMIN)
    def groups_create():
        group = groups.create(current_role=current_user().role, data=json_body())
        return jsonify({"group": group.to_dict()}), 201

    @app.route("/groups/<int:group_id>", methods=["GET"], endpoint="groups_get")
    @auth.required()
    def groups_get(group_id: int):
        return jsonify({"group": groups.populate(groups.get_for(current_user(), group_id))})
