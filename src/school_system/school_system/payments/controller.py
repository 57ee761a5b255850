from __future__ import annotations

from flask import Flask, jsonify

from ..common.guards import current_user
from ..common.http import json_body
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_guard

    @app.route("/payments", methods=["GET"], endpoint="payments_list")
    @auth.required()
    def payments_list():
        payments = container.payment_service.list_for(current_user())
        return jsonify({"payments": [p.to_dict() for p in payments]})

    @app.route("/payments", methods=["POST"], endpoint="payments_create")
    @auth.required(Role.ADMIN)
    def payments_create():
        payment = container.payment_service.create(current_role=current_user().role, data=json_body())
        return jsonify({"payment": payment.to_dict()}), 201
