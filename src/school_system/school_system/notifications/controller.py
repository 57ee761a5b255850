from __future__ import annotations

from flask import Flask, jsonify

from ..common.guards import current_user
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_guard

    @app.route("/notifications", methods=["GET"], endpoint="notifications_list")
    @auth.required()
    def notifications_list():
        mine = container.notification_service.list_mine(current_user().user_id)
        return jsonify({"notifications": [n.to_dict() for n in mine]})

    @app.route("/notifications/<int:notification_id>/read", methods=["PATCH"], endpoint="notifications_mark_read")
    @auth.required()
    def notifications_mark_read(notification_id: int):
        notification = container.notification_service.mark_read(
            user_id=current_user().user_id, notification_id=notification_id
        )
        return jsonify({"notification": notification.to_dict()})
