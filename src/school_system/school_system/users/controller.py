from __future__ import annotations

from flask import Flask, jsonify

from ..common.guards import current_user
from ..common.http import json_body
from ..core.enums import Role
from ..container import Container
from .service import parse_profile


def register(app: Flask, container: Container) -> None:
    auth = container.auth_guard

    def _auth_payload(result, message: str) -> dict:
        return {"message": message, "token": result.token, "user": result.user.to_dict()}

    @app.route("/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        result = container.auth_service.register(parse_profile(data), admin_key=data.get("adminKey"))
        message = "User registered successfully"
        if not result.user.is_approved:
            message += ". Your account is pending approval by an administrator"
        return jsonify(_auth_payload(result, message)), 201

    @app.route("/auth/register-by-admin", methods=["POST"], endpoint="auth_register_by_admin")
    @auth.required(Role.ADMIN)
    def auth_register_by_admin():
        result = container.auth_service.register_by_admin(parse_profile(json_body()), current_role=current_user().role)
        return jsonify(_auth_payload(result, "User registered successfully")), 201

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        result = container.auth_service.login(data.get("email") or "", data.get("password") or "")
        return jsonify(_auth_payload(result, "Login successful")), 200

    @app.route("/auth/me", methods=["GET"], endpoint="auth_me")
    @auth.required()
    def auth_me():
        return jsonify({"user": container.user_service.get_user(current_user().user_id).to_dict()})

    @app.route("/auth/forgot-password", methods=["POST"], endpoint="auth_forgot_password")
    def auth_forgot_password():
        container.auth_service.request_password_reset(json_body().get("email"))
        return jsonify({"message": "Password reset email sent"}), 200

    @app.route("/auth/reset-password", methods=["POST"], endpoint="auth_reset_password")
    def auth_reset_password():
        data = json_body()
        container.auth_service.reset_password(data.get("token") or "", data.get("newPassword"))
        return jsonify({"message": "Password has been reset successfully"}), 200

    @app.route("/auth/approve-user/<int:user_id>", methods=["POST"], endpoint="auth_approve_user")
    @auth.required(Role.ADMIN)
    def auth_approve_user(user_id: int):
        user = container.auth_service.approve_user(current_role=current_user().role, user_id=user_id)
        return jsonify({"message": "User approved successfully", "user": user.to_dict()}), 200

    @app.route("/auth/pending-users", methods=["GET"], endpoint="auth_pending_users")
    @auth.required(Role.ADMIN)
    def auth_pending_users():
        pending = container.auth_service.list_pending(current_role=current_user().role)
        return jsonify({"pendingUsers": [u.to_dict() for u in pending]})

    @app.route("/users", methods=["GET"], endpoint="users_list")
    @auth.required(Role.ADMIN)
    def users_list():
        return jsonify({"users": [u.to_dict() for u in container.user_service.list_users()]})

    @app.route("/users", methods=["POST"], endpoint="users_create")
    @auth.required(Role.ADMIN)
    def users_create():
        result = container.auth_service.register_by_admin(parse_profile(json_body()), current_role=current_user().role)
        return jsonify({"user": result.user.to_dict()}), 201

    @app.route("/users/<int:user_id>", methods=["GET"], endpoint="users_get")
    @auth.required(Role.ADMIN)
    def users_get(user_id: int):
        return jsonify({"user": container.user_service.get_user(user_id).to_dict()})
