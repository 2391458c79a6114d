from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.web import json_body, login_required
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("rememberMe"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        logger.info("User %s signed in", s_user.user_id)
        return jsonify({"user": s_user.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @login_required
    def me():
        return jsonify(
            {
                "user": {
                    "id": session["user_id"],
                    "name": session.get("name"),
                    "role": session.get("role"),
                }
            }
        )
