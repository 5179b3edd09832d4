# Overview: Flask API route for login; returns the caller's identity.

from flask import Blueprint, jsonify

from . import json_body
from ..services import auth_service


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.post("/login")
def login_route():
    """
    Verify username/password.

    Returns {"user": {id, username, role, department}}. No token is issued;
    the client sends role/department/user id as claim headers afterwards.
    """
    data = json_body()
    identity = auth_service.authenticate(data.get("username"), data.get("password"))
    return jsonify({"user": identity.to_dict()}), 200
