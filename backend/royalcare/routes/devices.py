# Overview: Flask API routes for devices and their attachments; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g

from . import json_body
from ..decorators import with_claims
from ..services import device_service


devices_bp = Blueprint("devices", __name__, url_prefix="/devices")


@devices_bp.get("")
@with_claims
def list_devices_route():
    department = request.args.get("department") or None
    devices = device_service.list_devices(g.claims, department=department)
    return jsonify([device.to_dict() for device in devices]), 200


@devices_bp.post("")
@with_claims
def create_device_route():
    """Requires: admin role."""
    data = json_body()
    device = device_service.create_device(g.claims, data)
    return jsonify(device.to_dict()), 201


@devices_bp.get("/<int:device_id>")
@with_claims
def get_device_route(device_id: int):
    device = device_service.get_device(g.claims, device_id)
    return jsonify(device.to_dict()), 200


@devices_bp.put("/<int:device_id>")
@with_claims
def update_device_route(device_id: int):
    """Requires: admin role. Replaces every editable field."""
    data = json_body()
    device = device_service.update_device(g.claims, device_id, data)
    return jsonify(device.to_dict()), 200


@devices_bp.delete("/<int:device_id>")
@with_claims
def delete_device_route(device_id: int):
    """Requires: admin role. Also removes the device's attachment files."""
    device_service.delete_device(g.claims, device_id)
    return jsonify({"message": "Device deleted"}), 200


@devices_bp.post("/<int:device_id>/upload")
@with_claims
def upload_files_route(device_id: int):
    """Multipart upload, field "files" (repeatable)."""
    files = [
        (storage.read(), storage.filename or "")
        for storage in request.files.getlist("files")
        if storage.filename
    ]
    attachments = device_service.add_attachments(g.claims, device_id, files)
    return jsonify({"message": "Files uploaded", "attachments": attachments}), 200


@devices_bp.delete("/<int:device_id>/files/<filename>")
@with_claims
def delete_file_route(device_id: int, filename: str):
    attachments = device_service.remove_attachment(g.claims, device_id, filename)
    return jsonify({"message": "File deleted", "attachments": attachments}), 200
