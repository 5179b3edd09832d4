# Overview: Flask API routes for fault reports; parses input and returns JSON responses.

from flask import Blueprint, jsonify, g

from . import json_body
from ..decorators import with_claims
from ..services import fault_service


faults_bp = Blueprint("faults", __name__, url_prefix="/faults")


@faults_bp.post("")
@with_claims
def create_fault_route():
    """Requires: X-User-Id claim. The report is filed under that user."""
    data = json_body()
    fault = fault_service.create_fault(
        g.claims,
        data.get("device_id"),
        data.get("description"),
    )
    return jsonify(fault.to_dict()), 201


@faults_bp.get("")
@with_claims
def list_faults_route():
    """Admin: every report. Others: only their own."""
    rows = fault_service.list_faults(g.claims)
    return jsonify([
        fault.to_dict(device_name=device_name, include_device_name=True)
        for fault, device_name in rows
    ]), 200


@faults_bp.put("/<int:fault_id>/close")
@with_claims
def close_fault_route(fault_id: int):
    """Requires: admin role."""
    fault = fault_service.close_fault(g.claims, fault_id)
    return jsonify(fault.to_dict()), 200


@faults_bp.delete("/<int:fault_id>")
@with_claims
def delete_fault_route(fault_id: int):
    """Requires: admin role."""
    fault_service.delete_fault(g.claims, fault_id)
    return jsonify({"message": "Fault report deleted"}), 200
