# Overview: Fault report ledger; owner-scoped listing, admin-only close and delete.

from __future__ import annotations

from flask import current_app

from ..errors import NotFound, PermissionDenied, Unauthenticated, ValidationError
from ..extensions import db
from ..models import Device, FaultReport, FAULT_OPEN, FAULT_CLOSED
from ..time_utils import utcnow
from .claims_service import Claims
from .concurrency import lock_for_update, run_with_retry


def _require_admin(claims: Claims, action: str) -> None:
    if not claims.is_admin:
        current_app.logger.warning(
            "Permission denied: %s (role=%r user_id=%r)", action, claims.role, claims.user_id
        )
        raise PermissionDenied("Permission denied")


def _parse_device_id(device_id) -> int:
    if device_id is None or device_id == "":
        raise ValidationError("device_id is required")
    if isinstance(device_id, bool):
        raise ValidationError("device_id must be an integer")
    if isinstance(device_id, int):
        return device_id
    if isinstance(device_id, str) and device_id.strip().lstrip("-").isdigit():
        return int(device_id.strip())
    raise ValidationError("device_id must be an integer")


def create_fault(claims: Claims, device_id, description) -> FaultReport:
    """
    Record a new Open fault for the calling user.

    The device is not looked up: a report may reference a device id that
    does not exist (or no longer exists).
    """
    if not claims.is_authenticated:
        raise Unauthenticated("User ID required")

    device_id = _parse_device_id(device_id)
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("description is required")

    fault = FaultReport(
        device_id=device_id,
        description=description,
        status=FAULT_OPEN,
        created_at=utcnow(),
        user_id=claims.user_id,
    )
    db.session.add(fault)
    db.session.commit()
    return fault


def list_faults(claims: Claims) -> list[tuple[FaultReport, str | None]]:
    """
    Reports visible to the caller, newest first, each with its device name.

    Admin sees every report; anyone else only the reports they filed.
    The device name is None when the device has been deleted.
    """
    query = (
        db.session.query(FaultReport, Device.name)
        .outerjoin(Device, Device.id == FaultReport.device_id)
    )

    if not claims.is_admin:
        if claims.user_id is None:
            return []
        query = query.filter(FaultReport.user_id == claims.user_id)

    return [(fault, device_name) for fault, device_name in query.order_by(FaultReport.id.desc()).all()]


def close_fault(claims: Claims, fault_id: int) -> FaultReport:
    """Mark a report Closed. Closing an already closed report is a no-op."""
    _require_admin(claims, "close fault")

    def _op():
        fault = lock_for_update(db.session.query(FaultReport).filter_by(id=fault_id)).first()
        if not fault:
            raise NotFound("Fault report not found")
        if fault.status != FAULT_CLOSED:
            fault.status = FAULT_CLOSED
            db.session.commit()
        return fault

    return run_with_retry(_op)


def delete_fault(claims: Claims, fault_id: int) -> None:
    """Delete a report. Missing ids are a no-op."""
    _require_admin(claims, "delete fault")

    deleted = db.session.query(FaultReport).filter_by(id=fault_id).delete()
    db.session.commit()
    if deleted:
        current_app.logger.info("Deleted fault report %s", fault_id)
