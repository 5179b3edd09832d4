# Overview: Device registry; department-scoped reads, admin-only writes, attachment lists.

"""
Device Registry

Scope rules (claims come from claims_service):
- Admin sees every device. An explicit department filter narrows the list.
- Non-admin with a department only ever sees that department. Any
  department filter they send is ignored in favour of their own.
- Non-admin without a department is not narrowed by scope.

Devices outside the caller's scope are reported as NotFound, never as
PermissionDenied, so their existence is not revealed.

Attachments:
- add_attachments saves blobs first, then appends the stored names in one
  versioned write. A concurrent writer bumps version_id, our UPDATE matches
  no row, StaleDataError triggers a re-read and the append is redone.
- remove_attachment drops every entry equal to the stored name.
- delete_device purges all attachment blobs after the row is gone.
"""

from __future__ import annotations

from flask import current_app

from ..errors import NotFound, PermissionDenied, Unauthenticated, ValidationError
from ..extensions import db
from ..models import Device
from ..time_utils import parse_iso_date
from .blob_store import get_blob_store
from .claims_service import Claims
from .concurrency import lock_for_update, run_with_retry


REQUIRED_FIELDS = ("name", "model", "serial_number", "location", "branch", "status")
OPTIONAL_FIELDS = ("department",)
DATE_FIELDS = ("last_service_date", "next_service_date")


def _require_admin(claims: Claims, action: str) -> None:
    if not claims.is_admin:
        current_app.logger.warning(
            "Permission denied: %s (role=%r user_id=%r)", action, claims.role, claims.user_id
        )
        raise PermissionDenied("Permission denied")


def _in_scope(claims: Claims, device: Device) -> bool:
    if claims.is_admin or claims.department is None:
        return True
    return device.department == claims.department


def _clean_fields(fields: dict | None) -> dict:
    """Presence-check and normalise device fields for create/replace."""
    fields = fields or {}
    missing = [
        key for key in REQUIRED_FIELDS
        if fields.get(key) is None or (isinstance(fields.get(key), str) and not fields[key].strip())
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    values = {key: fields[key] for key in REQUIRED_FIELDS}
    for key in OPTIONAL_FIELDS:
        value = fields.get(key)
        values[key] = value if value not in ("", None) else None
    for key in DATE_FIELDS:
        try:
            values[key] = parse_iso_date(fields.get(key))
        except ValueError:
            raise ValidationError(f"{key} must be an ISO date (YYYY-MM-DD)") from None
    return values


def _scoped_device(claims: Claims, device_id: int, *, for_update: bool = False) -> Device:
    query = db.session.query(Device).filter_by(id=device_id).populate_existing()
    if for_update:
        query = lock_for_update(query)
    device = query.first()
    if not device or not _in_scope(claims, device):
        raise NotFound("Device not found")
    return device


def list_devices(claims: Claims, department: str | None = None) -> list[Device]:
    query = db.session.query(Device)

    if not claims.is_admin and claims.department is not None:
        department = claims.department

    if department:
        query = query.filter(Device.department == department)

    return query.order_by(Device.id.asc()).all()


def get_device(claims: Claims, device_id: int) -> Device:
    return _scoped_device(claims, device_id)


def create_device(claims: Claims, fields: dict) -> Device:
    _require_admin(claims, "create device")
    values = _clean_fields(fields)

    device = Device(attachments=[], **values)
    db.session.add(device)
    db.session.commit()
    return device


def update_device(claims: Claims, device_id: int, fields: dict) -> Device:
    """Replace every editable field. Attachments are left as they are."""
    _require_admin(claims, "update device")
    values = _clean_fields(fields)

    def _op():
        device = lock_for_update(
            db.session.query(Device).filter_by(id=device_id).populate_existing()
        ).first()
        if not device:
            raise NotFound("Device not found")
        for key, value in values.items():
            setattr(device, key, value)
        db.session.commit()
        return device

    return run_with_retry(_op)


def delete_device(claims: Claims, device_id: int) -> None:
    """Delete a device and its attachment blobs. Missing ids are a no-op."""
    _require_admin(claims, "delete device")

    def _op():
        device = lock_for_update(
            db.session.query(Device).filter_by(id=device_id).populate_existing()
        ).first()
        if not device:
            return None
        names = list(device.attachments or [])
        db.session.delete(device)
        db.session.commit()
        return names

    stored_names = run_with_retry(
        _op,
        attempts=current_app.config.get("ATTACHMENT_WRITE_ATTEMPTS", 5),
        backoff_base=0.05,
    )
    if stored_names is None:
        return

    blob_store = get_blob_store()
    for stored_name in dict.fromkeys(stored_names):
        blob_store.delete(stored_name)

    current_app.logger.info(
        "Deleted device %s and %d attachment blob(s)", device_id, len(stored_names)
    )


def add_attachments(claims: Claims, device_id: int, files) -> list[str]:
    """
    Store files and append their stored names to the device.

    files is a sequence of (bytes, original_name) pairs. Returns the full
    attachment list after the append.
    """
    if not claims.is_authenticated:
        raise Unauthenticated("User ID required")

    files = list(files or [])
    if not files:
        raise ValidationError("No files uploaded")
    max_files = current_app.config.get("MAX_UPLOAD_FILES", 10)
    if len(files) > max_files:
        raise ValidationError(f"At most {max_files} files per upload")

    # Fail before touching the blob store if the device is not reachable.
    _scoped_device(claims, device_id)

    blob_store = get_blob_store()
    stored_names: list[str] = []
    try:
        for data, original_name in files:
            stored_names.append(blob_store.save(data, original_name))

        def _op():
            device = _scoped_device(claims, device_id, for_update=True)
            device.attachments = list(device.attachments or []) + stored_names
            db.session.commit()
            return list(device.attachments)

        return run_with_retry(
            _op,
            attempts=current_app.config.get("ATTACHMENT_WRITE_ATTEMPTS", 5),
            backoff_base=0.05,
        )
    except Exception:
        for stored_name in stored_names:
            blob_store.delete(stored_name)
        raise


def remove_attachment(claims: Claims, device_id: int, stored_name: str) -> list[str]:
    """
    Drop every entry equal to stored_name from the device, then delete the blob.

    A name that is not attached to this device is a no-op: its blob is left
    alone, since it may belong to another device. A blob already gone from
    disk is fine too. A device that no longer exists has nothing left to
    remove, so that is a no-op as well; an existing device outside the
    caller's scope is still NotFound.
    """
    if not claims.is_authenticated:
        raise Unauthenticated("User ID required")

    blob_store = get_blob_store()
    blob_store.path_for(stored_name)

    def _op():
        device = lock_for_update(
            db.session.query(Device).filter_by(id=device_id).populate_existing()
        ).first()
        if not device:
            return [], False
        if not _in_scope(claims, device):
            raise NotFound("Device not found")
        current = list(device.attachments or [])
        remaining = [name for name in current if name != stored_name]
        removed = len(remaining) != len(current)
        if removed:
            device.attachments = remaining
            db.session.commit()
        return remaining, removed

    remaining, removed = run_with_retry(
        _op,
        attempts=current_app.config.get("ATTACHMENT_WRITE_ATTEMPTS", 5),
        backoff_base=0.05,
    )
    if removed:
        blob_store.delete(stored_name)
    return remaining
