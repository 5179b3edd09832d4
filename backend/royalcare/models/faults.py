from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


FAULT_OPEN = "Open"
FAULT_CLOSED = "Closed"
FAULT_STATUSES = (FAULT_OPEN, FAULT_CLOSED)


class FaultReport(db.Model):
    """
    A user-submitted fault against a device.

    device_id is a soft reference: no foreign key, so a report outlives
    the device it points at and listing shows an absent device name.
    user_id is fixed at creation and is the only key used to scope
    non-admin visibility.
    """
    __tablename__ = "fault_reports"
    __table_args__ = (
        db.Index("ix_fault_reports_user_id", "user_id"),
        db.Index("ix_fault_reports_device_id", "device_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    device_id = db.Column(db.Integer, nullable=False)
    description = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(16), nullable=False, default=FAULT_OPEN)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    user_id = db.Column(db.Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<FaultReport id={self.id} device_id={self.device_id} status={self.status!r}>"

    def to_dict(self, device_name: str | None = None, include_device_name: bool = False) -> dict:
        data = {
            "id": self.id,
            "device_id": self.device_id,
            "description": self.description,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
            "user_id": self.user_id,
        }
        if include_device_name:
            data["device_name"] = device_name
        return data
