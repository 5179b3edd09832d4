from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso_date


class Device(db.Model):
    """
    A piece of maintained equipment.

    department is the only key used to scope non-admin visibility.

    attachments is the ordered list of stored blob names (upload order,
    duplicates allowed). It is only appended to or filtered, never
    reordered, and every write goes through version_id so two concurrent
    uploads cannot overwrite each other's list.
    """
    __tablename__ = "devices"
    __table_args__ = (
        db.Index("ix_devices_department", "department"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    model = db.Column(db.String(255), nullable=False)
    serial_number = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    branch = db.Column(db.String(255), nullable=False)
    department = db.Column(db.String(120), nullable=True)
    status = db.Column(db.String(64), nullable=False)

    last_service_date = db.Column(db.Date, nullable=True)
    next_service_date = db.Column(db.Date, nullable=True)

    attachments = db.Column(db.JSON, nullable=False, default=list)

    version_id = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Device id={self.id} name={self.name!r} department={self.department!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "serial_number": self.serial_number,
            "location": self.location,
            "branch": self.branch,
            "department": self.department,
            "status": self.status,
            "last_service_date": to_iso_date(self.last_service_date),
            "next_service_date": to_iso_date(self.next_service_date),
            "attachments": list(self.attachments or []),
        }
