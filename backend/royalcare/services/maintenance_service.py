# Overview: Housekeeping for the upload folder.

from __future__ import annotations

from ..extensions import db
from ..models import Device
from .blob_store import get_blob_store


def referenced_attachments() -> set[str]:
    names: set[str] = set()
    for (attachments,) in db.session.query(Device.attachments).all():
        names.update(attachments or [])
    return names


def find_orphan_uploads() -> list[str]:
    """Blobs in the upload folder that no device references."""
    referenced = referenced_attachments()
    return [name for name in get_blob_store().list_names() if name not in referenced]


def purge_orphan_uploads(*, dry_run: bool = False) -> list[str]:
    """
    Delete unreferenced blobs, e.g. left behind by a crash between saving
    a file and recording it on the device. Returns the names found.
    """
    orphans = find_orphan_uploads()
    if not dry_run:
        blob_store = get_blob_store()
        for name in orphans:
            blob_store.delete(name)
    return orphans
