# Overview: Local filesystem blob store for device attachments.

"""
Blob Store

Attachment bytes live as flat files under one directory. Each save gets a
fresh stored name "<epoch ms>-<random hex>-<sanitised original name>", so two
uploads of the same file never overwrite each other. delete() on a name that
is already gone is not an error.
"""

from __future__ import annotations

import os
import secrets
import time

from flask import current_app
from werkzeug.utils import secure_filename

from ..errors import StoreFailure, ValidationError


class LocalBlobStore:
    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    def ensure_root(self) -> None:
        try:
            os.makedirs(self.root, exist_ok=True)
        except OSError as exc:
            raise StoreFailure(f"Cannot create upload folder {self.root}") from exc

    def _new_name(self, original_name: str) -> str:
        safe = secure_filename(original_name or "") or "file"
        return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}-{safe}"

    def path_for(self, stored_name: str) -> str:
        """Absolute path of stored_name; rejects names that leave the root."""
        if not stored_name or os.path.basename(stored_name) != stored_name or stored_name in (".", ".."):
            raise ValidationError("Invalid file name")
        return os.path.join(self.root, stored_name)

    def save(self, data: bytes, original_name: str) -> str:
        self.ensure_root()
        for _ in range(5):
            stored_name = self._new_name(original_name)
            try:
                with open(self.path_for(stored_name), "xb") as fh:
                    fh.write(data)
                return stored_name
            except FileExistsError:
                continue
            except OSError as exc:
                raise StoreFailure(f"Cannot write blob {stored_name}") from exc
        raise StoreFailure(f"Could not allocate a unique name for {original_name!r}")

    def delete(self, stored_name: str) -> bool:
        """Remove a blob. Returns False if it was already missing."""
        try:
            os.remove(self.path_for(stored_name))
            return True
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StoreFailure(f"Cannot delete blob {stored_name}") from exc

    def exists(self, stored_name: str) -> bool:
        return os.path.isfile(self.path_for(stored_name))

    def list_names(self) -> list[str]:
        if not os.path.isdir(self.root):
            return []
        return sorted(
            name for name in os.listdir(self.root)
            if os.path.isfile(os.path.join(self.root, name))
        )


def get_blob_store() -> LocalBlobStore:
    """Blob store for the current app, rooted at UPLOAD_FOLDER."""
    store = current_app.extensions.get("blob_store")
    if store is None:
        store = LocalBlobStore(current_app.config["UPLOAD_FOLDER"])
        current_app.extensions["blob_store"] = store
    return store
