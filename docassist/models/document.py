from __future__ import annotations
import os
import re
import secrets
import time
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# only plain alphanumeric suffixes survive into the stored name
_SAFE_EXT = re.compile(r"^\.[A-Za-z0-9]{1,16}$")


class StoredName(str):
    """
    Server-generated file name, e.g. ``1718000000000-482913377.pdf``.

    Built from the current time plus a random suffix; only the extension is
    taken from the user's file name. ``id`` is the name without extension.
    """

    @classmethod
    def generate(cls, original_name: str) -> "StoredName":
        _, ext = os.path.splitext(os.path.basename(original_name or ""))
        if not _SAFE_EXT.match(ext):
            ext = ""
        millis = int(time.time() * 1000)
        return cls(f"{millis}-{secrets.randbelow(10**9)}{ext}")

    @property
    def id(self) -> str:
        return os.path.splitext(self)[0]


class FileDescriptor(BaseModel):
    """One stored upload, as returned by ``POST /upload``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    original_name: str
    stored_name: str
    path: str
    size: int
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class DocumentRecord(BaseModel):
    """Client-side mirror of a stored document. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    stored_name: str
    size: int
    uploaded_at: datetime

    @classmethod
    def from_descriptor(cls, d: FileDescriptor) -> "DocumentRecord":
        return cls(
            id=d.id,
            name=d.original_name,
            stored_name=d.stored_name,
            size=d.size,
            uploaded_at=d.uploaded_at,
        )
