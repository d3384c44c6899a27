# docassist/services/registry.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Tuple, Union
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from docassist.core.errors import DeleteError, DocumentNotFoundError, UploadError
from docassist.models.document import DocumentRecord, FileDescriptor

log = logging.getLogger("registry")

UploadSource = Union[Path, Tuple[str, Union[bytes, BinaryIO]]]

_DESCRIPTORS = TypeAdapter(List[FileDescriptor])


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return f"HTTP {resp.status_code}"


class DocumentRegistry:
    """
    In-memory, insertion-ordered mirror of the documents on the upload service.

    The list is never re-fetched: it only changes through this object's own
    successful uploads and deletes, so mutations made by other clients are
    invisible here. ``client`` must have ``base_url`` set to the upload service.
    """

    def __init__(self, client: httpx.AsyncClient, records: Optional[Iterable[DocumentRecord]] = None):
        self.client = client
        self._records: List[DocumentRecord] = []
        for r in records or ():
            self._append(r)

    def _append(self, record: DocumentRecord) -> None:
        if any(r.id == record.id for r in self._records):
            raise ValueError(f"Duplicate document id: {record.id}")
        self._records.append(record)

    def list_documents(self) -> List[DocumentRecord]:
        return list(self._records)

    def get_document(self, doc_id: str) -> Optional[DocumentRecord]:
        return next((r for r in self._records if r.id == doc_id), None)

    async def upload_documents(self, files: Iterable[UploadSource]) -> List[DocumentRecord]:
        parts = []
        opened = []
        try:
            for src in files:
                if isinstance(src, Path):
                    fh = src.open("rb")
                    opened.append(fh)
                    parts.append(("files", (src.name, fh, "application/pdf")))
                else:
                    name, content = src
                    parts.append(("files", (name, content, "application/pdf")))
            try:
                resp = await self.client.post("/upload", files=parts)
            except httpx.HTTPError as e:
                log.error("Error uploading documents: %s", e)
                raise UploadError(f"Upload request failed: {e}") from e
        finally:
            for fh in opened:
                fh.close()

        if not resp.is_success:
            message = _error_message(resp)
            log.error("Error uploading documents: HTTP %d %s", resp.status_code, message)
            raise UploadError(message, status_code=resp.status_code)
        try:
            descriptors = _DESCRIPTORS.validate_json(resp.content)
        except ValidationError as e:
            log.error("Error uploading documents: malformed response: %s", e)
            raise UploadError("Malformed upload response", status_code=resp.status_code) from e

        new_records = [DocumentRecord.from_descriptor(d) for d in descriptors]
        for r in new_records:
            self._append(r)
        log.info("Registered %d uploaded documents", len(new_records))
        return new_records

    async def delete_document(self, doc_id: str) -> None:
        record = self.get_document(doc_id)
        if record is None:
            log.error("Error deleting document: %s not found", doc_id)
            raise DocumentNotFoundError(doc_id)

        try:
            resp = await self.client.delete(f"/files/{quote(record.stored_name, safe='')}")
        except httpx.HTTPError as e:
            log.error("Error deleting document %s: %s", record.name, e)
            raise DeleteError(record.name, str(e)) from e
        if not resp.is_success:
            message = _error_message(resp)
            log.error("Error deleting document %s: HTTP %d %s", record.name, resp.status_code, message)
            raise DeleteError(record.name, message, status_code=resp.status_code)

        # removed only after the server confirmed
        self._records = [r for r in self._records if r.id != doc_id]
        log.info("Deleted document %s (%s)", record.name, record.stored_name)
