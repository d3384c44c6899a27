from __future__ import annotations
from typing import Optional


class DocumentError(Exception):
    """Base class for failures surfaced by the document registry client."""


class DocumentNotFoundError(DocumentError):
    def __init__(self, doc_id: str):
        self.doc_id = doc_id
        super().__init__(f"Document not found: {doc_id}")


class UploadError(DocumentError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class DeleteError(DocumentError):
    def __init__(self, name: str, message: str, status_code: Optional[int] = None):
        self.name = name
        self.status_code = status_code
        super().__init__(f"Failed to delete {name}: {message}")
