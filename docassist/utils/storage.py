import os
import logging
import tempfile
from typing import List

import magic
from fastapi import HTTPException, UploadFile

from docassist.core.config import ALLOWED_MIME, CHUNK_SIZE, MAX_FILE_BYTES, MAX_FILES
from docassist.models.document import FileDescriptor, StoredName
from docassist.utils.static import is_hidden

log = logging.getLogger("storage")


def _size_of(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    f = file.file
    f.seek(0, os.SEEK_END)
    size = f.tell()
    f.seek(0)
    return size


class UploadStore:
    """
    Flat directory of uploaded files keyed by generated stored names.

    Every path operation goes through the canonical (symlink-resolved) root;
    nothing is ever addressed by the user's original file name.
    """

    def __init__(self, root: str):
        self.root = root

    def ensure_root(self) -> None:
        # let OSError propagate: the app must not start without its root
        if not os.path.isdir(self.root):
            os.makedirs(self.root, exist_ok=True)
            log.info("Created uploads directory at: %s", self.root)

    @property
    def real_root(self) -> str:
        return os.path.realpath(self.root)

    async def validate(self, files: List[UploadFile]) -> None:
        if not files:
            raise HTTPException(status_code=400, detail="No files uploaded")
        if len(files) > MAX_FILES:
            raise HTTPException(
                status_code=400, detail=f"Too many files. Maximum is {MAX_FILES} files."
            )
        for f in files:
            if (f.content_type or "").split(";")[0].strip() not in ALLOWED_MIME:
                raise HTTPException(status_code=400, detail="Only PDF files are allowed")
            if _size_of(f) > MAX_FILE_BYTES:
                raise HTTPException(
                    status_code=400,
                    detail=f"File size too large. Maximum size is {MAX_FILE_BYTES // (1024 * 1024)}MB.",
                )
            head = await f.read(2048)
            await f.seek(0)
            sniffed = magic.from_buffer(head, mime=True)
            if sniffed not in ALLOWED_MIME:
                log.warning("Rejected %r: sniffed MIME type %s", f.filename, sniffed)
                raise HTTPException(status_code=400, detail="Only PDF files are allowed")

    async def save(self, file: UploadFile) -> FileDescriptor:
        stored = StoredName.generate(file.filename or "")
        dest = os.path.join(self.root, stored)
        size = 0
        with tempfile.NamedTemporaryFile(dir=self.root, prefix=".upload-", delete=False) as tmp:
            tmp_path = tmp.name
            try:
                while True:
                    chunk = await file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    tmp.write(chunk)
                    size += len(chunk)
            except BaseException:
                tmp.close()
                os.remove(tmp_path)
                raise
        try:
            os.replace(tmp_path, dest)
        except OSError:
            os.remove(tmp_path)
            raise
        return FileDescriptor(
            id=stored.id,
            original_name=file.filename or "",
            stored_name=str(stored),
            path=dest,
            size=size,
        )

    async def save_all(self, files: List[UploadFile]) -> List[FileDescriptor]:
        """Validate the whole batch, then store each file in submission order."""
        await self.validate(files)
        saved: List[FileDescriptor] = []
        try:
            for f in files:
                saved.append(await self.save(f))
        except OSError:
            log.exception("Error handling file upload (%d of %d stored)", len(saved), len(files))
            raise HTTPException(status_code=500, detail="Failed to upload files")
        log.info("Successfully uploaded %d files to %s", len(saved), self.root)
        return saved

    def resolve(self, filename: str) -> str:
        """Return ``root/filename`` or raise 403 if it resolves outside the root."""
        root = self.real_root
        try:
            candidate = os.path.join(root, filename)
            real = os.path.realpath(candidate)
        except ValueError:  # embedded NUL
            raise HTTPException(status_code=403, detail="Invalid file path")
        if real == root or os.path.commonpath([root, real]) != root:
            log.warning("Rejected delete outside uploads directory: %r", filename)
            raise HTTPException(status_code=403, detail="Invalid file path")
        return candidate

    def delete(self, filename: str) -> None:
        path = self.resolve(filename)
        if is_hidden(os.path.basename(path)) or not os.path.isfile(path):
            raise HTTPException(status_code=404, detail="File not found")
        try:
            os.remove(path)
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail="File not found")
        except OSError:
            log.exception("Error deleting file: %s", filename)
            raise HTTPException(status_code=500, detail="Failed to delete file")
        log.info("Successfully deleted file: %s", filename)
