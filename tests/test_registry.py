import io
import json
import os
from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio

from docassist.core.errors import DeleteError, DocumentNotFoundError, UploadError
from docassist.models.document import DocumentRecord
from docassist.services.registry import DocumentRegistry

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def live_client(app, upload_dir):
    # ASGITransport skips the lifespan, so create the root here
    os.makedirs(upload_dir, exist_ok=True)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://docassist") as c:
        yield c


def _record(doc_id: str, name: str = "x.pdf") -> DocumentRecord:
    return DocumentRecord(
        id=doc_id,
        name=name,
        stored_name=f"{doc_id}.pdf",
        size=1,
        uploaded_at=datetime.now(timezone.utc),
    )


async def test_upload_then_delete(live_client, upload_dir, sample_pdf_bytes):
    registry = DocumentRegistry(live_client)
    new = await registry.upload_documents([("f.pdf", sample_pdf_bytes)])

    assert len(new) == 1
    rec = new[0]
    assert rec.name == "f.pdf"
    assert rec.size == len(sample_pdf_bytes)
    assert rec.id == os.path.splitext(rec.stored_name)[0]
    assert registry.list_documents() == [rec]
    assert registry.get_document(rec.id) == rec
    assert os.path.isfile(os.path.join(upload_dir, rec.stored_name))

    await registry.delete_document(rec.id)
    assert registry.list_documents() == []
    assert not os.path.exists(os.path.join(upload_dir, rec.stored_name))


async def test_upload_from_paths_appends_in_order(live_client, tmp_path, sample_pdf_bytes):
    paths = []
    for name in ("one.pdf", "two.pdf"):
        p = tmp_path / name
        p.write_bytes(sample_pdf_bytes)
        paths.append(p)
    registry = DocumentRegistry(live_client, records=[_record("seed")])

    await registry.upload_documents(paths)
    assert [r.name for r in registry.list_documents()] == ["x.pdf", "one.pdf", "two.pdf"]


async def test_upload_rejected_leaves_state(live_client):
    registry = DocumentRegistry(live_client)
    with pytest.raises(UploadError) as exc_info:
        await registry.upload_documents([("notes.pdf", io.BytesIO(b"plain text"))])
    assert exc_info.value.status_code == 400
    assert str(exc_info.value) == "Only PDF files are allowed"
    assert registry.list_documents() == []


async def test_upload_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as c:
        registry = DocumentRegistry(c)
        with pytest.raises(UploadError):
            await registry.upload_documents([("a.pdf", b"%PDF-1.4")])
        assert registry.list_documents() == []


async def test_delete_unknown_id_makes_no_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"message": "File deleted successfully"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as c:
        registry = DocumentRegistry(c, records=[_record("keep")])
        with pytest.raises(DocumentNotFoundError):
            await registry.delete_document("missing")
    assert calls == []
    assert [r.id for r in registry.list_documents()] == ["keep"]


@pytest.mark.parametrize("status_code", [403, 404, 500])
async def test_delete_server_error_keeps_record(status_code):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        assert request.url.path == "/files/keep.pdf"
        return httpx.Response(status_code, json={"error": "nope"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as c:
        registry = DocumentRegistry(c, records=[_record("keep", name="Guide.pdf")])
        with pytest.raises(DeleteError) as exc_info:
            await registry.delete_document("keep")
    assert exc_info.value.name == "Guide.pdf"
    assert exc_info.value.status_code == status_code
    assert "Guide.pdf" in str(exc_info.value)
    assert [r.id for r in registry.list_documents()] == ["keep"]


async def test_delete_transport_failure_keeps_record():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as c:
        registry = DocumentRegistry(c, records=[_record("keep")])
        with pytest.raises(DeleteError):
            await registry.delete_document("keep")
    assert len(registry.list_documents()) == 1


async def test_malformed_upload_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=json.dumps([{"id": "only-id"}]).encode())

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://x") as c:
        registry = DocumentRegistry(c)
        with pytest.raises(UploadError):
            await registry.upload_documents([("a.pdf", b"%PDF-1.4")])
    assert registry.list_documents() == []
