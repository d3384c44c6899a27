# tests/conftest.py
from __future__ import annotations
import os
from typing import Callable, Generator, List

import fitz  # PyMuPDF
import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from docassist.main import create_app
from docassist.services.qa import QAClient

# --------------------------------------------------------------------
# Temporary storage root so tests never touch ~/Downloads
# --------------------------------------------------------------------
@pytest.fixture
def upload_dir(tmp_path) -> str:
    # not created here: app start-up must create it
    return str(tmp_path / "uploads")

@pytest.fixture
def qa_handler() -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ai_response": "stub answer"})
    return handler

@pytest.fixture
def qa_client(qa_handler) -> QAClient:
    return QAClient(client=httpx.AsyncClient(transport=httpx.MockTransport(qa_handler)))

@pytest.fixture
def app(upload_dir, qa_client) -> FastAPI:
    return create_app(upload_dir=upload_dir, qa=qa_client)

# --------------------------------------------------------------------
# FastAPI test client, entered so the lifespan runs
# --------------------------------------------------------------------
@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# --------------------------------------------------------------------
# Helpers for real PDF payloads
# --------------------------------------------------------------------
def _pdf_bytes(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 100), text, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data

@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return _pdf_bytes("User Authentication Guide")

@pytest.fixture
def make_pdf() -> Callable[[int], bytes]:
    """PDF padded with trailing bytes up to an exact size."""
    def _make(size: int) -> bytes:
        data = _pdf_bytes("padded")
        assert len(data) <= size
        return data + b"\0" * (size - len(data))
    return _make

@pytest.fixture
def stored_files() -> Callable[[str], List[str]]:
    def _list(upload_dir: str) -> List[str]:
        # skip in-flight temp files
        return sorted(n for n in os.listdir(upload_dir) if not n.startswith("."))
    return _list
