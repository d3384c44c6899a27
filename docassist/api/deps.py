from fastapi import Request
from docassist.utils.storage import UploadStore
from docassist.services.qa import QAClient

def get_store(request: Request) -> UploadStore:
    return request.app.state.store

def get_qa_client(request: Request) -> QAClient:
    return request.app.state.qa
