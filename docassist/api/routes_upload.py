from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile
from docassist.api.deps import get_store
from docassist.utils.storage import UploadStore

router = APIRouter(tags=["upload"])

@router.post("/upload")
async def upload(request: Request, store: UploadStore = Depends(get_store)):
    form = await request.form()
    try:
        # an empty file input still posts one part with filename="": treat as no file
        files = [f for f in form.getlist("files") if isinstance(f, UploadFile) and f.filename]
        descriptors = await store.save_all(files)
    finally:
        await form.close()
    return [d.model_dump(by_alias=True, mode="json") for d in descriptors]
