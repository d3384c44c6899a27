from fastapi import APIRouter, Depends, Path
from docassist.api.deps import get_store
from docassist.utils.storage import UploadStore

router = APIRouter(tags=["files"])

@router.delete("/files/{filename:path}")
def delete_file(
    filename: str = Path(..., description="Stored name returned by /upload"),
    store: UploadStore = Depends(get_store),
):
    store.delete(filename)
    return {"message": "File deleted successfully"}
