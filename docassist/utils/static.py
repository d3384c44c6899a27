from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException


def is_hidden(path: str) -> bool:
    """In-flight uploads are dot-files in the storage root."""
    return any(part.startswith(".") for part in path.replace("\\", "/").split("/") if part)


class UploadsStaticFiles(StaticFiles):
    """Read-only view of the storage root that never exposes dot-files."""

    async def get_response(self, path: str, scope):
        if is_hidden(path):
            raise HTTPException(status_code=404)
        return await super().get_response(path, scope)
