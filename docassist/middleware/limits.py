from starlette.requests import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from docassist.core.config import MAX_BODY_BYTES

class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject oversized bodies from the declared Content-Length before parsing."""

    async def dispatch(self, request: Request, call_next):
        cl = request.headers.get("content-length")
        try:
            if cl is not None and int(cl) > MAX_BODY_BYTES:
                return JSONResponse(status_code=400, content={"error": "File size too large"})
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "Bad Content-Length"})
        return await call_next(request)
