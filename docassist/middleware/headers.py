from starlette.requests import Request
from starlette.middleware.base import BaseHTTPMiddleware
from docassist.core.config import UPLOADS_SECURITY_HEADERS, UPLOADS_URL_PREFIX

class UploadsSecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stored files are served inert: no script execution, no MIME sniffing."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        path = request.url.path
        if path == UPLOADS_URL_PREFIX or path.startswith(UPLOADS_URL_PREFIX + "/"):
            response.headers.update(UPLOADS_SECURITY_HEADERS)
        return response
