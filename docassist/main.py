from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from docassist.core import config
from docassist.api.routes_upload import router as upload_router
from docassist.api.routes_files import router as files_router
from docassist.api.routes_chat import router as chat_router
from docassist.middleware.limits import BodySizeLimitMiddleware
from docassist.middleware.headers import UploadsSecurityHeadersMiddleware
from docassist.services.qa import QAClient
from docassist.utils.storage import UploadStore
from docassist.utils.static import UploadsStaticFiles


def create_app(upload_dir: Optional[str] = None, qa: Optional[QAClient] = None) -> FastAPI:
    store = UploadStore(upload_dir or config.UPLOAD_DIR)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.ensure_root()
        app.state.qa = qa or QAClient()
        try:
            yield
        finally:
            await app.state.qa.aclose()

    app = FastAPI(title="docassist", lifespan=lifespan)
    app.state.store = store

    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(UploadsSecurityHeadersMiddleware)
    app.add_middleware(CORSMiddleware, allow_origins=config.CORS_ORIGINS, allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        fields = sorted({".".join(str(p) for p in e["loc"][1:]) or str(e["loc"][0]) for e in exc.errors()})
        return JSONResponse(status_code=400, content={"error": f"Invalid value for {', '.join(fields)}"})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(upload_router)
    app.include_router(files_router)
    app.include_router(chat_router)
    app.mount(config.UPLOADS_URL_PREFIX, UploadsStaticFiles(directory=store.root, check_dir=False), name="uploads")
    return app


app = create_app()
