import os

MAX_FILE_BYTES = 10 * 1024 * 1024  # 10 MB per file
MAX_FILES = 5
# headroom for multipart boundaries and part headers
MAX_BODY_BYTES = MAX_FILES * MAX_FILE_BYTES + 1024 * 1024
ALLOWED_MIME = {"application/pdf"}
UPLOAD_DIR = os.path.join(os.path.expanduser("~"), "Downloads", "uploads_hackerramp")
UPLOADS_URL_PREFIX = "/uploads"
CHUNK_SIZE = 1 << 20  # 1 MB

UPLOADS_SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'",
    "X-Content-Type-Options": "nosniff",
}

HOST = os.getenv("DOCASSIST_HOST", "127.0.0.1")
PORT = int(os.getenv("DOCASSIST_PORT", "3001"))
CORS_ORIGINS = os.getenv("DOCASSIST_CORS_ORIGINS", "*").split(",")

# Question-answering endpoint used by the chat assistant
QA_ENDPOINT_URL = os.getenv("QA_ENDPOINT_URL", "http://localhost:7158/query")
QA_TOP_K = int(os.getenv("QA_TOP_K", "2"))
QA_TIMEOUT_SECONDS = float(os.getenv("QA_TIMEOUT_SECONDS", "30"))
QA_FALLBACK_ANSWER = (
    "I apologize, but I'm having trouble generating a response right now. "
    "Please try again later."
)
