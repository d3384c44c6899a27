import logging
import uvicorn
from docassist.core.config import HOST, PORT, UPLOAD_DIR

log = logging.getLogger("docassist")

def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    log.info("Server running at http://%s:%d", HOST, PORT)
    log.info("Files will be uploaded to: %s", UPLOAD_DIR)
    uvicorn.run("docassist.main:app", host=HOST, port=PORT)

if __name__ == "__main__":
    main()
