import logging
import os
from contextlib import asynccontextmanager

LEX_URL = os.getenv("LEX_URL", "http://lexer-svc:8000/lex")
PARSE_URL = os.getenv("PARSE_URL", "http://parser-svc:8000/run")
EVAL_URL = os.getenv("EVAL_URL", "http://eval-svc:8000")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def configure_logging(level: str = LOG_LEVEL) -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

@asynccontextmanager
async def lifespan(app):
    """Service startup hook; importing a module never touches logging."""
    configure_logging()
    yield
