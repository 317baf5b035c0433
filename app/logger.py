import logging
import sys
from typing import Optional
from app.config import config

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# server loggers follow LOG_LEVEL
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "gunicorn.error", "gunicorn.access", "asyncio")

# client libraries log whole request payloads (inline base64 images) at DEBUG
_NOISY_FLOORS = {"openai": logging.INFO, "httpx": logging.WARNING}

_configured = False

def _level(name: Optional[str]) -> int:
    return getattr(logging, (name or config.log_level).upper(), logging.INFO)

def configure_logging(level: Optional[str] = None, fmt: str = _DEFAULT_FMT) -> None:
    """Set up the root logger once; later calls are no-ops."""
    global _configured
    if _configured:
        return

    value = _level(level)
    root = logging.getLogger()
    root.setLevel(value)

    if root.handlers:
        # someone (uvicorn, pytest) got there first: adopt their handlers
        for h in root.handlers:
            h.setLevel(value)
            if not h.formatter:
                h.setFormatter(logging.Formatter(fmt))
    else:
        h = logging.StreamHandler(sys.stdout)
        h.setLevel(value)
        h.setFormatter(logging.Formatter(fmt))
        root.addHandler(h)

    for name in _SERVER_LOGGERS:
        logging.getLogger(name).setLevel(value)
    for name, floor in _NOISY_FLOORS.items():
        logging.getLogger(name).setLevel(max(value, floor))

    _configured = True

def get_logger(name: Optional[str] = None) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name or "app")
