# server.py (repo root)
import os

import uvicorn

from app.config import config
from app.main import app

if __name__ == "__main__":
    # single process: the studio session and its library live in memory
    uvicorn.run(
        app,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8080")),
        log_level=config.log_level.lower(),
    )
