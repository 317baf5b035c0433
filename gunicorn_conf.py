import os

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"
worker_class = "uvicorn.workers.UvicornWorker"

# one worker: the studio session and library live in process memory
workers = 1
timeout = 1800            # trailer renders and full-book illustration passes are slow
graceful_timeout = 120
keepalive = 75

max_requests = int(os.getenv("MAX_REQUESTS", "0"))
max_requests_jitter = int(os.getenv("MAX_REQUESTS_JITTER", "0"))

# stdout/stderr logs
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
