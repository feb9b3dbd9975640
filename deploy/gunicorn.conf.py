import os

# Bind only to loopback; Nginx will reverse proxy (and serve the UI)
bind = os.getenv("GUNICORN_BIND", "127.0.0.1:3000")

# Every request is a short round-trip to a single appliance; a few workers are plenty
workers = int(os.getenv("GUNICORN_WORKERS", "2"))

# Uvicorn worker for ASGI/FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# Must exceed PFSENSE_TIMEOUT times the number of sequential appliance calls (block = read, write, apply)
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", "5"))

# Logging to stdout/stderr; systemd/journalctl will capture
loglevel = os.getenv("GUNICORN_LOGLEVEL", "info")
accesslog = None  # RequestLoggingMiddleware already logs each request
errorlog = "-"

# Graceful behavior
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))

# Set forwarded-allow-ips if behind reverse proxy (nginx)
forwarded_allow_ips = "*"
