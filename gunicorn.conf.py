"""
Gunicorn configuration for the ShiftLink API

Run with: gunicorn shiftlink.main:app -c gunicorn.conf.py
"""
import os

# Server socket
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Every worker runs the app lifespan, so keep ANALYTICS_SCHEDULER_ENABLED off
# here when WORKERS > 1 and trigger POST /api/v1/cron/analytics instead.
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "uvicorn.workers.UvicornWorker"

# Worker lifecycle
max_requests = 1000
max_requests_jitter = 100

# Timeouts
timeout = 30
keepalive = 5
graceful_timeout = 30

proc_name = "shiftlink_api"
daemon = False

# Logging
accesslog = "-"  # Log to stdout
errorlog = "-"   # Log to stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)s'


def on_starting(server):
    server.log.info("Starting ShiftLink API (%s workers)", workers)


def worker_abort(worker):
    """Called when a worker is aborted (usually a request timeout)."""
    worker.log.warning("Worker %s aborted", worker.pid)
