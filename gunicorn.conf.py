"""
Gunicorn configuration: Uvicorn workers serving analytics_buddy.main:app.
"""

import multiprocessing
import os

bind = os.getenv("BIND", "0.0.0.0:8000")

workers = int(os.getenv("WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
# Paged aggregations run sequentially, so requests can take a while
timeout = int(os.getenv("WORKER_TIMEOUT", 120))
graceful_timeout = 30
keepalive = 5

proc_name = "customer-analytics-buddy"

errorlog = "-"
accesslog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
