import multiprocessing
import os

bind = os.getenv('GUNICORN_BIND', 'unix:/var/www/fisheries/fisheries-backend/gunicorn.sock')
workers = int(os.getenv('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
# Excel exports and invoice PDFs are rendered in-request
timeout = 120
keepalive = 5

wsgi_app = "core.wsgi:application"

# Logging
accesslog = os.getenv('GUNICORN_ACCESS_LOG', "/var/log/fisheries-backend/access.log")
errorlog = os.getenv('GUNICORN_ERROR_LOG', "/var/log/fisheries-backend/error.log")
loglevel = os.getenv('GUNICORN_LOG_LEVEL', "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "fisheries-backend"

# Server mechanics
daemon = False
pidfile = "/var/run/fisheries-backend/gunicorn.pid"
umask = 0o007


# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting fisheries back-office")


def when_ready(server):
    server.log.info(f"Gunicorn ready on {bind}, spawning {workers} workers")


def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal (usually a timeout)."""
    worker.log.warning(f"Worker {worker.pid} aborted")
