import os

bind = os.getenv("GUNICORN_BIND", "unix:/var/www/healthscale/backend/gunicorn.sock")
workers = int(os.getenv("GUNICORN_WORKERS", 3))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
timeout = int(os.getenv("GUNICORN_TIMEOUT", 60))
keepalive = 5

# Logging
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "/var/log/healthscale-backend/access.log")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "/var/log/healthscale-backend/error.log")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "healthscale-backend"

# Server mechanics
daemon = False
pidfile = os.getenv("GUNICORN_PIDFILE", "/var/run/healthscale-backend/gunicorn.pid")
user = os.getenv("GUNICORN_USER", "deploy")
group = os.getenv("GUNICORN_GROUP", "deploy")
umask = 0o007

wsgi_app = "core.wsgi:application"


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Health Scale backend ready. Spawning workers")


def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal."""
    worker.log.info("Worker received SIGABRT signal (request timeout)")
