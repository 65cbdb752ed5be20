import os

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8080")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = 1
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust proxy headers
forwarded_allow_ips = "*"
proxy_protocol = False

wsgi_app = "wsgi:app"


def worker_exit(server, worker):
    # Release the worker's Redis and HTTP handles
    from wsgi import app

    from favapi.core.container import shutdown

    shutdown(app)
