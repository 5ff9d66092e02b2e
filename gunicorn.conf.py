# gunicorn.conf.py
import multiprocessing, os

wsgi_app = "orrery.main:get_app()"
bind = f"0.0.0.0:{os.getenv('PORT','5000')}"

# Every worker opens its own kernel and timescale at boot; size with WEB_CONCURRENCY.
workers = int(os.getenv("WEB_CONCURRENCY", max(2, multiprocessing.cpu_count())))
worker_class = "sync"
preload_app = False
timeout = int(os.getenv("ORRERY_WORKER_TIMEOUT", "30"))
graceful_timeout = 10

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s "%(m)s %(U)s?%(q)s" %(s)s %(b)s rt:%(L)s'


def post_worker_init(worker):
    service = getattr(worker.wsgi, "extensions", {}).get("orrery.service")
    if service is not None:
        worker.log.info(
            "worker %s ready; precision_available=%s library=%s",
            worker.pid, service.precision_available, service.library,
        )
