from urllib.parse import urlparse, urlunparse, parse_qs, urlencode

from celery import Celery
from ticketpro.core.config import settings


def _redis_url_for_celery(url: str) -> str:
    """Celery requires ssl_cert_reqs for rediss:// brokers."""
    if not url or not url.strip().lower().startswith("rediss://"):
        return url
    parsed = urlparse(url)
    qs = parse_qs(parsed.query)
    if "ssl_cert_reqs" not in qs:
        qs["ssl_cert_reqs"] = ["CERT_NONE"]
        return urlunparse(parsed._replace(query=urlencode(qs, doseq=True)))
    return url


_redis_url = _redis_url_for_celery(settings.REDIS_URL)

celery = Celery(
    "ticketpro",
    broker=_redis_url,
    backend=_redis_url,
    include=["ticketpro.tasks.jobs"],
)

celery.conf.timezone = "Asia/Dhaka"

celery.conf.beat_schedule = {
    "expire-holds-every-minute": {
        "task": "ticketpro.tasks.jobs.expire_holds",
        "schedule": 60.0,
    },
    "reconcile-group-tickets-hourly": {
        "task": "ticketpro.tasks.jobs.reconcile_group_tickets",
        "schedule": 3600.0,
    },
}
