"""
StatsD client shared across apps.

The client is built lazily from settings so tests and management commands
that never emit metrics do not open a socket.
"""
import logging

from django.conf import settings
from statsd import StatsClient

logger = logging.getLogger(__name__)

_client = None


def statsd():
    """Return the process-wide StatsClient"""
    global _client
    if _client is None:
        _client = StatsClient(
            host=settings.STATSD_HOST,
            port=settings.STATSD_PORT,
            prefix=settings.STATSD_PREFIX,
        )
        logger.debug(f"StatsD client ready for {settings.STATSD_HOST}:{settings.STATSD_PORT}")
    return _client


def increment(metric, count=1):
    statsd().incr(metric, count)


def reset_client():
    """Drop the cached client (settings changed, e.g. in tests)"""
    global _client
    _client = None
