"""
HTTP session with connection pooling and certifi CA bundle.

Beacons are try-once: the adapter carries a zero-retry policy so a failed
call surfaces immediately and the next timer tick is the only "retry".
"""

import os

import certifi
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import AGENT_VERSION
from .config import log

_retry_strategy = Retry(total=0, raise_on_status=False)

USER_AGENT = f"MassBeacon/{AGENT_VERSION}"


def _get_ca_bundle():
    """Get the CA bundle path. Env override first, then certifi."""
    env_ca = os.environ.get("REQUESTS_CA_BUNDLE") or os.environ.get("SSL_CERT_FILE")
    if env_ca and os.path.isfile(env_ca):
        return env_ca
    return certifi.where()


def create_session():
    """Create a new requests.Session with connection pooling and no retries."""
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=2,
        pool_maxsize=4,
        max_retries=_retry_strategy,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = _get_ca_bundle()
    session.headers["User-Agent"] = USER_AGENT
    return session


def reset_session(session):
    """Drop the pooled connections of a crashed run and return a fresh session."""
    try:
        session.close()
    except Exception as e:
        log.debug("Closing old HTTP session failed: %s", e)
    log.info("HTTP session reset for %s", USER_AGENT)
    return create_session()


# Global shared session
http = create_session()
