"""Shared HTTP client for outbound calls to Google."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from docudrive.config import get_settings

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a shared requests.Session.

    Retries are off unless HTTP_MAX_RETRIES is set, in which case 429/5xx
    responses are retried with exponential backoff (1s, 2s, 4s, ...).
    """
    global _session
    if _session is None:
        _session = requests.Session()
        retry = Retry(
            total=get_settings().http_max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "POST"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        _session.mount("http://", adapter)
        _session.mount("https://", adapter)
    return _session
