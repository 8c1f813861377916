from urllib.parse import urlencode

GET_GUEST_INFO_URL = "/api/v1/rsvp/{token}"
UPDATE_RSVP_URL = "/api/v1/rsvp/{token}"
QUICK_RSVP_URL = "/api/v1/rsvp/{token}/quick"


def rsvp_page_url(app_url: str, token: str, **params: str) -> str:
    """Guest-facing RSVP edit page, optionally carrying ``error``/``success`` flags."""
    url = f"{app_url.rstrip('/')}/rsvp/{token}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return url


def quick_rsvp_url(app_url: str, token: str, status: str) -> str:
    path = QUICK_RSVP_URL.format(token=token)
    return f"{app_url.rstrip('/')}{path}?{urlencode({'status': status})}"


def landing_page_url(app_url: str, **params: str) -> str:
    base = app_url.rstrip("/")
    if params:
        return f"{base}/?{urlencode(params)}"
    return base or "/"
