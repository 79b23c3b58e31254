import re
from urllib.parse import urlparse

_SCHEME_PREFIX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def get_domain_from_url(url: str) -> str:
    """
    Extract the hostname from a URL.

    Falls back to stripping any ``scheme://`` prefix and taking everything up
    to the first slash when the URL has no parseable host.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if hostname:
        return hostname
    return _SCHEME_PREFIX.sub("", url).split("/")[0]
