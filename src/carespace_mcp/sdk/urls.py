"""Request URL construction."""

from typing import Mapping, Optional
from urllib.parse import quote


def build_url(
    base_url: str,
    endpoint: str,
    query_params: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Join base URL, endpoint, and query string.

    The base URL and endpoint are concatenated verbatim. Query pairs keep
    their insertion order; pairs with an empty value are dropped. Keys and
    values are percent-encoded independently.

    Example:
        build_url("https://api", "/users", {"page": "1", "search": ""})
        -> "https://api/users?page=1"
    """
    url = f"{base_url}{endpoint}"

    pairs = [
        f"{quote(str(key), safe='')}={quote(str(value), safe='')}"
        for key, value in (query_params or {}).items()
        if value is not None and str(value) != ""
    ]
    if pairs:
        url += "?" + "&".join(pairs)

    return url
