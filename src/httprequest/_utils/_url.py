from typing import Mapping, Optional

import httpx

_SCHEMES = ("http", "https")


def build_url(path: str, params: Mapping[str, str]) -> Optional[str]:
    """Append the query parameters to ``path`` and validate the result.

    Parameters already present in the path are kept; ``params`` are merged on
    top of them. Returns None unless the result is an absolute http(s) URL
    with a host.
    """
    try:
        url = httpx.URL(path)
    except httpx.InvalidURL:
        return None

    if url.scheme not in _SCHEMES or not url.host:
        return None

    if params:
        url = url.copy_merge_params(dict(params))
    return str(url)
