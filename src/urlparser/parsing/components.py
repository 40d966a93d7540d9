"""Split a raw http(s) URL into host, path, anchor and query parameters."""
from typing import Dict

from urlparser.models import Scheme, UrlComponents


SCHEME_PREFIXES = ("http://", "https://")
HOST_DELIMITERS = ("/", "?", "#")


def parse_query(query_string: str) -> Dict[str, str]:
    """
    Parse a query string into a key-value dict.

    Only the first and last ``=``-separated segments of a parameter are kept:
    ``a=b=c`` gives ``{"a": "c"}``. A parameter without ``=`` maps to an
    empty string. Later duplicate keys overwrite earlier ones but keep the
    position of their first occurrence.

    Examples:
        - a=1&b=2 -> {"a": "1", "b": "2"}
        - a=1&a=2 -> {"a": "2"}
        - flag -> {"flag": ""}
    """
    params: Dict[str, str] = {}
    for param in query_string.split("&"):
        parts = param.split("=")
        params[parts[0]] = parts[-1] if len(parts) > 1 else ""
    return params


def parse_components(url: str) -> UrlComponents:
    """
    Parse a full or partial URL into its structural parts.

    No validation is done; malformed input yields empty or absent fields
    instead of an error.
    """
    url = url.lower()

    # Raw prefix check, so "httpsfoo" counts as secure too
    scheme = Scheme.HTTPS if url.startswith("https") else Scheme.HTTP

    remainder = url
    for prefix in SCHEME_PREFIXES:
        remainder = remainder.replace(prefix, "")

    # The host ends at the first "/", but never swallows a query or anchor
    # that follows it directly ("nu.nl?a=1", "nu.nl#top")
    cut = min(
        (index for index in map(remainder.find, HOST_DELIMITERS) if index != -1),
        default=len(remainder),
    )
    host = remainder[:cut]
    if remainder[cut:cut + 1] == "/":
        request_path = remainder[cut + 1:]
    else:
        request_path = remainder[cut:]

    anchor = None
    if "#" in request_path:
        request_path, _, anchor = request_path.partition("#")

    path, has_query, query_string = request_path.partition("?")
    query_params = parse_query(query_string) if has_query else {}

    return UrlComponents(
        scheme=scheme,
        is_secure=scheme is Scheme.HTTPS,
        host=host,
        path=path,
        anchor=anchor,
        query_params=query_params,
        remainder=remainder,
    )
