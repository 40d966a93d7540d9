"""Assemble a ParsedUrl from its structural parts and suffix resolution."""
from urlparser.models import ParsedUrl, UrlComponents
from urlparser.parsing.components import parse_components
from urlparser.utils.domain import SuffixSource, resolve


def parse_url(url: str, suffix_source: SuffixSource) -> ParsedUrl:
    """
    Parse a full or partial http(s) URL.

    The suffix list is passed in by the caller and never fetched here;
    build a SuffixIndex once to reuse it across many calls.

    Examples:
        - https://henk.co.uk/film/ -> host henk.co.uk, tld co.uk,
          domain henk.co.uk
        - nu.nl/a?x=1#top -> scheme http, path a, query {"x": "1"},
          anchor top
    """
    components = parse_components(url)
    parts = resolve(components.host, suffix_source)
    return ParsedUrl(
        **{name: getattr(components, name) for name in UrlComponents.model_fields},
        tld=parts.tld,
        domain=parts.domain,
    )
