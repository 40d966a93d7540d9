"""Public suffix (TLD) and registrable domain resolution."""
from typing import Dict, Iterable, List, Optional, Union
import logging

from urlparser.models import DomainParts

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "//"


def filter_suffixes(lines: Iterable[str]) -> List[str]:
    """
    Drop blank lines and ``//`` comments from raw suffix list lines.

    Entries are cut at the first whitespace, as in the public suffix list
    file format, and lowercased. Order and duplicates are kept.
    """
    suffixes = []
    for line in lines:
        entry = line.strip()
        if not entry or entry.startswith(COMMENT_PREFIX):
            continue
        suffixes.append(entry.split()[0].lower())
    return suffixes


def is_suffix_match(host: str, suffix: str) -> bool:
    """Check if ``suffix`` covers the trailing labels of ``host``."""
    if not suffix:
        return False
    return host == suffix or host.endswith("." + suffix)


def _specificity(suffix: str) -> tuple:
    return (suffix.count(".") + 1, len(suffix))


def select_suffix(host: str, suffixes: Iterable[str]) -> Optional[str]:
    """
    Pick the most specific suffix matching ``host``.

    More labels wins, then more characters, so ``co.uk`` beats ``uk``
    wherever each of them appears in ``suffixes``.
    """
    best = None
    for suffix in suffixes:
        if is_suffix_match(host, suffix):
            if best is None or _specificity(suffix) > _specificity(best):
                best = suffix
    return best


def derive_domain(host: str, tld: Optional[str]) -> Optional[str]:
    """
    Join the label directly in front of ``tld`` with ``tld``.

    Examples:
        - www.quoteshirts.nl, nl -> quoteshirts.nl
        - henk.gs.hm.no, gs.hm.no -> henk.gs.hm.no
        - nl, nl -> .nl
    """
    if tld is None:
        return None
    leading = "" if host == tld else host[:-(len(tld) + 1)]
    return f"{leading.rsplit('.', 1)[-1]}.{tld}"


class SuffixIndex:
    """
    Labels-reversed trie over a suffix list.

    Built once and shared read-only between lookups; ``longest_match``
    gives the same answer as ``select_suffix`` over the same entries.
    """

    # Labels never contain a dot, so it cannot collide with one
    _END = "."

    def __init__(self, lines: Iterable[str] = ()):
        self._root: Dict[str, dict] = {}
        self._size = 0
        for suffix in filter_suffixes(lines):
            self._add(suffix)

    @classmethod
    def from_text(cls, text: str) -> "SuffixIndex":
        """Build an index from a newline separated suffix list blob."""
        return cls(text.splitlines())

    def _add(self, suffix: str) -> None:
        node = self._root
        for label in reversed(suffix.split(".")):
            node = node.setdefault(label, {})
        if self._END not in node:
            node[self._END] = suffix
            self._size += 1

    def __len__(self) -> int:
        return self._size

    def __contains__(self, suffix: str) -> bool:
        node = self._root
        for label in reversed(suffix.split(".")):
            node = node.get(label)
            if node is None:
                return False
        return self._END in node

    def longest_match(self, host: str) -> Optional[str]:
        """Return the deepest listed suffix ending ``host``, if any."""
        match = None
        node = self._root
        for label in reversed(host.split(".")):
            node = node.get(label)
            if node is None:
                break
            match = node.get(self._END, match)
        return match


SuffixSource = Union[str, Iterable[str], SuffixIndex]


def resolve(host: str, suffix_source: SuffixSource) -> DomainParts:
    """
    Resolve the public suffix and registrable domain of ``host``.

    Args:
        host: Lowercase hostname
        suffix_source: Raw suffix list text, raw suffix list lines, or a
            prebuilt SuffixIndex

    Returns:
        DomainParts; both fields are None when no suffix matches
    """
    if isinstance(suffix_source, SuffixIndex):
        tld = suffix_source.longest_match(host)
    else:
        if isinstance(suffix_source, str):
            suffix_source = suffix_source.splitlines()
        tld = select_suffix(host, filter_suffixes(suffix_source))

    if tld is None:
        logger.debug(f"No public suffix matched host: {host}")

    return DomainParts(tld=tld, domain=derive_domain(host, tld))
