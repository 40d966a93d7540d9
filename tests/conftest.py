"""Shared fixtures."""
from pathlib import Path

import pytest

from urlparser.utils.domain import SuffixIndex

SAMPLE_SUFFIX_LIST = Path(__file__).parent / "data" / "public_suffix_list_sample.dat"


@pytest.fixture
def suffix_text():
    """Public suffix list excerpt, in the upstream file format."""
    return SAMPLE_SUFFIX_LIST.read_text(encoding="utf-8")


@pytest.fixture
def suffix_lines(suffix_text):
    return suffix_text.splitlines()


@pytest.fixture
def suffix_index(suffix_text):
    return SuffixIndex.from_text(suffix_text)
