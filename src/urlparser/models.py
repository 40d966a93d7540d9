"""Value objects produced by URL parsing."""
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Scheme(str, Enum):
    """Scheme enumeration."""
    HTTP = "http"
    HTTPS = "https"


class UrlComponents(BaseModel):
    """Structural parts of a URL, before any suffix resolution."""
    model_config = ConfigDict(frozen=True)

    scheme: Scheme = Scheme.HTTP
    is_secure: bool = False
    host: str = ""
    path: str = ""
    anchor: Optional[str] = None
    query_params: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    # Lowercased input with http:// and https:// removed
    remainder: str = ""

    @field_validator('query_params')
    @classmethod
    def freeze_query_params(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        # Read-only view over a private copy
        return MappingProxyType(dict(v))


class DomainParts(BaseModel):
    """Public suffix and registrable domain of a host."""
    model_config = ConfigDict(frozen=True)

    tld: Optional[str] = None
    domain: Optional[str] = None


class ParsedUrl(UrlComponents):
    """
    Fully parsed URL.

    Built once by ``urlparser.parsing.url.parse_url`` and never mutated;
    re-parsing means building a new instance.
    """
    tld: Optional[str] = None
    domain: Optional[str] = None

    @property
    def canonical(self) -> str:
        """Scheme followed by the scheme-stripped, lowercased input."""
        return f"{self.scheme.value}://{self.remainder}"

    def __str__(self) -> str:
        return self.canonical
