"""API schemas for request/response models."""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict
from urlparser.models import ParsedUrl, Scheme


class ParseRequest(BaseModel):
    """Request model for URL parsing."""
    url: str = Field(..., min_length=1, max_length=8192, description="Full or partial http(s) URL")


class ParseResponse(BaseModel):
    """Response model for URL parsing."""
    scheme: Scheme
    is_secure: bool
    host: str
    path: str
    anchor: Optional[str]
    query_params: Dict[str, str]
    tld: Optional[str]
    domain: Optional[str]
    canonical: str

    @classmethod
    def from_parsed(cls, parsed: ParsedUrl) -> "ParseResponse":
        return cls(
            scheme=parsed.scheme,
            is_secure=parsed.is_secure,
            host=parsed.host,
            path=parsed.path,
            anchor=parsed.anchor,
            query_params=dict(parsed.query_params),
            tld=parsed.tld,
            domain=parsed.domain,
            canonical=parsed.canonical
        )


class ResolveRequest(BaseModel):
    """Request model for host resolution."""
    host: str = Field(..., min_length=1, max_length=253, description="Hostname to resolve")

    @field_validator('host')
    @classmethod
    def normalize_host(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("host must not be blank")
        return v


class ResolveResponse(BaseModel):
    """Response model for host resolution."""
    host: str
    tld: Optional[str]
    domain: Optional[str]


class SuffixListStatus(BaseModel):
    """Status of the loaded suffix list."""
    loaded: bool
    entries: int
    loaded_at: Optional[str] = None
    source: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    suffix_list: SuffixListStatus


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str
    detail: Optional[str] = None
