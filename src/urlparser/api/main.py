"""FastAPI application and endpoints."""
import logging
from fastapi import FastAPI, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from urlparser.config import settings
from urlparser.api.schemas import (
    ParseRequest,
    ParseResponse,
    ResolveRequest,
    ResolveResponse,
    HealthResponse,
    SuffixListStatus,
    ErrorResponse
)
from urlparser.parsing.url import parse_url
from urlparser.suffixes.service import SuffixListService, SuffixListError
from urlparser.utils.domain import SuffixIndex, resolve

from urlparser.utils.logging import setup_logging

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)

suffix_service = SuffixListService()

app = FastAPI(
    title="URL Parser Service",
    description="Splits http(s) URLs into their parts and resolves public suffixes",
    version="1.0.0"
)


def get_suffix_service() -> SuffixListService:
    """Suffix list service for FastAPI dependency injection."""
    return suffix_service


def get_suffix_index(service: SuffixListService = Depends(get_suffix_service)) -> SuffixIndex:
    """Current suffix index for FastAPI dependency injection."""
    try:
        return service.get_index()
    except SuffixListError as e:
        logger.error(f"Suffix list unavailable: {e}")
        raise HTTPException(status_code=503, detail=f"Suffix list unavailable: {e}")


@app.on_event("startup")
async def startup_event():
    """Warm the suffix index on startup."""
    logger.info("Starting URL parser API service")
    settings.ensure_directories()
    try:
        # Download blocks, keep it off the event loop
        index = await run_in_threadpool(suffix_service.get_index)
        logger.info(f"Suffix index ready with {len(index)} entries")
    except SuffixListError as e:
        logger.warning(f"Starting without a suffix list: {e}")


@app.get("/healthz", response_model=HealthResponse)
async def health_check(service: SuffixListService = Depends(get_suffix_service)):
    """Health check endpoint reporting suffix list state."""
    status = SuffixListStatus(**service.status())
    return HealthResponse(
        status="healthy" if status.loaded and status.entries else "degraded",
        suffix_list=status
    )


@app.post("/v1/parse", response_model=ParseResponse)
async def parse(request: ParseRequest, index: SuffixIndex = Depends(get_suffix_index)):
    """
    Parse a URL into its components.

    Returns:
        Scheme, host, path, anchor, query parameters, TLD and domain
    """
    parsed = parse_url(request.url, index)
    if parsed.tld is None:
        logger.info(f"No public suffix for host: {parsed.host}")
    return ParseResponse.from_parsed(parsed)


@app.post("/v1/resolve", response_model=ResolveResponse)
async def resolve_host(request: ResolveRequest, index: SuffixIndex = Depends(get_suffix_index)):
    """
    Resolve the public suffix and registrable domain of a host.
    """
    parts = resolve(request.host, index)
    return ResolveResponse(host=request.host, tld=parts.tld, domain=parts.domain)


@app.post(
    "/v1/suffix-list/refresh",
    response_model=SuffixListStatus,
    responses={503: {"model": ErrorResponse}}
)
def refresh_suffix_list(service: SuffixListService = Depends(get_suffix_service)):
    """
    Reload the suffix list from its source.

    The previous index stays in use when the reload fails.
    """
    try:
        service.refresh()
    except SuffixListError as e:
        logger.warning(f"Suffix list refresh failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    return SuffixListStatus(**service.status())


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "urlparser.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False
    )
