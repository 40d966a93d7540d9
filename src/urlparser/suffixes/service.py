"""Retrieval and caching of the public suffix list."""
import threading
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any, Tuple
import httpx

from urlparser.config import settings
from urlparser.utils.domain import SuffixIndex

logger = logging.getLogger(__name__)


class SuffixListError(Exception):
    """Suffix list could not be retrieved."""
    pass


class SuffixListService:
    """
    Fetch the public suffix list and keep one SuffixIndex built from it.

    The index is rebuilt once it is older than the configured TTL. Lookups
    share the current index read-only; only refreshes take the lock.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        list_file: Optional[str] = None,
        cache_path: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.Client] = None
    ):
        self.url = url or settings.suffix_list_url
        self.list_file = list_file or settings.suffix_list_file
        self.cache_path = Path(cache_path or settings.suffix_cache_path)
        self.ttl_seconds = settings.suffix_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.timeout_seconds = timeout_seconds or settings.suffix_fetch_timeout_seconds
        self._client = client
        self._lock = threading.Lock()
        self._index: Optional[SuffixIndex] = None
        self._loaded_at: Optional[datetime] = None
        self._source: Optional[str] = None

    def fetch(self) -> str:
        """
        Download the suffix list.

        Raises:
            SuffixListError: If the download fails
        """
        try:
            if self._client is not None:
                response = self._client.get(self.url, timeout=self.timeout_seconds)
            else:
                with httpx.Client(follow_redirects=True) as client:
                    response = client.get(self.url, timeout=self.timeout_seconds)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SuffixListError(
                f"Suffix list download failed with status {e.response.status_code}: {self.url}"
            ) from e
        except httpx.RequestError as e:
            raise SuffixListError(f"Suffix list download failed: {e}") from e

        text = response.text
        logger.info(f"Downloaded suffix list from {self.url} ({len(text)} bytes)")
        return text

    def load_cached(self) -> Optional[str]:
        """Return the cached suffix list text, if a cache file exists."""
        if not self.cache_path.is_file():
            return None
        return self.cache_path.read_text(encoding="utf-8")

    def _write_cache(self, text: str) -> None:
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            self.cache_path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write suffix list cache {self.cache_path}: {e}")

    def load_text(self) -> Tuple[str, str]:
        """
        Load raw suffix list text from the configured source.

        A configured local file is used as is. Otherwise the list is
        downloaded, falling back to the cache file when that fails.

        Returns:
            Tuple of (text, source it was read from)

        Raises:
            SuffixListError: If no suffix list is available
        """
        if self.list_file:
            try:
                text = Path(self.list_file).read_text(encoding="utf-8")
            except OSError as e:
                raise SuffixListError(f"Cannot read suffix list file {self.list_file}: {e}") from e
            return text, self.list_file

        try:
            return self.fetch(), self.url
        except SuffixListError as e:
            cached = self.load_cached()
            if cached is None:
                logger.error(f"Suffix list unavailable and no cache present: {e}")
                raise
            logger.warning(f"Suffix list download failed, using cache {self.cache_path}: {e}")
            return cached, str(self.cache_path)

    def _is_stale(self) -> bool:
        if self._index is None or self._loaded_at is None:
            return True
        age = (datetime.now(timezone.utc) - self._loaded_at).total_seconds()
        return age >= self.ttl_seconds

    def refresh(self) -> SuffixIndex:
        """
        Rebuild the index from the source.

        Raises:
            SuffixListError: If the list cannot be loaded or holds no entries
        """
        with self._lock:
            return self._refresh_locked()

    def _refresh_locked(self) -> SuffixIndex:
        text, source = self.load_text()
        index = SuffixIndex.from_text(text)
        if len(index) == 0:
            raise SuffixListError(f"Suffix list from {source} contains no entries")

        # Only a download that produced a usable index replaces the cache
        if source == self.url:
            self._write_cache(text)

        self._index = index
        self._source = source
        self._loaded_at = datetime.now(timezone.utc)
        logger.info(f"Suffix index built with {len(index)} entries from {source}")
        return index

    def get_index(self, force_refresh: bool = False) -> SuffixIndex:
        """
        Return the current index, refreshing it when stale or forced.

        A failed refresh keeps serving the previous index, if there is one.

        Raises:
            SuffixListError: If no index has ever been built successfully
        """
        index = self._index
        if index is not None and not force_refresh and not self._is_stale():
            return index

        with self._lock:
            # Another thread may have refreshed while we waited
            if self._index is not None and not force_refresh and not self._is_stale():
                return self._index
            try:
                return self._refresh_locked()
            except SuffixListError as e:
                if self._index is None:
                    raise
                logger.warning(f"Suffix index refresh failed, keeping previous index: {e}")
                return self._index

    def status(self) -> Dict[str, Any]:
        """Describe the currently loaded suffix list."""
        index = self._index
        return {
            "loaded": index is not None,
            "entries": len(index) if index is not None else 0,
            "loaded_at": self._loaded_at.isoformat() if self._loaded_at else None,
            "source": self._source,
        }
