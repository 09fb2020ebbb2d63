import logging
import os
from abc import ABC, abstractmethod
from urllib.error import URLError
from urllib.request import Request, urlopen

from agent_start.constants import (
    CATALOG_INDEX_PATH,
    HTTP_TIMEOUT_SECONDS,
    RAW_GITHUB_URL,
)
from agent_start.errors import CatalogFetchError

logger = logging.getLogger(__name__)


class ICatalogClient(ABC):
    @abstractmethod
    def fetch_index(self, repo: str, branch: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def fetch_asset(self, repo: str, branch: str, path: str) -> str:
        raise NotImplementedError


class GitHubCatalogClient(ICatalogClient):
    """Reads catalog files from raw.githubusercontent.com."""

    def __init__(self, timeout: int = HTTP_TIMEOUT_SECONDS) -> None:
        self.timeout = timeout

    def fetch_index(self, repo: str, branch: str) -> str:
        return self._get(f"{RAW_GITHUB_URL}/{repo}/{branch}/{CATALOG_INDEX_PATH}")

    def fetch_asset(self, repo: str, branch: str, path: str) -> str:
        return self._get(f"{RAW_GITHUB_URL}/{repo}/{branch}/{path}")

    def _get(self, url: str) -> str:
        headers = {"User-Agent": "agent-start"}
        token = os.environ.get("GITHUB_TOKEN")
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("GET %s", url)
        request = Request(url, headers=headers)
        try:
            with urlopen(request, timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                if status != 200:
                    raise CatalogFetchError(f"failed to fetch {url}: HTTP {status}")
                payload = response.read()
        except (URLError, OSError, ValueError) as exc:
            raise CatalogFetchError(f"failed to fetch {url}: {exc}") from exc
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CatalogFetchError(f"failed to decode {url}: {exc}") from exc
