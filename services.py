# services.py
from typing import Any, Dict, Iterable, List, Optional

import httpx

from models import Project


class BackendError(Exception):
    """Raised when the search backend cannot produce a usable response."""


class NetworkFailure(BackendError):
    """The request failed in transport, timed out, or returned a non-success status."""


class ParseFailure(BackendError):
    """The response body is not valid JSON or not shaped as expected."""


def normalize_tag(tag: str) -> str:
    """Replaces the first dash of a tag with a space; later dashes are kept."""
    return tag.replace("-", " ", 1)


def build_tag_catalog(items: Iterable[Any]) -> List[str]:
    """Flattens the tags of every listed project into a sorted list of distinct normalized tags."""
    tags = set()
    for item in items:
        if not isinstance(item, dict) or not isinstance(item.get("tags"), list):
            raise ParseFailure("Every listed project must expose a 'tags' list.")
        tags.update(normalize_tag(str(tag)) for tag in item["tags"])
    return sorted(tags)


class RobotSearchClient:
    """HTTP client for the robot project search backend."""

    def __init__(
        self,
        base_url: str,
        endpoint: str = "/api/search",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.endpoint = endpoint
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def search_url(self) -> str:
        return f"{self.base_url}{self.endpoint}"

    async def close(self) -> None:
        await self._client.aclose()

    async def search(self, params: Dict[str, str]) -> List[Project]:
        """Runs a filtered search; projects come back in server order."""
        items = await self._get_array(params)
        try:
            return [Project.from_dict(item) for item in items]
        except ValueError as e:
            raise ParseFailure(str(e)) from e

    async def list_projects(self) -> List[Any]:
        """Fetches the unfiltered listing, used to harvest the tag vocabulary."""
        return await self._get_array(None)

    async def _get_array(self, params: Optional[Dict[str, str]]) -> List[Any]:
        try:
            response = await self._client.get(self.search_url, params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NetworkFailure(f"Request to {self.search_url} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ParseFailure(f"Response from {self.search_url} is not valid JSON.") from e
        if not isinstance(data, list):
            raise ParseFailure(f"Expected a JSON array, got {type(data).__name__}.")
        return data
