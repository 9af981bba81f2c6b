# controller.py
import traceback
from dataclasses import replace
from typing import Callable, Optional, Tuple, Union

from config import Config
from models import AppState, RequestStatus, SortOption
from services import BackendError, RobotSearchClient, build_tag_catalog


class SearchController:
    """Owns the application state and the lifecycle of search and tag requests.

    Every transition replaces ``state`` wholesale and is reported to ``on_change``.
    Each request carries a generation number; a response is only committed if no
    newer request of the same kind was issued while it was in flight.
    """

    def __init__(
        self,
        client: RobotSearchClient,
        config: Config,
        on_change: Optional[Callable[[AppState], None]] = None,
    ):
        self.client = client
        self.config = config
        self.on_change = on_change
        self.state = AppState()
        self._search_generation = 0
        self._tags_generation = 0

    def _commit(self, **changes) -> None:
        self.state = replace(self.state, **changes)
        if self.on_change:
            self.on_change(self.state)

    # --- query mutators; filter changes return whether a search is due ---

    def set_query(self, text: str) -> None:
        self._commit(query=self.state.query.with_query(text))

    def set_source(self, source: str) -> bool:
        new_query = self.state.query.with_source(source)
        if new_query == self.state.query:
            return False
        self._commit(query=new_query)
        return True

    def set_sort(self, sort: Union[SortOption, str]) -> bool:
        new_query = self.state.query.with_sort(sort)
        if new_query == self.state.query:
            return False
        self._commit(query=new_query)
        return True

    def toggle_tag(self, tag: str) -> bool:
        self._commit(query=self.state.query.toggle_tag(tag))
        return True

    def select_result(self, index: Optional[int]) -> None:
        results = self.state.results
        selected = results[index] if index is not None and 0 <= index < len(results) else None
        self._commit(selected_result=selected)

    # --- requests ---

    async def perform_search(self) -> Tuple[bool, Optional[str]]:
        """Searches with the current query; returns (committed, error_details)."""
        self._search_generation += 1
        generation = self._search_generation
        params = self.state.query.to_params()
        self._commit(search_status=RequestStatus.loading())

        try:
            projects = await self.client.search(params)
        except BackendError:
            if generation != self._search_generation:
                return False, None
            self._commit(search_status=RequestStatus.failed(self.config.SEARCH_ERROR_MESSAGE))
            return False, traceback.format_exc()

        if generation != self._search_generation:
            return False, None
        self._commit(
            results=tuple(projects),
            search_status=RequestStatus.idle(),
            selected_result=None,
        )
        return True, None

    async def fetch_all_tags(self) -> Tuple[bool, Optional[str]]:
        """Rebuilds the tag catalog from the unfiltered listing; returns (committed, error_details)."""
        self._tags_generation += 1
        generation = self._tags_generation
        self._commit(tag_status=RequestStatus.loading())

        try:
            tags = build_tag_catalog(await self.client.list_projects())
        except BackendError:
            if generation != self._tags_generation:
                return False, None
            self._commit(tag_status=RequestStatus.failed(self.config.TAG_ERROR_MESSAGE))
            return False, traceback.format_exc()

        if generation != self._tags_generation:
            return False, None
        self._commit(tag_catalog=tuple(tags), tag_status=RequestStatus.idle())
        return True, None
