# models.py
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

SOURCES: Tuple[str, ...] = ("All", "GitHub", "Hugging Face")


class SortOption(str, Enum):
    STARS = "stars"
    GROWTH = "growth"
    GROWTH_WEEK = "growth_week"
    GROWTH_MONTH = "growth_month"


SORT_LABELS: Dict[SortOption, str] = {
    SortOption.STARS: "Most stars",
    SortOption.GROWTH: "Fastest growing",
    SortOption.GROWTH_WEEK: "Fastest growing this week",
    SortOption.GROWTH_MONTH: "Fastest growing this month",
}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class Project:
    """A single project as returned by the backend."""
    id: Any
    name: str
    url: str
    description: str
    source: str
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, item: Any) -> "Project":
        if not isinstance(item, dict):
            raise ValueError(f"Expected a project object, got {type(item).__name__}")
        tags = item.get("tags")
        if tags is None:
            tags = []
        elif not isinstance(tags, list):
            raise ValueError(f"Expected 'tags' to be a list, got {type(tags).__name__}")
        return cls(
            id=item.get("id"),
            name=_text(item.get("name")),
            url=_text(item.get("url")),
            description=_text(item.get("description")),
            source=_text(item.get("source")),
            tags=[str(tag) for tag in tags],
        )


@dataclass(frozen=True)
class QueryState:
    """The current search parameters. Every mutator returns a new state."""
    query: str = ""
    source: str = "All"
    tags: Tuple[str, ...] = ()
    sort: SortOption = SortOption.STARS

    def with_query(self, query: str) -> "QueryState":
        return replace(self, query=query)

    def with_source(self, source: str) -> "QueryState":
        if source not in SOURCES:
            raise ValueError(f"Unknown source: {source!r}")
        return replace(self, source=source)

    def toggle_tag(self, tag: str) -> "QueryState":
        """Adds the tag at the end of the selection, or removes it if already selected."""
        if tag in self.tags:
            return replace(self, tags=tuple(t for t in self.tags if t != tag))
        return replace(self, tags=self.tags + (tag,))

    def with_sort(self, sort: Union[SortOption, str]) -> "QueryState":
        return replace(self, sort=SortOption(sort))

    def to_params(self) -> Dict[str, str]:
        """Serializes the state into the backend's query parameters, in wire order."""
        return {
            "query": self.query,
            "source": self.source,
            "tags": ",".join(self.tags),
            "sort": self.sort.value,
        }


@dataclass(frozen=True)
class RequestStatus:
    """Lifecycle of one kind of request: idle, loading or error(message)."""
    kind: str = "idle"
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "RequestStatus":
        return cls("idle")

    @classmethod
    def loading(cls) -> "RequestStatus":
        return cls("loading")

    @classmethod
    def failed(cls, message: str) -> "RequestStatus":
        return cls("error", message)

    @property
    def is_loading(self) -> bool:
        return self.kind == "loading"

    @property
    def is_error(self) -> bool:
        return self.kind == "error"


@dataclass(frozen=True)
class AppState:
    """A single object to hold the entire application state."""
    query: QueryState = field(default_factory=QueryState)
    results: Tuple[Project, ...] = ()
    search_status: RequestStatus = field(default_factory=RequestStatus)
    tag_catalog: Tuple[str, ...] = ()
    tag_status: RequestStatus = field(default_factory=RequestStatus)
    selected_result: Optional[Project] = None
