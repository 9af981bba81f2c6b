# ui.py
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import (Button, DataTable, Input, Label, LoadingIndicator,
                             Markdown, RadioButton, RadioSet, RichLog,
                             SelectionList, Static)

from models import SORT_LABELS, SOURCES, Project, RequestStatus, SortOption

DESCRIPTION_WIDTH = 60


@dataclass(frozen=True)
class ResultView:
    """What the results panel shows for a given result set and search status."""
    loading: bool
    error: Optional[str]
    projects: Tuple[Project, ...]
    show_empty: bool


def render_result_view(results: Sequence[Project], status: RequestStatus) -> ResultView:
    """Projects the committed results and search status onto a display mode.

    While loading only the indicator is shown. An error keeps the last
    results visible underneath the banner.
    """
    if status.is_loading:
        return ResultView(loading=True, error=None, projects=(), show_empty=False)
    projects = tuple(results)
    error = status.message if status.is_error else None
    return ResultView(loading=False, error=error, projects=projects, show_empty=not projects)


def tag_chips(tags: Iterable[str]) -> Text:
    return Text(" ").join(Text(f" {tag} ", style="reverse") for tag in tags)


def format_project_details(project: Optional[Project]) -> str:
    if project is None:
        return "## Details\n\n*Select a project to see its details.*"
    tags = " ".join(f"`{tag}`" for tag in project.tags) or "*none*"
    return (
        f"## {project.name}\n\n"
        f"- **Source**: {project.source}\n"
        f"- **Link**: `{project.url}`\n\n"
        f"{project.description}\n\n"
        f"**Tags**: {tags}"
    )


class SearchControls(Static):
    """Widget for the search input and button."""
    class SearchRequested(Message):
        def __init__(self, query: str) -> None:
            self.query = query
            super().__init__()

    busy = False

    def compose(self) -> ComposeResult:
        yield Label("Search projects:")
        yield Input(placeholder="e.g. 'ROS2' or 'robotic arm'", id="search-input")
        yield Button("Search", variant="primary", id="search-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_search_message()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.post_search_message()

    def post_search_message(self) -> None:
        if self.busy:
            return
        self.post_message(self.SearchRequested(self.query_one(Input).value))

    def set_busy(self, busy: bool) -> None:
        self.busy = busy
        button = self.query_one(Button)
        button.disabled = busy
        button.label = "Searching..." if busy else "Search"


class FilterControls(Static):
    """Single-choice source filter and sort option."""
    class SourceSelected(Message):
        def __init__(self, source: str) -> None:
            self.source = source
            super().__init__()

    class SortSelected(Message):
        def __init__(self, sort: SortOption) -> None:
            self.sort = sort
            super().__init__()

    def compose(self) -> ComposeResult:
        yield Label("Filter by source")
        with RadioSet(id="source-filter"):
            for source in SOURCES:
                yield RadioButton(source, value=source == "All", id=f"source-{source.lower().replace(' ', '-')}")
        yield Label("Sort by")
        with RadioSet(id="sort-options"):
            for option in SortOption:
                yield RadioButton(SORT_LABELS[option], value=option is SortOption.STARS, id=f"sort-{option.value}")

    def on_radio_set_changed(self, event: RadioSet.Changed) -> None:
        event.stop()
        if event.radio_set.id == "source-filter":
            self.post_message(self.SourceSelected(SOURCES[event.index]))
        else:
            self.post_message(self.SortSelected(list(SortOption)[event.index]))


class TagFilter(Static):
    """Multi-select tag filter backed by the tag catalog."""
    class TagToggled(Message):
        def __init__(self, tag: str) -> None:
            self.tag = tag
            super().__init__()

    def compose(self) -> ComposeResult:
        yield Label("Filter by tags")
        yield SelectionList[str](id="tag-list")
        yield Label("", id="tag-error")

    def on_mount(self) -> None:
        self.show_error(None)

    def on_selection_list_selection_toggled(self, event: SelectionList.SelectionToggled) -> None:
        event.stop()
        self.post_message(self.TagToggled(event.selection.value))

    def update_catalog(self, tags: Sequence[str], selected: Sequence[str]) -> None:
        selection_list = self.query_one(SelectionList)
        selection_list.clear_options()
        selection_list.add_options([(tag, tag, tag in selected) for tag in tags])

    def show_error(self, message: Optional[str]) -> None:
        label = self.query_one("#tag-error", Label)
        label.update(message or "")
        label.display = message is not None


class DetailsPane(Static):
    """Widget to display details of the highlighted project."""
    def on_mount(self) -> None:
        self.update_details(None)

    def update_details(self, project: Optional[Project]) -> None:
        self.query_one(Markdown).update(format_project_details(project))

    def compose(self) -> ComposeResult:
        yield Markdown()


class ProjectTable(DataTable):
    """Widget for the main results table; one row per project, in server order."""
    class ProjectHighlighted(Message):
        def __init__(self, index: Optional[int]) -> None:
            self.index = index
            super().__init__()

    class ProjectChosen(Message):
        def __init__(self, index: int) -> None:
            self.index = index
            super().__init__()

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.projects: Tuple[Project, ...] = ()

    def on_mount(self) -> None:
        self.add_column("Name")
        self.add_column("Source")
        self.add_column("Description", width=DESCRIPTION_WIDTH)
        self.add_column("Tags")
        self.cursor_type = "row"

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key.value is not None:
            self.post_message(self.ProjectChosen(int(event.row_key.value)))

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        key = event.row_key.value
        self.post_message(self.ProjectHighlighted(int(key) if key is not None else None))

    def update_results(self, projects: Tuple[Project, ...]) -> None:
        if projects == self.projects:
            return
        self.projects = projects
        self.clear()
        # Rows grow to fit the wrapped description.
        for index, p in enumerate(projects):
            self.add_row(p.name, p.source, Text(p.description), tag_chips(p.tags), key=str(index), height=None)


class ResultsPanel(Vertical):
    """Error banner, loading indicator, results table and empty state; one view at a time."""
    def __init__(self, empty_message: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.empty_message = empty_message

    def compose(self) -> ComposeResult:
        yield Label("", id="error-banner")
        yield LoadingIndicator(id="loading")
        yield ProjectTable(id="results-table")
        yield Label(self.empty_message, id="empty-state")

    def show(self, view: ResultView) -> None:
        banner = self.query_one("#error-banner", Label)
        banner.update(view.error or "")
        banner.display = view.error is not None
        self.query_one(LoadingIndicator).display = view.loading

        table = self.query_one(ProjectTable)
        if not view.loading:
            table.update_results(view.projects)
        table.display = bool(view.projects)
        self.query_one("#empty-state", Label).display = view.show_empty


class LogPane(RichLog):
    """A dedicated widget for logging application events."""
    def add_message(self, message: str) -> None:
        self.write(message)
