# main.py
import webbrowser
from typing import Optional

try:
    import pyperclip
except ImportError:
    pyperclip = None

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input

from config import Config
from controller import SearchController
from models import AppState, Project
from services import RobotSearchClient
from ui import (DetailsPane, FilterControls, LogPane, ProjectTable, ResultsPanel,
                SearchControls, TagFilter, render_result_view)

class RobotSearchApp(App):
    BINDINGS = [
        ("d", "toggle_dark", "Toggle dark mode"),
        ("q", "quit", "Quit"),
        ("c", "copy_link", "Copy Link"),
        ("o", "open_link", "Open Link"),
        ("r", "refresh_tags", "Refresh Tags"),
    ]
    CSS_PATH = "robot_search.tcss"
    TITLE = "Open-Source Robotics Project Search"

    app_state = reactive(AppState(), always_update=True, init=False)

    def __init__(self, controller: SearchController, config: Config):
        super().__init__()
        self.controller = controller
        self.controller.on_change = self._on_state_change
        self.config = config

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="main-container"):
            with Horizontal(id="app-grid"):
                with Vertical(id="left-pane"):
                    yield SearchControls()
                    yield FilterControls()
                    yield ResultsPanel(self.config.EMPTY_RESULTS_MESSAGE, id="results-panel")
                with Vertical(id="right-pane"):
                    yield TagFilter(id="tag-filter")
                    yield DetailsPane(id="details-pane")
            yield LogPane(id="log", wrap=True, highlight=True, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        log = self.query_one(LogPane)
        self.query_one(Input).focus()
        log.add_message(f"🌐 Backend: {self.controller.client.search_url}")
        if pyperclip:
            log.add_message("[green]✅ Clipboard found.[/green]")
        else:
            log.add_message("[yellow]⚠️ 'pyperclip' not installed.[/yellow]")
        self.render_state(None, self.app_state)
        self.action_refresh_tags()
        self.start_search()

    async def on_unmount(self) -> None:
        await self.controller.client.close()

    def _on_state_change(self, state: AppState) -> None:
        self.app_state = state

    def watch_app_state(self, old_state: AppState, new_state: AppState) -> None:
        self.render_state(old_state, new_state)

    def render_state(self, old_state: Optional[AppState], new_state: AppState) -> None:
        if old_state is None or (old_state.results, old_state.search_status) != (new_state.results, new_state.search_status):
            self.query_one(ResultsPanel).show(render_result_view(new_state.results, new_state.search_status))
            self.query_one(SearchControls).set_busy(new_state.search_status.is_loading)
        tag_filter = self.query_one(TagFilter)
        if old_state is None or old_state.tag_catalog != new_state.tag_catalog:
            tag_filter.update_catalog(new_state.tag_catalog, new_state.query.tags)
        tag_filter.show_error(new_state.tag_status.message if new_state.tag_status.is_error else None)
        self.query_one(DetailsPane).update_details(new_state.selected_result)

    def _selected_project(self) -> Optional[Project]:
        project = self.app_state.selected_result
        if project is None:
            self.query_one(LogPane).add_message("[yellow]⚠️ No project selected.[/yellow]")
        return project

    def action_copy_link(self) -> None:
        log = self.query_one(LogPane)
        if not pyperclip:
            log.add_message("[red]❌ 'pyperclip' not installed.[/red]")
            return
        project = self._selected_project()
        if project:
            pyperclip.copy(project.url)
            log.add_message(f"📋 Copied link for '[b]{escape(project.name)}[/b]'.")

    def action_open_link(self) -> None:
        project = self._selected_project()
        if project and project.url:
            webbrowser.open(project.url)
            self.query_one(LogPane).add_message(f"🔗 Opened '[b]{escape(project.name)}[/b]' in the browser.")

    def action_refresh_tags(self) -> None:
        self.run_worker(self.perform_tag_fetch(), group="tags_worker", exclusive=True)

    def start_search(self) -> None:
        self.workers.cancel_group(self, "search_worker")
        self.run_worker(self.perform_search(), group="search_worker", exclusive=True)

    def on_search_controls_search_requested(self, message: SearchControls.SearchRequested) -> None:
        self.controller.set_query(message.query)
        self.start_search()

    def on_filter_controls_source_selected(self, message: FilterControls.SourceSelected) -> None:
        if self.controller.set_source(message.source):
            self.start_search()

    def on_filter_controls_sort_selected(self, message: FilterControls.SortSelected) -> None:
        if self.controller.set_sort(message.sort):
            self.start_search()

    def on_tag_filter_tag_toggled(self, message: TagFilter.TagToggled) -> None:
        if self.controller.toggle_tag(message.tag):
            self.start_search()

    def on_project_table_project_highlighted(self, message: ProjectTable.ProjectHighlighted) -> None:
        self.controller.select_result(message.index)

    def on_project_table_project_chosen(self, message: ProjectTable.ProjectChosen) -> None:
        self.controller.select_result(message.index)
        self.action_open_link()

    async def perform_search(self) -> None:
        log = self.query_one(LogPane)
        query = self.controller.state.query
        log.add_message(
            f"🔎 Searching for '{escape(query.query)}' (source: {query.source}, "
            f"tags: {escape(', '.join(query.tags)) or 'none'}, sort: {query.sort.value})..."
        )
        committed, error_details = await self.controller.perform_search()
        if error_details:
            log.add_message("[red]❌ An error occurred during search.[/red]")
            log.add_message(f"[dim]{escape(error_details)}[/dim]")
            self.log.error(error_details)
            return
        if not committed:
            log.add_message("[dim]Discarded a superseded search response.[/dim]")
            return

        results = self.app_state.results
        if not results:
            log.add_message("🤷 No projects found.")
        else:
            log.add_message(f"🤖 Found {len(results)} projects.")

    async def perform_tag_fetch(self) -> None:
        log = self.query_one(LogPane)
        committed, error_details = await self.controller.fetch_all_tags()
        if error_details:
            log.add_message("[red]❌ Failed to fetch tags.[/red]")
            log.add_message(f"[dim]{escape(error_details)}[/dim]")
            self.log.error(error_details)
        elif committed:
            log.add_message(f"🏷️ Loaded {len(self.app_state.tag_catalog)} tags.")


def run() -> None:
    app_config = Config()
    client = RobotSearchClient(
        app_config.BACKEND_URL,
        endpoint=app_config.SEARCH_ENDPOINT,
        timeout=app_config.REQUEST_TIMEOUT,
    )
    controller = SearchController(client, app_config)
    RobotSearchApp(controller, app_config).run()


if __name__ == "__main__":
    run()
