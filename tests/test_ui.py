"""Tests for the result view projection and the app driven headless."""

from __future__ import annotations

import asyncio

import httpx
import pytest
from textual.widgets import Button, Input, Label, LoadingIndicator

from controller import SearchController
from main import RobotSearchApp
from models import Project, RequestStatus
from ui import (ProjectTable, SearchControls, TagFilter, format_project_details,
                render_result_view, tag_chips)

PROJECTS = (
    Project(id=1, name="ros2-nav", url="https://example.com/ros2-nav", description="Nav", source="GitHub", tags=["ros2"]),
    Project(id=2, name="arm-policy", url="https://example.com/arm", description="Policy", source="Hugging Face"),
)


def test_loading_hides_results_and_error():
    view = render_result_view(PROJECTS, RequestStatus.loading())
    assert view.loading is True
    assert view.error is None
    assert view.projects == ()
    assert view.show_empty is False


def test_idle_shows_results_in_given_order():
    view = render_result_view(PROJECTS, RequestStatus.idle())
    assert [p.name for p in view.projects] == ["ros2-nav", "arm-policy"]
    assert view.error is None and view.show_empty is False


def test_idle_without_results_shows_empty_state():
    view = render_result_view((), RequestStatus.idle())
    assert view.show_empty is True
    assert view.projects == ()


def test_error_keeps_stale_results_visible():
    view = render_result_view(PROJECTS, RequestStatus.failed("Search failed."))
    assert view.error == "Search failed."
    assert view.projects == PROJECTS
    assert view.loading is False


def test_format_project_details():
    text = format_project_details(PROJECTS[0])
    assert text.startswith("## ros2-nav")
    assert "**Source**: GitHub" in text
    assert "`ros2`" in text
    assert "Select a project" in format_project_details(None)


def test_tag_chips_contains_every_tag():
    assert tag_chips(["ros2", "robotic arm"]).plain == " ros2   robotic arm "


def _app(make_client, config, handler) -> RobotSearchApp:
    return RobotSearchApp(SearchController(make_client(handler), config), config)


@pytest.mark.asyncio
async def test_app_runs_initial_search_and_tag_fetch(make_client, config):
    async def handler(request: httpx.Request) -> httpx.Response:
        if not request.url.params:
            return httpx.Response(200, json=[{"tags": ["robotic-arm", "ros2"]}])
        return httpx.Response(200, json=[{"id": 1, "name": "ros2-nav", "source": "GitHub", "tags": ["ros2"]}])

    app = _app(make_client, config, handler)
    async with app.run_test() as pilot:
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert app.app_state.tag_catalog == ("robotic arm", "ros2")
        table = app.query_one(ProjectTable)
        assert table.row_count == 1
        assert table.display is True
        assert app.query_one(LoadingIndicator).display is False
        assert app.query_one("#error-banner", Label).display is False


@pytest.mark.asyncio
async def test_app_keeps_rows_and_shows_banner_when_tag_toggle_search_fails(make_client, config):
    fail = False

    async def handler(request: httpx.Request) -> httpx.Response:
        if not request.url.params:
            return httpx.Response(200, json=[{"tags": ["ros2"]}])
        if fail:
            return httpx.Response(504)
        return httpx.Response(200, json=[{"id": 1, "name": "ros2-nav", "source": "GitHub", "tags": ["ros2"]}])

    app = _app(make_client, config, handler)
    async with app.run_test() as pilot:
        await app.workers.wait_for_complete()
        await pilot.pause()

        fail = True
        app.post_message(TagFilter.TagToggled("ros2"))
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert app.app_state.query.tags == ("ros2",)
        assert app.query_one(ProjectTable).row_count == 1
        assert app.query_one(ProjectTable).display is True
        banner = app.query_one("#error-banner", Label)
        assert banner.display is True
        assert app.app_state.search_status.message == config.SEARCH_ERROR_MESSAGE
        assert app.query_one(SearchControls).busy is False


@pytest.mark.asyncio
async def test_app_shows_empty_state_for_no_results(make_client, config):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    app = _app(make_client, config, handler)
    async with app.run_test() as pilot:
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert app.query_one("#empty-state", Label).display is True
        assert app.query_one(ProjectTable).display is False


@pytest.mark.asyncio
async def test_app_renders_non_text_fields_and_full_description(make_client, config):
    long_description = "A navigation stack for mobile robots " * 4

    async def handler(request: httpx.Request) -> httpx.Response:
        if not request.url.params:
            return httpx.Response(200, json=[{"tags": []}])
        return httpx.Response(
            200,
            json=[
                {"id": 1, "name": "ros2-nav", "description": long_description, "tags": ["ros2"]},
                {"id": 2, "name": "counter", "description": 42, "tags": []},
            ],
        )

    app = _app(make_client, config, handler)
    async with app.run_test() as pilot:
        await app.workers.wait_for_complete()
        await pilot.pause()

        table = app.query_one(ProjectTable)
        assert table.row_count == 2
        assert table.get_row_at(0)[2].plain == long_description
        assert table.get_row_at(1)[2].plain == "42"


def _recording_handler(searches: list, hold: asyncio.Event = None, entered: asyncio.Event = None):
    async def handler(request: httpx.Request) -> httpx.Response:
        if not request.url.params:
            return httpx.Response(200, json=[{"tags": ["ros2"]}])
        searches.append(dict(request.url.params))
        if hold is not None and request.url.params["query"] == "slow":
            entered.set()
            await hold.wait()
        return httpx.Response(200, json=[{"id": 1, "name": "ros2-nav", "tags": ["ros2"]}])

    return handler


@pytest.mark.asyncio
async def test_typing_does_not_search_until_enter(make_client, config):
    searches: list = []
    app = _app(make_client, config, _recording_handler(searches))
    async with app.run_test(size=(120, 60)) as pilot:
        await app.workers.wait_for_complete()
        await pilot.pause()
        assert len(searches) == 1

        await pilot.click("#search-input")
        await pilot.press("n", "a", "v")
        await pilot.pause()
        assert app.query_one(Input).value == "nav"
        assert len(searches) == 1

        await pilot.press("enter")
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert len(searches) == 2
        assert searches[-1]["query"] == "nav"
        assert app.app_state.query.query == "nav"


@pytest.mark.asyncio
async def test_search_button_submits_query(make_client, config):
    searches: list = []
    app = _app(make_client, config, _recording_handler(searches))
    async with app.run_test(size=(120, 60)) as pilot:
        await app.workers.wait_for_complete()
        await pilot.pause()

        app.query_one(Input).value = "gripper"
        await pilot.click("#search-button")
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert [s["query"] for s in searches] == ["", "gripper"]


@pytest.mark.asyncio
async def test_source_and_sort_selection_trigger_searches(make_client, config):
    searches: list = []
    app = _app(make_client, config, _recording_handler(searches))
    async with app.run_test(size=(120, 60)) as pilot:
        await app.workers.wait_for_complete()
        await pilot.pause()

        await pilot.click("#source-github")
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()
        assert searches[-1]["source"] == "GitHub"
        assert searches[-1]["sort"] == "stars"

        await pilot.click("#sort-growth_month")
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()
        assert searches[-1]["source"] == "GitHub"
        assert searches[-1]["sort"] == "growth_month"
        assert len(searches) == 3


@pytest.mark.asyncio
async def test_submit_is_disabled_while_search_is_loading(make_client, config):
    searches: list = []
    hold = asyncio.Event()
    entered = asyncio.Event()
    app = _app(make_client, config, _recording_handler(searches, hold, entered))
    async with app.run_test(size=(120, 60)) as pilot:
        await app.workers.wait_for_complete()
        await pilot.pause()

        search_input = app.query_one(Input)
        search_input.value = "slow"
        search_input.focus()
        await pilot.press("enter")
        await asyncio.wait_for(entered.wait(), timeout=5)
        await pilot.pause()

        button = app.query_one("#search-button", Button)
        assert app.app_state.search_status.is_loading
        assert button.disabled is True
        assert app.query_one(SearchControls).busy is True
        assert app.query_one(LoadingIndicator).display is True

        await pilot.press("enter")
        await pilot.pause()
        assert [s["query"] for s in searches] == ["", "slow"]

        hold.set()
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert button.disabled is False
        assert app.query_one(SearchControls).busy is False
        assert len(searches) == 2
