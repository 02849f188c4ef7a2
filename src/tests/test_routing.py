"""Tests for request path decoding."""

import pytest

from flatwiki.core.routing import (
    UNMATCHED,
    VALID_PATH,
    Action,
    RouteMatch,
    is_valid_title,
    parse_route,
)


class TestParseRoute:
    @pytest.mark.parametrize(
        "path, action, title",
        [
            ("/view/FrontPage", Action.VIEW, "FrontPage"),
            ("/edit/My_Page2", Action.EDIT, "My_Page2"),
            ("/save/Notes", Action.SAVE, "Notes"),
            ("/save/", Action.SAVE, ""),
            ("/delete/Old", Action.DELETE, "Old"),
            ("/admin/", Action.ADMIN, ""),
        ],
    )
    def test_valid_paths(self, path, action, title):
        assert parse_route(path) == RouteMatch(action=action, title=title)

    @pytest.mark.parametrize(
        "path",
        [
            "/",
            "/admin",
            "/create/",
            "/view",
            "/view/../../etc/passwd",
            "/view/a/b",
            "/view/has space",
            "/view/dash-title",
            "/view/café",
            "/view/Page\n",
            "/VIEW/Page",
            "/static/style.css",
            "view/Page",
        ],
    )
    def test_rejected_paths(self, path):
        assert parse_route(path) is UNMATCHED

    def test_title_is_not_normalized(self):
        route = parse_route("/view/MiXeD_Case")
        assert route.title == "MiXeD_Case"

    def test_unmatched_is_falsy(self):
        assert not UNMATCHED
        assert parse_route("/view/Page")

    def test_pattern_built_from_actions(self):
        for action in Action:
            assert f"{action.value}" in VALID_PATH.pattern


class TestIsValidTitle:
    @pytest.mark.parametrize("title", ["A", "FrontPage", "page_1", "_"])
    def test_valid(self, title):
        assert is_valid_title(title)

    @pytest.mark.parametrize("title", ["", "..", "a/b", "a b", "x-y", "é"])
    def test_invalid(self, title):
        assert not is_valid_title(title)
