"""Decoding of request paths into wiki actions."""

import re
from dataclasses import dataclass
from enum import Enum


class Action(str, Enum):
    """Actions addressed as ``/<action>/<title>``."""

    VIEW = "view"
    EDIT = "edit"
    SAVE = "save"
    DELETE = "delete"
    ADMIN = "admin"


TITLE_PATTERN = re.compile(r"[A-Za-z0-9_]+")

# The title group may be empty: /save/ takes its title from the form instead.
VALID_PATH = re.compile(
    r"^/(%s)/([A-Za-z0-9_]*)$" % "|".join(action.value for action in Action)
)


@dataclass(frozen=True)
class RouteMatch:
    """A path that decoded to an action and a (possibly empty) title."""

    action: Action
    title: str


class _Unmatched:
    def __repr__(self) -> str:
        return "UNMATCHED"

    def __bool__(self) -> bool:
        return False


UNMATCHED = _Unmatched()

Route = RouteMatch | _Unmatched


def parse_route(path: str) -> Route:
    """Decode a request path.

    Args:
        path: The request path, already percent-decoded.

    Returns:
        RouteMatch on success, UNMATCHED otherwise. Titles are byte-exact;
        no case folding or trimming is applied.
    """
    m = VALID_PATH.fullmatch(path)
    if m is None:
        return UNMATCHED
    return RouteMatch(action=Action(m.group(1)), title=m.group(2))


def is_valid_title(title: str) -> bool:
    """Check that a title could have come from a routed path."""
    return TITLE_PATTERN.fullmatch(title) is not None
