"""
Sidebar navigation model.

Signed-in visitors get the full link set split into a primary and a secondary
section; signed-out visitors only get the login entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class NavLink:
    label: str
    route: str


NAV_LINKS: tuple[NavLink, ...] = (
    NavLink(label="Home", route="/"),
    NavLink(label="Image Restore", route="/transformations/add/restore"),
    NavLink(label="Generative Fill", route="/transformations/add/fill"),
    NavLink(label="Object Remove", route="/transformations/add/remove"),
    NavLink(label="Object Recolor", route="/transformations/add/recolor"),
    NavLink(label="Background Remove", route="/transformations/add/removeBackground"),
    NavLink(label="Profile", route="/profile"),
    NavLink(label="Buy Credits", route="/credits"),
)

PRIMARY_LINK_COUNT = 6
LOGO_ROUTE = "/"


def _render_links(links: tuple[NavLink, ...], pathname: str) -> list[dict[str, Any]]:
    return [
        {"label": link.label, "route": link.route, "active": link.route == pathname}
        for link in links
    ]


def build_sidebar(
    user: Optional[dict[str, Any]],
    pathname: str,
    *,
    sign_in_route: str = "/sign-in",
    links: tuple[NavLink, ...] = NAV_LINKS,
) -> dict[str, Any]:
    if not user:
        return {
            "signed_in": False,
            "logo_route": LOGO_ROUTE,
            "sections": [],
            "show_user_button": False,
            "login": {"label": "Login", "route": sign_in_route},
        }

    return {
        "signed_in": True,
        "logo_route": LOGO_ROUTE,
        "sections": [
            _render_links(links[:PRIMARY_LINK_COUNT], pathname),
            _render_links(links[PRIMARY_LINK_COUNT:], pathname),
        ],
        "show_user_button": True,
        "login": None,
    }
