"""Tests for the sidebar navigation model."""

from backend.app.navigation.sidebar import NAV_LINKS, PRIMARY_LINK_COUNT, build_sidebar

USER = {"_id": "google-sub-1", "email": "ada@example.com"}


def test_signed_out_visitor_only_gets_login():
    sidebar = build_sidebar(None, "/profile")

    assert sidebar["signed_in"] is False
    assert sidebar["sections"] == []
    assert sidebar["show_user_button"] is False
    assert sidebar["login"] == {"label": "Login", "route": "/sign-in"}
    assert sidebar["logo_route"] == "/"


def test_signed_out_login_route_is_configurable():
    sidebar = build_sidebar(None, "/", sign_in_route="/auth/sign-in")

    assert sidebar["login"]["route"] == "/auth/sign-in"


def test_signed_in_user_gets_primary_and_secondary_sections():
    sidebar = build_sidebar(USER, "/")

    primary, secondary = sidebar["sections"]
    assert [link["route"] for link in primary] == [l.route for l in NAV_LINKS[:PRIMARY_LINK_COUNT]]
    assert [link["route"] for link in secondary] == ["/profile", "/credits"]
    assert sidebar["show_user_button"] is True
    assert sidebar["login"] is None


def test_only_current_route_is_active():
    sidebar = build_sidebar(USER, "/transformations/add/fill")

    active = [link["label"] for section in sidebar["sections"] for link in section if link["active"]]
    assert active == ["Generative Fill"]


def test_unknown_route_marks_nothing_active():
    sidebar = build_sidebar(USER, "/transformations/123")

    assert not any(link["active"] for section in sidebar["sections"] for link in section)
