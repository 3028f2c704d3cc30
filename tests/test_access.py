from types import SimpleNamespace

import pytest

from accounts.access import (
    CHANGE_PASSWORD_PATH,
    DASHBOARD_PATHS,
    dashboard_path,
    resolve_redirect,
)

ALL = ("participant", "member", "manager", "admin")


def account(role, is_first_login=False):
    return SimpleNamespace(role=role, is_first_login=is_first_login)


def test_anonymous_goes_to_login(settings):
    settings.LOGIN_PATH = "/login"
    assert resolve_redirect(None, ALL, "/admin-dashboard") == "/login"


@pytest.mark.parametrize("role", ALL)
def test_allowed_role_proceeds(role):
    assert resolve_redirect(account(role), ALL, "/anything") is None


@pytest.mark.parametrize("role,expected", [
    ("participant", "/participant-dashboard"),
    ("member", "/member-dashboard"),
    ("manager", "/manager-dashboard"),
    ("admin", "/admin-dashboard"),
])
def test_wrong_role_goes_to_own_dashboard(role, expected):
    others = tuple(r for r in ALL if r != role)
    assert resolve_redirect(account(role), others, "/x") == expected
    assert DASHBOARD_PATHS[role] == expected


def test_unknown_role_dashboard_is_home():
    assert dashboard_path("guest") == "/"


def test_member_first_login_must_change_password():
    member = account("member", is_first_login=True)

    assert resolve_redirect(member, ALL, "/member-dashboard/events") == CHANGE_PASSWORD_PATH
    assert resolve_redirect(member, ALL, "/member-dashboard/change-password") is None


def test_first_login_flag_only_enforced_for_members():
    for role in ("participant", "manager", "admin"):
        assert resolve_redirect(account(role, is_first_login=True), ALL, "/x") is None


def test_role_check_comes_before_password_change():
    member = account("member", is_first_login=True)
    assert resolve_redirect(member, ("admin",), "/admin-dashboard") == "/member-dashboard"
