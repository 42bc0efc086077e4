"""Unit tests for the user directory adapter."""

from __future__ import annotations

import pytest

from modules.users.repositories import UserDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return UserDjangoRepository()


def test_resolves_active_user(repo, user):
    found = repo.get_by_id(user.pk)

    assert found == user
    assert found.is_active is True


def test_resolves_inactive_user(repo, inactive_user):
    assert repo.get_by_id(inactive_user.pk).is_active is False


def test_accepts_string_ids(repo, user):
    assert repo.get_by_id(str(user.pk)) == user


@pytest.mark.parametrize("bad_id", [999999, "abc", None])
def test_unknown_or_malformed_ids_return_none(repo, bad_id):
    assert repo.get_by_id(bad_id) is None
