"""
Unit tests for the Session type.
"""

import pytest

from multisession.modules.errors import MissingStoreError
from multisession.modules.session import FLASHES_KEY, Options, Session, new_session


@pytest.fixture
def session(fake_store):
    return new_session(fake_store, "session")


def test_new_session_is_clean(session, fake_store):
    assert session.values == {}
    assert session.dirty is False
    assert session.name == "session"
    assert session.store is fake_store
    assert session.id is None
    assert session.options is None


def test_get_missing_key(session):
    assert session.get("missing") is None
    assert session.get("missing", 42) == 42
    assert session.dirty is False


def test_set_then_get(session):
    session.set("user", {"id": 7})
    session.set(("tuple", 1), "any hashable key")

    assert session.get("user") == {"id": 7}
    assert session.get(("tuple", 1)) == "any hashable key"
    assert session.dirty is True


def test_delete(session):
    session.values["user"] = "alice"

    session.delete("user")

    assert session.get("user") is None
    assert "user" not in session.values
    assert session.dirty is True


def test_delete_absent_key_marks_dirty(session):
    session.delete("never-set")
    assert session.dirty is True


def test_clear(session):
    session.values.update({"a": 1, "b": 2})

    session.clear()

    assert session.values == {}
    assert session.dirty is True


def test_flashes_in_insertion_order(session):
    session.add_flash("saved")
    session.add_flash("published")

    assert session.dirty is True
    assert session.flashes() == ["saved", "published"]
    # Consuming read
    assert session.flashes() == []


def test_flash_keys_are_isolated(session):
    session.add_flash("warning!", "alerts")

    assert session.flashes() == []
    assert session.flashes("alerts") == ["warning!"]
    assert session.flashes("alerts") == []


def test_flashes_use_reserved_key(session):
    session.add_flash("hello")
    assert session.values[FLASHES_KEY] == ["hello"]


def test_empty_flashes_leave_session_clean(session):
    assert session.flashes() == []
    assert session.dirty is False


def test_consuming_flashes_marks_dirty():
    """Flashes loaded from storage are state; reading them requires a save."""
    session = Session(None, "session")
    session.values[FLASHES_KEY] = ["loaded from store"]
    assert session.dirty is False

    assert session.flashes() == ["loaded from store"]

    assert session.dirty is True
    assert FLASHES_KEY not in session.values


def test_add_flash_replaces_non_list(session):
    session.set(FLASHES_KEY, "oops")

    session.add_flash("x")

    assert session.values[FLASHES_KEY] == ["x"]


def test_flashes_wraps_non_list_value(session):
    session.values[FLASHES_KEY] = "abc"

    assert session.flashes() == ["abc"]
    assert session.dirty is True
    assert FLASHES_KEY not in session.values


def test_flashes_empty_list_is_not_a_mutation(session):
    session.values[FLASHES_KEY] = []

    assert session.flashes() == []
    assert session.dirty is False


def test_dirty_is_monotonic(session):
    session.set("a", 1)
    session.get("a")
    session.flashes()
    assert session.dirty is True


@pytest.mark.asyncio
async def test_save_delegates_to_store(session, fake_store, context):
    session.set("a", 1)

    await session.save(context)

    assert fake_store.saved == ["session"]
    assert session.dirty is True


@pytest.mark.asyncio
async def test_save_without_store(context):
    session = Session(None, "orphan")

    with pytest.raises(MissingStoreError):
        await session.save(context)


def test_rebind_store_keeps_name(session):
    other_store = object()

    session._bind(other_store)

    assert session.name == "session"
    assert session.store is other_store


class TestOptions:
    """Test session options."""

    def test_plain_defaults(self):
        options = Options()
        assert options.path == "/"
        assert options.domain is None
        assert options.max_age == 0
        assert options.secure is False
        assert options.http_only is False

    def test_middleware_defaults(self):
        options = Options.defaults()
        assert options.path == "/"
        assert options.max_age == 3600
        assert options.secure is False
        assert options.http_only is True

    def test_copy_is_independent(self):
        options = Options.defaults()
        copied = options.copy()
        copied.max_age = -1

        assert options.max_age == 3600
