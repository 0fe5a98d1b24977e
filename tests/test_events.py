"""Tests for soft delete notifications."""

from unittest.mock import Mock

import pytest

from softdeleteable.soft_delete import (
    EventManager,
    SoftDeleteEvent,
    SoftDeleteEventArgs,
    get_event_manager,
)


class Comment:
    """Plain stand-in for a mapped entity."""


@pytest.fixture
def args():
    return SoftDeleteEventArgs(entity=Comment(), session=Mock())


class TestEventManager:
    """Test listener registration and dispatch."""

    def test_dispatch_calls_listeners_in_order(self, args):
        events = EventManager()
        calls = []
        events.add_listener(SoftDeleteEvent.PRE_SOFT_DELETE, lambda a: calls.append(1))
        events.add_listener(SoftDeleteEvent.PRE_SOFT_DELETE, lambda a: calls.append(2))

        events.dispatch(SoftDeleteEvent.PRE_SOFT_DELETE, args)

        assert calls == [1, 2]

    def test_dispatch_only_reaches_matching_kind(self, args):
        events = EventManager()
        pre = Mock()
        post = Mock()
        events.add_listener(SoftDeleteEvent.PRE_SOFT_DELETE, pre)
        events.add_listener(SoftDeleteEvent.POST_SOFT_DELETE, post)

        events.dispatch(SoftDeleteEvent.POST_SOFT_DELETE, args)

        pre.assert_not_called()
        post.assert_called_once_with(args)

    def test_dispatch_without_listeners(self, args):
        EventManager().dispatch(SoftDeleteEvent.PRE_SOFT_DELETE, args)

    def test_string_kinds_are_accepted(self, args):
        events = EventManager()
        listener = Mock()
        events.add_listener("preSoftDelete", listener)

        events.dispatch(SoftDeleteEvent.PRE_SOFT_DELETE, args)

        listener.assert_called_once_with(args)
        assert events.has_listeners(SoftDeleteEvent.PRE_SOFT_DELETE)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            EventManager().add_listener("onFlush", Mock())

    def test_remove_listener(self, args):
        events = EventManager()
        listener = Mock()
        events.add_listener(SoftDeleteEvent.PRE_SOFT_DELETE, listener)
        events.remove_listener(SoftDeleteEvent.PRE_SOFT_DELETE, listener)
        # Removing twice is harmless
        events.remove_listener(SoftDeleteEvent.PRE_SOFT_DELETE, listener)

        events.dispatch(SoftDeleteEvent.PRE_SOFT_DELETE, args)

        listener.assert_not_called()
        assert not events.has_listeners(SoftDeleteEvent.PRE_SOFT_DELETE)

    def test_listens_for_decorator(self, args):
        events = EventManager()
        seen = []

        @events.listens_for(SoftDeleteEvent.POST_SOFT_DELETE)
        def on_post(event_args):
            seen.append(event_args.entity_type)

        events.dispatch(SoftDeleteEvent.POST_SOFT_DELETE, args)

        assert seen == ["Comment"]
        assert callable(on_post)

    def test_listener_error_propagates_and_stops_dispatch(self, args):
        events = EventManager()
        later = Mock()

        def failing(event_args):
            raise RuntimeError("listener failed")

        events.add_listener(SoftDeleteEvent.PRE_SOFT_DELETE, failing)
        events.add_listener(SoftDeleteEvent.PRE_SOFT_DELETE, later)

        with pytest.raises(RuntimeError, match="listener failed"):
            events.dispatch(SoftDeleteEvent.PRE_SOFT_DELETE, args)

        later.assert_not_called()

    def test_listener_may_unregister_itself(self, args):
        events = EventManager()
        calls = []

        def once(event_args):
            calls.append(event_args)
            events.remove_listener(SoftDeleteEvent.PRE_SOFT_DELETE, once)

        events.add_listener(SoftDeleteEvent.PRE_SOFT_DELETE, once)
        events.dispatch(SoftDeleteEvent.PRE_SOFT_DELETE, args)
        events.dispatch(SoftDeleteEvent.PRE_SOFT_DELETE, args)

        assert calls == [args]

    def test_clear(self, args):
        events = EventManager()
        listener = Mock()
        events.add_listener(SoftDeleteEvent.PRE_SOFT_DELETE, listener)
        events.clear()

        events.dispatch(SoftDeleteEvent.PRE_SOFT_DELETE, args)

        listener.assert_not_called()


def test_global_event_manager_is_shared():
    assert get_event_manager() is get_event_manager()
