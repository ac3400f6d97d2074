# presence_client/tests/test_state.py

from django.test import SimpleTestCase

from presence_client.state import (
    Confirmed,
    Idle,
    Pending,
    Reverted,
    ServerFailed,
    ServerSucceeded,
    ToggleRequested,
    displayed_value,
    is_updating,
    reduce,
)


class PresenceReducerTests(SimpleTestCase):
    def test_request_shows_tentative_value(self):
        state = reduce(Idle(False), ToggleRequested(current=False, request_id=1))

        self.assertEqual(state, Pending(previous=False, tentative=True, request_id=1))
        self.assertIs(displayed_value(state), True)
        self.assertTrue(is_updating(state))

    def test_success_shows_server_value_not_desired(self):
        pending = Pending(previous=False, tentative=True, request_id=1)

        state = reduce(pending, ServerSucceeded(request_id=1, online=False))

        self.assertEqual(state, Confirmed(False))
        self.assertFalse(is_updating(state))

    def test_failure_reverts(self):
        error = RuntimeError("down")
        pending = Pending(previous=True, tentative=False, request_id=4)

        state = reduce(pending, ServerFailed(request_id=4, error=error))

        self.assertEqual(state, Reverted(True, error))
        self.assertIs(displayed_value(state), True)

    def test_stale_response_is_ignored(self):
        pending = Pending(previous=True, tentative=False, request_id=2)

        self.assertIs(reduce(pending, ServerSucceeded(request_id=1, online=True)), pending)
        self.assertIs(reduce(pending, ServerFailed(request_id=1)), pending)

    def test_response_without_pending_request_is_ignored(self):
        state = Confirmed(True)

        self.assertIs(reduce(state, ServerSucceeded(request_id=1, online=False)), state)

    def test_new_request_supersedes_pending(self):
        pending = Pending(previous=False, tentative=True, request_id=1)

        state = reduce(pending, ToggleRequested(current=True, request_id=2))

        self.assertEqual(state, Pending(previous=True, tentative=False, request_id=2))
