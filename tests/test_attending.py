"""
Pending Attending Call Tests

Test Coverage:
- Register / close lifecycle
- Clock stamping
- Duplicate policies
- Lookups on unknown addresses
"""

import pytest

from medmesh.core.errors import DuplicateError, NotFoundError
from medmesh.core.policy import DuplicatePolicy
from medmesh.p2p.attending.queue import CallRecord, PendingCallQueue


class FakeClock:
    """Manually advanced simulation clock."""

    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def queue(clock):
    return PendingCallQueue(clock=clock)


class TestCallLifecycle:
    """Test registering and closing attending calls."""

    def test_register_then_close(self, queue):
        before = queue.count()

        queue.register_call("10.0.0.5", "x", 2, 12.5)
        assert queue.count() == before + 1
        assert queue.get_priority("10.0.0.5") == 2

        assert queue.close_call("10.0.0.5") is True
        assert queue.count() == before

        with pytest.raises(NotFoundError):
            queue.get_priority("10.0.0.5")

    def test_round_trip(self, queue):
        call = queue.register_call("10.0.0.5", "InfoA", 1, 42.0)

        assert isinstance(call, CallRecord)
        assert queue.get_critical_data("10.0.0.5") == "InfoA"
        assert queue.get_priority("10.0.0.5") == 1
        assert queue.get_timestamp("10.0.0.5") == 42.0
        assert queue.get_call("10.0.0.5") == call

    def test_clock_stamps_missing_timestamp(self, queue, clock):
        clock.now = 250.0
        queue.register_call("10.0.0.5", "InfoB", 3)

        assert queue.get_timestamp("10.0.0.5") == 250.0

    def test_list_ips_arrival_order(self, queue):
        for ip in ("c", "a", "b"):
            queue.register_call(ip, "x", 1)

        assert queue.list_ips() == ["c", "a", "b"]
        assert [call.ip for call in queue.calls()] == ["c", "a", "b"]

    def test_close_unknown_is_noop(self, queue):
        queue.register_call("10.0.0.5", "x", 1)

        assert queue.close_call("10.0.0.99") is False
        assert queue.close_call("10.0.0.99") is False
        assert queue.count() == 1

    def test_close_on_empty_queue(self, queue):
        assert queue.is_empty()
        assert queue.close_call("10.0.0.5") is False

    def test_call_record_immutable(self, queue):
        call = queue.register_call("10.0.0.5", "x", 1)

        with pytest.raises(AttributeError):
            call.priority = 9

    def test_stats(self, queue):
        queue.register_call("a", "x", 1)
        queue.register_call("b", "x", 1)
        queue.close_call("a")

        stats = queue.get_stats()
        assert stats["calls_registered"] == 2
        assert stats["calls_closed"] == 1
        assert stats["pending"] == 1


class TestCallDuplicates:
    """Test a second call from the same peer."""

    def test_replace_keeps_one_record(self, queue):
        queue.register_call("a", "old", 3, 1.0)
        queue.register_call("b", "x", 1, 2.0)
        queue.register_call("a", "new", 1, 3.0)

        assert queue.count() == 2
        assert queue.list_ips() == ["a", "b"]
        assert queue.get_critical_data("a") == "new"
        assert queue.get_priority("a") == 1
        assert queue.get_timestamp("a") == 3.0

        # One close removes the peer entirely
        queue.close_call("a")
        assert "a" not in queue

    def test_reject(self, clock):
        queue = PendingCallQueue(clock=clock, duplicate_policy=DuplicatePolicy.REJECT)
        queue.register_call("a", "old", 3, 1.0)

        with pytest.raises(DuplicateError) as exc_info:
            queue.register_call("a", "new", 1, 2.0)

        assert exc_info.value.table == "attending call"
        assert queue.get_critical_data("a") == "old"
        assert queue.stats["calls_rejected"] == 1


class TestCallLookupFailures:
    """Lookups on absent calls raise NotFoundError."""

    @pytest.mark.parametrize("query", [
        "get_call", "get_critical_data", "get_priority", "get_timestamp",
    ])
    def test_unknown_address(self, queue, query):
        queue.register_call("a", "x", 1)

        with pytest.raises(NotFoundError) as exc_info:
            getattr(queue, query)("b")

        assert exc_info.value.ip == "b"
        assert exc_info.value.table == "attending call"
