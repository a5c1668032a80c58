"""Test the TTL query cache."""

from datetime import datetime, timezone
from decimal import Decimal

from src.services.price_search.cache import DEFAULT_TTL_SECONDS, QueryCache
from src.services.price_search.models import ProductRecord


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _record(name: str, source_id: str) -> ProductRecord:
    return ProductRecord(
        name=name,
        price=Decimal("1.00"),
        source_id=source_id,
        captured_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class TestQueryCache:
    """Test cases for QueryCache."""

    def setup_method(self) -> None:
        self.clock = FakeClock()
        self.cache = QueryCache(clock=self.clock)

    def test_default_ttl_is_ten_minutes(self) -> None:
        assert self.cache.ttl_seconds == DEFAULT_TTL_SECONDS == 600

    def test_entry_present_just_before_ttl(self) -> None:
        self.cache.put("milk", [_record("Milk", "metro")])
        self.clock.now += DEFAULT_TTL_SECONDS - 0.001

        entry = self.cache.get("milk")

        assert entry is not None
        assert [r.name for r in entry.records] == ["Milk"]

    def test_entry_absent_after_ttl(self) -> None:
        self.cache.put("milk", [_record("Milk", "metro")])
        self.clock.now += DEFAULT_TTL_SECONDS + 0.001

        assert self.cache.get("milk") is None
        assert self.cache.size() == 0

    def test_entry_absent_exactly_at_ttl(self) -> None:
        self.cache.put("milk", [_record("Milk", "metro")])
        self.clock.now += DEFAULT_TTL_SECONDS

        assert self.cache.get("milk") is None

    def test_put_overwrites_and_refreshes_timestamp(self) -> None:
        self.cache.put("milk", [_record("Old", "metro")])
        self.clock.now += 500
        self.cache.put("milk", [_record("New", "sobeys")])
        self.clock.now += 500

        entry = self.cache.get("milk")

        assert entry is not None
        assert [r.name for r in entry.records] == ["New"]

    def test_stored_records_are_a_copy(self) -> None:
        records = [_record("Milk", "metro")]
        self.cache.put("milk", records)
        records.append(_record("Bread", "metro"))

        assert len(self.cache.get("milk").records) == 1

    def test_count_by_source_ignores_expired_entries(self) -> None:
        self.cache.put("milk", [_record("Milk", "metro"), _record("Milk", "sobeys")])
        self.clock.now += 400
        self.cache.put("bread", [_record("Bread", "metro")])

        assert self.cache.count_by_source("metro") == 2
        assert self.cache.count_by_source("walmart") == 0

        self.clock.now += 300
        assert self.cache.count_by_source("metro") == 1
        assert self.cache.count_by_source("sobeys") == 0

    def test_invalidate_single_key_and_all(self) -> None:
        self.cache.put("milk", [_record("Milk", "metro")])
        self.cache.put("bread", [_record("Bread", "metro")])

        self.cache.invalidate("milk")
        assert self.cache.get("milk") is None
        assert len(self.cache) == 1

        self.cache.invalidate()
        assert len(self.cache) == 0

    def test_purge_expired_removes_only_stale_entries(self) -> None:
        self.cache.put("milk", [_record("Milk", "metro")])
        self.clock.now += 700
        self.cache.put("bread", [_record("Bread", "metro")])

        assert self.cache.purge_expired() == 1
        assert self.cache.get("bread") is not None
