"""Tests for the seeded fixture generator."""

from datetime import timedelta

from app.shared.seeder.config import CountRange
from app.shared.seeder.fixtures import FixtureGenerator


class TestDeterminism:
    """Tests for reproducibility."""

    def test_same_seed_same_values(self, fixtures):
        """Test two generators with the same seed agree."""
        first = FixtureGenerator(7, fixtures.reference_time)
        second = FixtureGenerator(7, fixtures.reference_time)

        assert [first.object_id() for _ in range(5)] == [second.object_id() for _ in range(5)]
        assert first.person_name() == second.person_name()
        assert first.past_datetime() == second.past_datetime()

    def test_different_seeds_differ(self, fixtures):
        """Test different seeds produce different identifiers."""
        now = fixtures.reference_time

        assert FixtureGenerator(1, now).object_id() != FixtureGenerator(2, now).object_id()

    def test_reseed_restarts_stream(self, fixtures):
        """Test reseeding with the same salt replays the same values."""
        fixtures.reseed("users")
        first = [fixtures.object_id(), fixtures.company()]
        fixtures.object_id()
        fixtures.reseed("users")

        assert [fixtures.object_id(), fixtures.company()] == first

    def test_reseed_salts_differ(self, fixtures):
        """Test different salts give different streams."""
        fixtures.reseed("users")
        users_id = fixtures.object_id()
        fixtures.reseed("tasks")

        assert fixtures.object_id() != users_id


class TestIdentifiers:
    """Tests for identifier helpers."""

    def test_object_id_format(self, fixtures):
        """Test object ids are 24 hex characters."""
        object_id = fixtures.object_id()

        assert len(object_id) == 24
        int(object_id, 16)

    def test_token_length(self, fixtures):
        """Test tokens have the requested length."""
        assert len(fixtures.token(16)) == 16
        assert len(fixtures.alphanumeric(64)) == 64


class TestPickMany:
    """Tests for bounded sampling."""

    def test_respects_bounds(self, fixtures):
        """Test the number picked stays within [min, max]."""
        items = list(range(20))
        for _ in range(50):
            picked = fixtures.pick_many(items, 2, 5)
            assert 2 <= len(picked) <= 5
            assert len(set(picked)) == len(picked)

    def test_clamps_to_available(self, fixtures):
        """Test asking for more than available returns all eligible items."""
        picked = fixtures.pick_many([1, 2, 3], 5, 10)

        assert sorted(picked) == [1, 2, 3]

    def test_exclusion_by_key(self, fixtures):
        """Test excluded dict items are never picked."""
        users = [{"_id": "a"}, {"_id": "b"}, {"_id": "c"}]

        for _ in range(20):
            picked = fixtures.pick_many(users, 0, 3, exclude=["a"], key="_id")
            assert all(user["_id"] != "a" for user in picked)

    def test_empty_pool(self, fixtures):
        """Test an empty pool yields an empty pick."""
        assert fixtures.pick_many([], 1, 3) == []

    def test_count_between(self, fixtures):
        """Test counts are drawn inside the range."""
        assert fixtures.count_between(CountRange(3, 3)) == 3
        for _ in range(20):
            assert 1 <= fixtures.count_between(CountRange(1, 4)) <= 4


class TestTimestamps:
    """Tests for timestamp helpers."""

    def test_past_and_future_relative_to_reference(self, fixtures):
        """Test timestamps are anchored on the reference time."""
        now = fixtures.reference_time
        for _ in range(20):
            assert now - timedelta(days=30) <= fixtures.past_datetime(30) < now
            assert now < fixtures.future_datetime(30) <= now + timedelta(days=30)

    def test_timestamps_are_ordered(self, fixtures):
        """Test updated_at never precedes created_at."""
        now = fixtures.reference_time
        for _ in range(20):
            created_at, updated_at = fixtures.timestamps(90)
            assert created_at <= updated_at <= now

    def test_datetime_between_empty_window(self, fixtures):
        """Test an empty window returns its start."""
        now = fixtures.reference_time

        assert fixtures.datetime_between(now, now) == now


class TestText:
    """Tests for text helpers."""

    def test_email_avoids_taken_addresses(self, fixtures):
        """Test a numeric suffix is added when an email is taken."""
        taken: set[str] = set()
        fixtures.reseed("email")
        first = fixtures.email("Ada Lovelace", taken)
        fixtures.reseed("email")
        second = fixtures.email("Ada Lovelace", taken)

        assert first != second
        assert second.startswith("ada.lovelace2@")
        assert taken == {first, second}

    def test_color_format(self, fixtures):
        """Test colours are #RRGGBB."""
        color = fixtures.color()

        assert color.startswith("#")
        assert len(color) == 7
        int(color[1:], 16)
