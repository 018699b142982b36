"""Seeded fixture generator shared by every stage of a run."""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, TypeVar

from faker import Faker

if TYPE_CHECKING:
    from app.shared.seeder.config import CountRange

T = TypeVar("T")


class FixtureGenerator:
    """Reproducible random values for one seeding run.

    Wraps a ``random.Random`` and a Faker instance seeded with the same
    value. Every timestamp is derived from ``reference_time`` rather than the
    wall clock, so two runs with the same seed and reference time produce
    identical documents.
    """

    def __init__(self, seed: int, reference_time: datetime, locale: str = "en_US") -> None:
        """Initialize the generator.

        Args:
            seed: Random seed for the run.
            reference_time: Anchor for past/future timestamps.
            locale: Faker locale.
        """
        self.seed = seed
        self.reference_time = reference_time
        self.rng = random.Random(seed)
        self.faker = Faker(locale)
        self.faker.seed_instance(seed)

    def reseed(self, salt: str) -> None:
        """Restart both streams from ``seed`` combined with ``salt``.

        Each pipeline stage reseeds with its own key, so a stage produces the
        same records whether or not the stages before it ran.
        """
        derived = f"{self.seed}:{salt}"
        self.rng.seed(derived)
        self.faker.seed_instance(derived)

    # -------------------------------------------------------------------------
    # Identifiers
    # -------------------------------------------------------------------------

    def object_id(self) -> str:
        """24-character hex identifier."""
        return f"{self.rng.getrandbits(96):024x}"

    def token(self, length: int = 32) -> str:
        """Hex token of ``length`` characters."""
        return f"{self.rng.getrandbits(length * 4):0{length}x}"

    def alphanumeric(self, length: int) -> str:
        alphabet = "abcdefghijklmnopqrstuvwxyz0123456789"
        return "".join(self.rng.choice(alphabet) for _ in range(length))

    # -------------------------------------------------------------------------
    # Numbers and picks
    # -------------------------------------------------------------------------

    def integer(self, minimum: int, maximum: int) -> int:
        """Uniform integer in ``[minimum, maximum]``."""
        return self.rng.randint(minimum, maximum)

    def number(self, minimum: float, maximum: float, precision: int = 2) -> float:
        """Uniform float rounded to ``precision`` decimals."""
        return round(self.rng.uniform(minimum, maximum), precision)

    def count_between(self, count_range: CountRange) -> int:
        """Draw a count from a profile range."""
        return self.rng.randint(count_range.min, count_range.max)

    def boolean(self, probability: float = 0.5) -> bool:
        """True with the given probability."""
        return self.rng.random() < probability

    def choice(self, items: Sequence[T]) -> T:
        """Pick one item.

        Raises:
            IndexError: If ``items`` is empty.
        """
        return self.rng.choice(items)

    def pick_many(
        self,
        items: Sequence[T],
        minimum: int,
        maximum: int,
        exclude: Iterable[Any] = (),
        key: str | None = None,
    ) -> list[T]:
        """Pick distinct items with cardinality bounds.

        Bounds are clamped to the number of eligible items, so asking for more
        than are available returns all of them.

        Args:
            items: Candidate items.
            minimum: Lower bound on the number picked.
            maximum: Upper bound on the number picked.
            exclude: Items (or values of ``key``) that must not be picked.
            key: Dict key compared against ``exclude`` instead of the item.

        Returns:
            Picked items in sampling order.
        """
        excluded = list(exclude)
        eligible = [
            item
            for item in items
            if (item[key] if key is not None else item) not in excluded  # type: ignore[index]
        ]
        upper = min(maximum, len(eligible))
        lower = min(minimum, upper)
        if upper <= 0:
            return []
        return self.rng.sample(eligible, self.rng.randint(lower, upper))

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------

    def past_datetime(self, days: int = 365) -> datetime:
        """Timestamp up to ``days`` before the reference time."""
        seconds = self.rng.randint(1, max(1, days * 86400))
        return self.reference_time - timedelta(seconds=seconds)

    def future_datetime(self, days: int = 30) -> datetime:
        """Timestamp up to ``days`` after the reference time."""
        seconds = self.rng.randint(1, max(1, days * 86400))
        return self.reference_time + timedelta(seconds=seconds)

    def recent_datetime(self, days: int = 7) -> datetime:
        return self.past_datetime(days)

    def datetime_between(self, start: datetime, end: datetime) -> datetime:
        """Timestamp in ``[start, end]`` (``start`` when the window is empty)."""
        span = int((end - start).total_seconds())
        if span <= 0:
            return start
        return start + timedelta(seconds=self.rng.randint(0, span))

    def timestamps(self, days: int = 365) -> tuple[datetime, datetime]:
        """``(created_at, updated_at)`` pair with ``updated_at >= created_at``."""
        created_at = self.past_datetime(days)
        return created_at, self.datetime_between(created_at, self.reference_time)

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def person_name(self) -> str:
        return f"{self.faker.first_name()} {self.faker.last_name()}"

    def email(self, name: str, taken: set[str] | None = None) -> str:
        """Lower-case email derived from a display name.

        Args:
            name: Display name used for the local part.
            taken: Emails already in use; a numeric suffix is added on clash.
        """
        local = ".".join(part for part in name.lower().replace("'", "").split() if part)
        domain = self.faker.free_email_domain()
        candidate = f"{local}@{domain}"
        suffix = 1
        while taken is not None and candidate in taken:
            suffix += 1
            candidate = f"{local}{suffix}@{domain}"
        if taken is not None:
            taken.add(candidate)
        return candidate

    def company(self) -> str:
        return self.faker.company()

    def sentence(self, words: int = 8) -> str:
        return self.faker.sentence(nb_words=words)

    def paragraph(self, sentences: int = 3) -> str:
        return self.faker.paragraph(nb_sentences=sentences)

    def words(self, count: int = 3) -> list[str]:
        return self.faker.words(nb=count)

    def color(self) -> str:
        """Random ``#RRGGBB`` colour."""
        return f"#{self.rng.randint(0, 0xFFFFFF):06X}"

    def ip_address(self) -> str:
        """Public-looking IPv4 address."""
        return ".".join(
            str(part)
            for part in (
                self.rng.randint(192, 223),
                self.rng.randint(0, 255),
                self.rng.randint(0, 255),
                self.rng.randint(1, 254),
            )
        )

    def url(self) -> str:
        return self.faker.url()

    def city(self) -> str:
        return self.faker.city()
