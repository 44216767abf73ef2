"""
Pacing controller: randomized timing and fingerprint parameters.

All methods are pure functions of the injected random source and perform no
I/O. Seed the source in tests for deterministic output; leave it unseeded in
production. Durations are integer milliseconds.
"""

import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from listing_scraper.models import PacingMode


@dataclass(frozen=True)
class DelayBounds:
    """Inclusive millisecond range."""
    min_ms: int
    max_ms: int

    def __post_init__(self):
        if self.min_ms < 0:
            raise ValueError("min_ms must be non-negative")
        if self.max_ms < self.min_ms:
            raise ValueError("max_ms must be >= min_ms")

    def contains(self, value: int) -> bool:
        return self.min_ms <= value <= self.max_ms


@dataclass(frozen=True)
class PacingPolicy:
    request_delay: DelayBounds
    max_requests_per_minute: int


# Conservative bounds sit strictly above fast bounds
POLICIES: Dict[PacingMode, PacingPolicy] = {
    PacingMode.CONSERVATIVE: PacingPolicy(DelayBounds(5000, 15000), max_requests_per_minute=3),
    PacingMode.FAST: PacingPolicy(DelayBounds(3000, 8000), max_requests_per_minute=5),
}

POST_NAVIGATION_DELAY = DelayBounds(1000, 3999)
SETTLE_DELAY = DelayBounds(2000, 3000)
LAZY_LOAD_DELAY = DelayBounds(2000, 4000)
DETAIL_VISIT_DELAY = DelayBounds(2000, 4000)
BETWEEN_DETAILS_DELAY = DelayBounds(3000, 6000)
CLOSING_DELAY = DelayBounds(1000, 3000)
POINTER_PAUSE = DelayBounds(100, 500)
SCROLL_STEP_PX = DelayBounds(100, 299)
SCROLL_INTERVAL = DelayBounds(100, 299)

VIEWPORTS: Tuple[Tuple[int, int], ...] = (
    (1920, 1080),
    (1366, 768),
    (1440, 900),
    (1536, 864),
)

POINTER_MOVES = 3


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    def as_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float
    pause_ms: int


@dataclass(frozen=True)
class FingerprintVariation:
    viewport: Viewport
    moves: Tuple[PointerMove, ...]


@dataclass(frozen=True)
class ScrollPacing:
    step_px: int
    interval_ms: int


def _as_mode(mode: Union[PacingMode, str]) -> PacingMode:
    return mode if isinstance(mode, PacingMode) else PacingMode(mode)


class PacingController:
    """
    Produces bounded random delays, rate ceilings and fingerprint variation.

    Args:
        rng: Random source (default: a fresh unseeded ``random.Random``)

    Example:
        >>> pacing = PacingController(random.Random(7))
        >>> pacing.delay_bounds("fast").contains(pacing.inter_request_delay("fast"))
        True
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.Random()

    def _draw(self, bounds: DelayBounds) -> int:
        return self._rng.randint(bounds.min_ms, bounds.max_ms)

    def delay_bounds(self, mode: Union[PacingMode, str]) -> DelayBounds:
        return POLICIES[_as_mode(mode)].request_delay

    def inter_request_delay(self, mode: Union[PacingMode, str]) -> int:
        """Delay before each listing-page request, uniform in the mode's bounds."""
        return self._draw(self.delay_bounds(mode))

    def request_rate_ceiling(self, mode: Union[PacingMode, str]) -> int:
        """Maximum requests per minute the orchestrator should allow."""
        return POLICIES[_as_mode(mode)].max_requests_per_minute

    def post_navigation_delay(self) -> int:
        return self._draw(POST_NAVIGATION_DELAY)

    def settle_delay(self) -> int:
        return self._draw(SETTLE_DELAY)

    def lazy_load_delay(self) -> int:
        return self._draw(LAZY_LOAD_DELAY)

    def detail_visit_delay(self) -> int:
        return self._draw(DETAIL_VISIT_DELAY)

    def between_details_delay(self) -> int:
        return self._draw(BETWEEN_DETAILS_DELAY)

    def closing_delay(self) -> int:
        return self._draw(CLOSING_DELAY)

    def fingerprint_variation(self, viewport: Optional[Viewport] = None) -> FingerprintVariation:
        """
        Pick a viewport and a short pointer path inside it.

        Args:
            viewport: Use this viewport instead of drawing one (the pointer
                path is still drawn inside it)
        """
        if viewport is None:
            width, height = self._rng.choice(VIEWPORTS)
            viewport = Viewport(width, height)
        moves = tuple(
            PointerMove(
                x=self._rng.random() * viewport.width,
                y=self._rng.random() * viewport.height,
                pause_ms=self._draw(POINTER_PAUSE),
            )
            for _ in range(POINTER_MOVES)
        )
        return FingerprintVariation(viewport=viewport, moves=moves)

    def scroll_pacing(self) -> ScrollPacing:
        """Step distance and interval for one progressive scroll session."""
        return ScrollPacing(step_px=self._draw(SCROLL_STEP_PX), interval_ms=self._draw(SCROLL_INTERVAL))
