"""Object pools and relocation strategies."""

from roadloop.pool.recyclable_pool import RecyclablePool
from roadloop.pool.strategy import (
    ChainedSegmentStrategy,
    ConstrainedSearchStrategy,
    GridStrategy,
    RelocationStrategy,
)

__all__ = [
    "ChainedSegmentStrategy",
    "ConstrainedSearchStrategy",
    "GridStrategy",
    "RecyclablePool",
    "RelocationStrategy",
]
