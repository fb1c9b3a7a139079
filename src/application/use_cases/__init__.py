"""Application use cases."""

from .compute_stats import (
    ComputeStatsRequest,
    ComputeStatsResult,
    ComputeStatsUseCase,
)

__all__ = [
    "ComputeStatsRequest",
    "ComputeStatsResult",
    "ComputeStatsUseCase",
]
