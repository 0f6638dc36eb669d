"""
Multilateration Pipeline.

Composes the per-epoch refinement stages around an external geometric
solver:

    RangingFilter -> solver -> RobustFilter -> Weigher -> weighted centroid
        -> LocationFilter (optional)

Usage:
    pipeline = MultilaterationPipeline(anchors, solver, ranging_filter, weigher)

    estimate = pipeline.process(measured_ranges, timestamp=t_ms)

    if estimate.has_valid_fix:
        print(f"Position: {estimate.position}")
    else:
        print("NO_FIX")

The solver is any callable `solve(anchors, ranges, options) -> [Point]`
returning candidate positions (e.g. one per anchor subset).
"""

from typing import Callable, Dict, List, Mapping, Optional, Sequence
from dataclasses import dataclass, field
import logging
import math
import sys

from lat_core.errors import ConfigurationError, UsageError
from lat_core.localization.robust_filter import RobustFilter
from lat_core.metrics import get_metrics
from lat_core.proto.point import Point
from lat_core.proto.position_estimate import PositionEstimate, FixType, create_no_fix
from lat_core.proto.range_vector import valid_indices
from lat_core.ranging.base import RangingFilter
from lat_core.registry import (
    Registry,
    create_location_filter_registry,
    create_ranging_filter_registry,
    create_weigher_registry,
)
from lat_core.tracking import LocationFilter
from lat_core.weighting.base import Weigher

logger = logging.getLogger(__name__)

CandidateSolver = Callable[[Sequence[Point], Sequence[float], Mapping], List[Point]]


@dataclass
class PipelineConfig:
    """
    Configuration for the multilateration pipeline.

    Attributes:
        ranging_filter: Registry key of the ranging filter
        ranging_filter_params: Parameters for the ranging filter config
        weigher: Registry key of the weigher
        weigher_params: Parameters for the weigher config
        min_anchors: Valid ranges required before calling the solver
        apply_robust_filter: Reject outlier candidates before weighing
        solver_options: Passed through to the solver unchanged
        location_filter: Registry key of the location filter, None to disable
        location_filter_params: Parameters for the location filter config
    """

    ranging_filter: str = "median"
    ranging_filter_params: Dict = field(default_factory=dict)
    weigher: str = "gamma"
    weigher_params: Dict = field(default_factory=dict)
    min_anchors: int = 3
    apply_robust_filter: bool = True
    solver_options: Dict = field(default_factory=dict)
    location_filter: Optional[str] = None
    location_filter_params: Dict = field(default_factory=dict)

    def __post_init__(self):
        """Validate configuration."""
        if self.min_anchors < 1:
            raise ConfigurationError(f"min_anchors must be >= 1, got {self.min_anchors}")


class MultilaterationPipeline:
    """
    Per-session pipeline turning range vectors into position estimates.

    Pipeline stages:
    1. Ranging filter (condition raw ranges, keep per-anchor state)
    2. Solver (candidate positions from the valid anchors)
    3. Robust filter (drop outlier candidates)
    4. Weighing + weighted centroid (final estimate)
    5. Location filter (optional temporal smoothing of the estimate)

    Not thread-safe: the ranging filter carries session state.
    """

    def __init__(
        self,
        anchors: Sequence[Point],
        solver: CandidateSolver,
        ranging_filter: RangingFilter,
        weigher: Weigher,
        config: Optional[PipelineConfig] = None,
        location_filter: Optional[LocationFilter] = None,
    ):
        """
        Initialize pipeline.

        Args:
            anchors: Anchor positions; fixes the range vector length
            solver: External candidate solver
            ranging_filter: Ranging filter owned by this session
            weigher: Weigher for the surviving candidates
            config: Pipeline configuration (uses defaults if None)
            location_filter: Smoother for final positions, or None
        """
        if not anchors:
            raise ConfigurationError("Pipeline needs at least one anchor")

        self.anchors = list(anchors)
        self.solver = solver
        self.ranging_filter = ranging_filter
        self.weigher = weigher
        self.location_filter = location_filter
        self.config = config or PipelineConfig()
        self.robust_filter = RobustFilter() if self.config.apply_robust_filter else None
        self.metrics = get_metrics()

        logger.info(
            "Pipeline ready: %d anchors, %s, %s",
            len(self.anchors), self.ranging_filter.name, self.weigher.name
        )

    def process(
        self,
        measured: Sequence[float],
        real: Optional[Sequence[float]] = None,
        timestamp: int = -1,
    ) -> PositionEstimate:
        """
        Process one epoch of range readings.

        Args:
            measured: Measured distance per anchor (m), FAILED if failed
            real: Ground-truth distances for simulation filters, or None
            timestamp: Epoch timestamp (ms), -1 if unavailable

        Returns:
            PositionEstimate (FIX or NO_FIX)

        Raises:
            UsageError: measured does not have one entry per anchor
        """
        self.metrics.increment('pipeline_attempts')

        if len(measured) != len(self.anchors):
            self.metrics.increment_drop('anchor_count_mismatch')
            raise UsageError(
                f"Expected {len(self.anchors)} ranges, got {len(measured)}"
            )

        # Stage 1: Ranging filter
        filtered = self.ranging_filter.filter(measured, real, timestamp)

        indices = valid_indices(filtered)
        if len(indices) < self.config.min_anchors:
            self.metrics.increment_drop('insufficient_anchors')
            return self._no_fix(timestamp, indices)

        anchors = [self.anchors[i] for i in indices]
        ranges = [filtered[i] for i in indices]

        # Stage 2: External solver
        candidates = list(self.solver(anchors, ranges, self.config.solver_options))
        self.metrics.increment('candidates_in', len(candidates))
        if not candidates:
            self.metrics.increment_drop('no_candidates')
            return self._no_fix(timestamp, indices)

        # Stage 3: Robust filter
        survivors = candidates
        if self.robust_filter is not None:
            survivors = self.robust_filter.filter(candidates)
            rejected = len(candidates) - len(survivors)
            if rejected:
                self.metrics.increment_drop('candidate_outlier', rejected)
                logger.debug("t=%s: rejected %d/%d candidates", timestamp, rejected, len(candidates))

        if not survivors:
            return self._no_fix(timestamp, indices, len(candidates))

        # Stage 4: Weighted centroid
        weights = [self.weigher.weigh(p, anchors, ranges) for p in survivors]
        peak = max(weights)
        if not peak > 0.0 or not all(math.isfinite(w) for w in weights):
            # All weights zero: keep every survivor with equal weight
            logger.debug("t=%s: degenerate weights, using plain centroid", timestamp)
            position = Point.center_of_mass(survivors)
            weight_sum = 0.0
        else:
            position = Point.center_of_mass(survivors, weights)
            weight_sum = min(peak * math.fsum(w / peak for w in weights), sys.float_info.max)

        # Stage 5: Location filter
        if self.location_filter is not None:
            self.location_filter.add(position, timestamp)
            position = self.location_filter.get()

        residual = self._rms_residual(position, anchors, ranges)
        self.metrics.increment('pipeline_fixes')
        self.metrics.record_histogram('pipeline_residual_m', residual)

        return PositionEstimate(
            timestamp=timestamp,
            fix_type=FixType.FIX,
            position=position,
            anchor_indices=indices,
            num_candidates=len(candidates),
            num_rejected=len(candidates) - len(survivors),
            residual_m=residual,
            weight_sum=weight_sum,
        )

    def reset(self):
        """Reset session state (ranging and location filter history)."""
        self.ranging_filter.reset()
        if self.location_filter is not None:
            self.location_filter.reset()
        self.metrics.increment('pipeline_resets')

    def get_statistics(self) -> dict:
        """Get pipeline statistics."""
        return {
            'attempts': self.metrics.get_counter('pipeline_attempts'),
            'fixes': self.metrics.get_counter('pipeline_fixes'),
            'no_fixes': self.metrics.get_counter('pipeline_no_fix'),
            'candidates_in': self.metrics.get_counter('candidates_in'),
            'candidates_rejected': self.metrics.get_drop_count('candidate_outlier'),
            'resets': self.metrics.get_counter('pipeline_resets'),
        }

    def _no_fix(self, timestamp: int, indices: List[int], num_candidates: int = 0) -> PositionEstimate:
        if self.location_filter is not None:
            self.location_filter.add(None, timestamp)
        self.metrics.increment('pipeline_no_fix')
        return create_no_fix(timestamp, indices, num_candidates)

    @staticmethod
    def _rms_residual(position: Point, anchors: Sequence[Point], ranges: Sequence[float]) -> float:
        res = [r - position.distance_to(a) for a, r in zip(anchors, ranges)]
        sq = [e * e for e in res]
        return math.sqrt(math.fsum(sq) / len(sq))


def create_pipeline(
    anchors: Sequence[Point],
    solver: CandidateSolver,
    config: Optional[PipelineConfig] = None,
    ranging_filters: Optional[Registry[RangingFilter]] = None,
    weighers: Optional[Registry[Weigher]] = None,
    location_filters: Optional[Registry[LocationFilter]] = None,
) -> MultilaterationPipeline:
    """
    Build a pipeline whose stages are looked up by registry key.

    Args:
        anchors: Anchor positions
        solver: External candidate solver
        config: Pipeline configuration naming the stages
        ranging_filters: Ranging filter registry (built-ins if None)
        weighers: Weigher registry (built-ins if None)
        location_filters: Location filter registry (built-ins if None)

    Raises:
        KeyError: unknown ranging filter, weigher or location filter key
        ConfigurationError: invalid stage parameters
    """
    config = config or PipelineConfig()
    if ranging_filters is None:
        ranging_filters = create_ranging_filter_registry()
    if weighers is None:
        weighers = create_weigher_registry()
    if location_filters is None:
        location_filters = create_location_filter_registry()

    ranging_filter = ranging_filters.create(config.ranging_filter, **config.ranging_filter_params)
    weigher = weighers.create(config.weigher, **config.weigher_params)
    location_filter = None
    if config.location_filter is not None:
        location_filter = location_filters.create(
            config.location_filter, **config.location_filter_params
        )
    return MultilaterationPipeline(anchors, solver, ranging_filter, weigher, config, location_filter)


def create_default_pipeline(anchors: Sequence[Point], solver: CandidateSolver) -> MultilaterationPipeline:
    """Create a pipeline with the default median filter and gamma weigher."""
    return create_pipeline(anchors, solver)
