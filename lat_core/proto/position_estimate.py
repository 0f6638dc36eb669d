"""
Position Estimate Output Schema.

Defines the output format of the multilateration pipeline: one final
position estimate per measurement epoch.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import IntEnum

from lat_core.proto.point import Point


class FixType(IntEnum):
    """Type of position fix."""
    
    NO_FIX = 0          # No valid solution this epoch
    FIX = 1             # 2D position from surviving candidates


@dataclass
class PositionEstimate:
    """
    Final position estimate for one measurement epoch.
    
    Attributes:
        timestamp: Epoch timestamp (ms), or -1 if unavailable
        fix_type: NO_FIX or FIX
        position: Estimated position (None for NO_FIX)
        anchor_indices: Indices of the anchors whose ranges were used
        num_candidates: Candidates produced by the solver
        num_rejected: Candidates dropped by the robust filter
        residual_m: RMS of (range - distance) over the anchors used (m)
        weight_sum: Sum of candidate weights used for aggregation
        
    Notes:
        - For NO_FIX, position is None and residual_m = 0
        - weight_sum == 0 means all weights were zero and the
          survivors were averaged with equal weight
    """
    
    timestamp: int
    fix_type: FixType
    position: Optional[Point]
    anchor_indices: List[int] = field(default_factory=list)
    num_candidates: int = 0
    num_rejected: int = 0
    residual_m: float = 0.0
    weight_sum: float = 0.0
    
    def __post_init__(self):
        """Validate position estimate."""
        if self.fix_type == FixType.FIX and self.position is None:
            raise ValueError("FIX estimate requires a position")
        
        if self.num_rejected > self.num_candidates:
            raise ValueError(
                f"Rejected {self.num_rejected} of only {self.num_candidates} candidates"
            )
        
        if self.residual_m < 0:
            raise ValueError(f"Residual cannot be negative: {self.residual_m}")
    
    @property
    def has_valid_fix(self) -> bool:
        """Check if this is a valid position fix (not NO_FIX)."""
        return self.fix_type != FixType.NO_FIX
    
    @property
    def num_anchors_used(self) -> int:
        return len(self.anchor_indices)
    
    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'timestamp': self.timestamp,
            'fix_type': self.fix_type.name,
            'position': self.position.as_tuple() if self.position else None,
            'anchor_indices': list(self.anchor_indices),
            'num_candidates': self.num_candidates,
            'num_rejected': self.num_rejected,
            'residual_m': self.residual_m,
            'weight_sum': self.weight_sum,
        }


def create_no_fix(
    timestamp: int,
    anchor_indices: Optional[List[int]] = None,
    num_candidates: int = 0,
) -> PositionEstimate:
    """
    Create a NO_FIX position estimate.
    
    Args:
        timestamp: Epoch timestamp
        anchor_indices: Anchors that had valid ranges (default: none)
        num_candidates: Candidates produced before failing (default: 0)
        
    Returns:
        PositionEstimate with NO_FIX
    """
    return PositionEstimate(
        timestamp=timestamp,
        fix_type=FixType.NO_FIX,
        position=None,
        anchor_indices=list(anchor_indices or []),
        num_candidates=num_candidates,
        num_rejected=num_candidates,
    )
