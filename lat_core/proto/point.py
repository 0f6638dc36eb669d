"""
2D Point value type.

Immutable (x, y) coordinate used for anchors and candidate positions.
"""

from dataclasses import dataclass
from typing import Sequence, Optional
import math


@dataclass(frozen=True)
class Point:
    """
    Immutable 2D point.
    
    Attributes:
        x: X coordinate (m)
        y: Y coordinate (m)
    """
    
    x: float
    y: float
    
    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)
    
    def as_tuple(self):
        return (self.x, self.y)
    
    @staticmethod
    def center_of_mass(
        points: Sequence["Point"],
        weights: Optional[Sequence[float]] = None
    ) -> Optional["Point"]:
        """
        Compute the weighted center of mass of a set of points.
        
        Args:
            points: Points to average
            weights: Weight per point (equal weights if None)
            
        Returns:
            Center of mass, or None if points is empty or weights sum to 0
        """
        if not points:
            return None
        
        if weights is None:
            weights = [1.0] * len(points)
        
        # Scale by the largest weight so sums stay finite for huge weights
        peak = max(weights)
        if not peak > 0.0:
            return None
        scaled = [w / peak for w in weights]
        
        total = math.fsum(scaled)
        if total <= 0.0:
            return None
        
        x = math.fsum(w * p.x for p, w in zip(points, scaled)) / total
        y = math.fsum(w * p.y for p, w in zip(points, scaled)) / total
        return Point(x, y)
    
    def __str__(self) -> str:
        return f"({self.x:.3f}, {self.y:.3f})"
