"""
Weigher contract.

A weigher scores a candidate position against the anchors and their
measured ranges:

    weight = weigher.weigh(position, anchors, ranges)

The score is non-negative and higher is better. 0.0 means the position is
inconsistent with at least one range under the weigher's model. Weighers
never raise during weighing; degenerate input yields a sentinel value so
aggregators can treat every result uniformly.

Weighing never mutates configuration, so a weigher may be shared between
threads. Configuration changes only through `configure(**params)`.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Sequence
import logging
import math
import sys

from lat_core.errors import ConfigurationError
from lat_core.proto.point import Point

logger = logging.getLogger(__name__)

# Smallest standard deviation / membership value considered non-zero
EPSILON = 2.0 ** -24

# Log-space ceiling so exp() of an accumulated log weight stays finite
MAX_LOG_WEIGHT = math.log(sys.float_info.max / 2.0)


class Weigher(ABC):
    """
    Base class for weighers.

    Subclasses implement `_weigh()`; `weigh()` screens out empty and
    mismatched inputs (weight 0.0) before delegating.
    """

    name = "Weigher"

    def weigh(
        self,
        position: Point,
        anchors: Sequence[Point],
        ranges: Sequence[float],
    ) -> float:
        """
        Weigh a candidate position.

        Args:
            position: Candidate position
            anchors: Anchor positions
            ranges: Measured distance to each anchor (m)

        Returns:
            Non-negative weight, 0.0 for degenerate input
        """
        if not anchors or len(anchors) != len(ranges):
            logger.debug(
                "%s: degenerate input (%d anchors, %d ranges)",
                self.name, len(anchors), len(ranges)
            )
            return 0.0
        return self._weigh(position, anchors, ranges)

    @abstractmethod
    def _weigh(self, position: Point, anchors: Sequence[Point], ranges: Sequence[float]) -> float:
        """Weigh a position (inputs already screened)."""

    def configure(self, **params):
        """
        Replace configuration parameters.

        Raises:
            ConfigurationError: unknown parameter, or weigher not configurable
        """
        if params:
            raise ConfigurationError(f"{self.name} has no parameters {sorted(params)}")

    def __repr__(self) -> str:
        return self.name


class ConfigurableWeigher(Weigher):
    """
    Weigher driven by a dataclass config.

    `configure()` builds a new config via dataclasses.replace (which
    re-runs validation) and then calls `_apply_config()` so subclasses can
    precompute constants.
    """

    def __init__(self, config):
        self.config = config
        self._apply_config()

    def configure(self, **params):
        try:
            new_config = replace(self.config, **params)
        except TypeError as e:
            raise ConfigurationError(f"{self.name}: {e}") from e
        self.config = new_config
        self._apply_config()
        logger.info("%s reconfigured: %s", self.name, self.config)

    def _apply_config(self):
        """Precompute constants from self.config."""
