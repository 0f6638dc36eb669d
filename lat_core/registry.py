"""
Named factories for ranging filters, weighers and location filters.

Registries map a short key to a factory that builds a fresh instance from
keyword parameters, so sessions can be configured from plain dicts
(see config.py).

Usage:
    filters = create_ranging_filter_registry()
    rf = filters.create("median", window_size=7)

    weighers = create_weigher_registry()
    w = weighers.create("gauss", sdev_m=2.0)
"""

from typing import Callable, Dict, Generic, List, TypeVar
import logging

from lat_core.errors import ConfigurationError
from lat_core.ranging import (
    RangingFilter,
    OffsetCorrectionRangingFilter, OffsetCorrectionConfig,
    MedianBasedRangingFilter, MedianFilterConfig,
    SavitzkyGolayBasedRangingFilter, SavitzkyGolayConfig,
    ErrorSimulationRangingFilter, ErrorSimulationConfig,
    HardwareProfileRangingFilter, HardwareProfileConfig,
)
from lat_core.tracking import (
    LocationFilter,
    LocationWindowConfig,
    MeanLocationFilter,
    MedianLocationFilter,
    GeometricMedianLocationFilter,
    KalmanLocationFilter, KalmanLocationConfig,
)
from lat_core.weighting import (
    Weigher,
    GammaWeigher, GammaWeigherConfig,
    GaussWeigher, GaussWeigherConfig,
    MFWeigher, MFWeigherConfig,
    SimpleWeigher, SimpleWeigher2,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Registry(Generic[T]):
    """
    Key -> factory mapping.

    Registering an existing key raises ConfigurationError; creating an
    unknown key raises KeyError. Keys keep registration order.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._factories: Dict[str, Callable[..., T]] = {}

    def register(self, key: str, factory: Callable[..., T]):
        if key in self._factories:
            raise ConfigurationError(f"{self.kind} '{key}' already registered")
        self._factories[key] = factory

    def create(self, key: str, **params) -> T:
        """
        Build a new instance.

        Raises:
            KeyError: key is not registered
            ConfigurationError: params rejected by the factory
        """
        if key not in self._factories:
            raise KeyError(f"Unknown {self.kind} '{key}' (known: {', '.join(self.keys())})")
        try:
            instance = self._factories[key](**params)
        except TypeError as e:
            raise ConfigurationError(f"{self.kind} '{key}': {e}") from e
        logger.debug("Created %s '%s': %s", self.kind, key, instance)
        return instance

    def keys(self) -> List[str]:
        return list(self._factories)

    def __contains__(self, key: str) -> bool:
        return key in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def _configured(filter_cls, config_cls):
    def factory(**params):
        return filter_cls(config_cls(**params))
    return factory


def _unconfigured(weigher_cls):
    def factory(**params):
        weigher = weigher_cls()
        weigher.configure(**params)
        return weigher
    return factory


def create_ranging_filter_registry() -> Registry[RangingFilter]:
    """Registry holding every built-in ranging filter."""
    registry: Registry[RangingFilter] = Registry("ranging filter")
    registry.register("offset", _configured(OffsetCorrectionRangingFilter, OffsetCorrectionConfig))
    registry.register("median", _configured(MedianBasedRangingFilter, MedianFilterConfig))
    registry.register("savitzky_golay", _configured(SavitzkyGolayBasedRangingFilter, SavitzkyGolayConfig))
    registry.register("error_simulation", _configured(ErrorSimulationRangingFilter, ErrorSimulationConfig))
    registry.register("hardware_profile", _configured(HardwareProfileRangingFilter, HardwareProfileConfig))
    return registry


def create_weigher_registry() -> Registry[Weigher]:
    """Registry holding every built-in weigher."""
    registry: Registry[Weigher] = Registry("weigher")
    registry.register("gamma", _configured(GammaWeigher, GammaWeigherConfig))
    registry.register("gauss", _configured(GaussWeigher, GaussWeigherConfig))
    registry.register("mf", _configured(MFWeigher, MFWeigherConfig))
    registry.register("simple", _unconfigured(SimpleWeigher))
    registry.register("simple2", _unconfigured(SimpleWeigher2))
    return registry


def create_location_filter_registry() -> Registry[LocationFilter]:
    """Registry holding every built-in location filter."""
    registry: Registry[LocationFilter] = Registry("location filter")
    registry.register("mean", _configured(MeanLocationFilter, LocationWindowConfig))
    registry.register("median", _configured(MedianLocationFilter, LocationWindowConfig))
    registry.register("geometric_median", _configured(GeometricMedianLocationFilter, LocationWindowConfig))
    registry.register("kalman", _configured(KalmanLocationFilter, KalmanLocationConfig))
    return registry
