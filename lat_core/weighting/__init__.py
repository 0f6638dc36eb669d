"""
Weighting Module: Candidate position weighers.

Key classes:
- Weigher: common contract (weigh / configure)
- GammaWeigher, GaussWeigher: residual density models
- MFWeigher: fuzzy membership consistency
- SimpleWeigher, SimpleWeigher2: distance/range ratio scores
"""

from .base import Weigher, ConfigurableWeigher, EPSILON, MAX_LOG_WEIGHT
from .statistics import PreciseStandardDeviation, WelfordStandardDeviation
from .gamma_weigher import GammaWeigher, GammaWeigherConfig
from .gauss_weigher import GaussWeigher, GaussWeigherConfig
from .mf_weigher import MFWeigher, MFWeigherConfig
from .simple_weigher import SimpleWeigher, SimpleWeigher2

__all__ = [
    'Weigher',
    'ConfigurableWeigher',
    'EPSILON',
    'MAX_LOG_WEIGHT',
    'PreciseStandardDeviation',
    'WelfordStandardDeviation',
    'GammaWeigher',
    'GammaWeigherConfig',
    'GaussWeigher',
    'GaussWeigherConfig',
    'MFWeigher',
    'MFWeigherConfig',
    'SimpleWeigher',
    'SimpleWeigher2',
]
