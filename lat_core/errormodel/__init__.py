"""
Error Model Module: Ranging error collaborators.

Error models turn a true distance into a distance offset. The
hardware-profile ranging filter consumes them through
`ErrorModel.offset(true_distance, p_nlos)`.
"""

from .base import ErrorModel, ErrorModelConfig
from .models import (
    NanopanErrorModel,
    LosErrorModel,
    LosNlosErrorModel,
    GammaErrorModel,
    NoErrorModel,
    UniformErrorModel,
    LosNlosUniformErrorModel,
    LosNlosGmmErrorModel,
    create_hardware_profile_model,
)

__all__ = [
    'ErrorModel',
    'ErrorModelConfig',
    'NanopanErrorModel',
    'LosErrorModel',
    'LosNlosErrorModel',
    'GammaErrorModel',
    'NoErrorModel',
    'UniformErrorModel',
    'LosNlosUniformErrorModel',
    'LosNlosGmmErrorModel',
    'create_hardware_profile_model',
]
