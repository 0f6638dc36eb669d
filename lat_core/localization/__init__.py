"""
Localization Module: Candidate refinement and the per-session pipeline.

Key classes:
- RobustFilter: median-distance outlier rejection over candidates
- MultilaterationPipeline: ranging filter -> solver -> robust filter -> weighted centroid
"""

from .quick_select import select
from .robust_filter import (
    RobustFilter,
    robust_filter,
    pair_index,
    pairwise_distances,
    median_threshold,
)
from .pipeline import (
    MultilaterationPipeline,
    PipelineConfig,
    CandidateSolver,
    create_pipeline,
    create_default_pipeline,
)

__all__ = [
    'select',
    'RobustFilter',
    'robust_filter',
    'pair_index',
    'pairwise_distances',
    'median_threshold',
    'MultilaterationPipeline',
    'PipelineConfig',
    'CandidateSolver',
    'create_pipeline',
    'create_default_pipeline',
]
