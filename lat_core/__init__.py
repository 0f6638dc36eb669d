"""
Lateration Core Package.

Measurement-processing and estimate-refinement pipeline for indoor
multilateration: ranging filters, noise synthesis, candidate weighting and
robust outlier rejection.

Package structure:
- proto: Point, range vectors, position estimate schema
- distribution: Pseudorandom Normal/Exponential/Gamma sampling
- errormodel: Hardware ranging error models
- ranging: Per-anchor ranging filters
- weighting: Candidate position weighers
- localization: Robust filter and multilateration pipeline
- metrics: Diagnostics, counters, histograms
"""

__version__ = "0.1.0"
__author__ = "Lateration Core Team"
