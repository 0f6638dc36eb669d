#!/usr/bin/env python3
"""
Synthetic session runner.

Walks a tag along a straight line through the anchor field, synthesizes
noisy range readings from ground truth, and runs them through a
multilateration pipeline. Prints the position error statistics and the
metrics summary.

    python scripts/simulate_session.py --epochs 500 --filter savitzky_golay
"""

import sys
import os
import argparse
import itertools
import logging
from typing import List, Mapping, Sequence

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np

import config
from lat_core.distribution import DistributionSampler
from lat_core.localization import PipelineConfig, create_pipeline
from lat_core.metrics import get_metrics
from lat_core.proto import FAILED, Point
from lat_core.registry import create_ranging_filter_registry
from lat_core.weighting import WelfordStandardDeviation

logger = logging.getLogger("simulate_session")


def subset_trilateration(
    anchors: Sequence[Point],
    ranges: Sequence[float],
    options: Mapping,
) -> List[Point]:
    """
    One linearized 2D trilateration per 3-anchor subset.

    Subtracting the first circle equation from the other two gives a 2x2
    linear system; near-singular subsets are skipped.
    """
    min_det = options.get("min_det", 1e-10)
    candidates = []
    for i, j, k in itertools.combinations(range(len(anchors)), 3):
        p0, p1, p2 = anchors[i], anchors[j], anchors[k]
        r0, r1, r2 = ranges[i], ranges[j], ranges[k]

        a = np.array([
            [2 * (p1.x - p0.x), 2 * (p1.y - p0.y)],
            [2 * (p2.x - p0.x), 2 * (p2.y - p0.y)],
        ])
        b = np.array([
            r0 ** 2 - r1 ** 2 - p0.x ** 2 + p1.x ** 2 - p0.y ** 2 + p1.y ** 2,
            r0 ** 2 - r2 ** 2 - p0.x ** 2 + p2.x ** 2 - p0.y ** 2 + p2.y ** 2,
        ])
        if abs(np.linalg.det(a)) < min_det:
            continue
        x, y = np.linalg.solve(a, b)
        candidates.append(Point(float(x), float(y)))
    return candidates


def true_path(start: Point, end: Point, epochs: int) -> List[Point]:
    """Evenly spaced positions from start to end."""
    if epochs == 1:
        return [start]
    return [
        Point(start.x + (end.x - start.x) * t, start.y + (end.y - start.y) * t)
        for t in np.linspace(0.0, 1.0, epochs)
    ]


def parse_args():
    parser = argparse.ArgumentParser(description='Synthetic multilateration session')
    parser.add_argument('--epochs', '-n', type=int, default=None,
                        help='number of epochs')
    parser.add_argument('--seed', '-s', type=int, default=None,
                        help='random seed')
    parser.add_argument('--filter', '-f', type=str, default=None,
                        help='ranging filter registry key')
    parser.add_argument('--weigher', '-w', type=str, default=None,
                        help='weigher registry key')
    parser.add_argument('--location-filter', '-l', type=str, default=None,
                        help='location filter registry key (smooths final positions)')
    parser.add_argument('--noise', type=str, default='error_simulation',
                        choices=['error_simulation', 'hardware_profile'],
                        help='noise source applied to ground truth')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='enable debug logging')
    return parser.parse_args()


def main():
    args = parse_args()

    level = logging.DEBUG if args.debug else getattr(logging, config.LOGGING_CONFIG["level"])
    logging.basicConfig(level=level, format=config.LOGGING_CONFIG["format"])

    sim = config.SIMULATION_CONFIG
    seed = args.seed if args.seed is not None else sim["seed"]
    epochs = args.epochs or sim["epochs"]

    anchors = [Point(x, y) for x, y in sim["anchors"]]
    path = true_path(Point(*sim["path"]["start"]), Point(*sim["path"]["end"]), epochs)

    if args.noise == 'error_simulation':
        noise = create_ranging_filter_registry().create('error_simulation', seed=seed, **sim["noise"])
    else:
        noise = create_ranging_filter_registry().create('hardware_profile', seed=seed)
    failures = DistributionSampler(seed=seed + 1)

    pipeline_config = PipelineConfig(
        ranging_filter=args.filter or config.RANGING_CONFIG["filter"],
        ranging_filter_params=config.RANGING_CONFIG["params"] if not args.filter else {},
        weigher=args.weigher or config.WEIGHTING_CONFIG["weigher"],
        weigher_params=config.WEIGHTING_CONFIG["params"] if not args.weigher else {},
        min_anchors=config.WEIGHTING_CONFIG["min_anchors"],
        apply_robust_filter=config.WEIGHTING_CONFIG["apply_robust_filter"],
        location_filter=args.location_filter or config.TRACKING_CONFIG["location_filter"],
        location_filter_params=config.TRACKING_CONFIG["params"] if not args.location_filter else {},
    )
    pipeline = create_pipeline(anchors, subset_trilateration, pipeline_config)

    logger.info("Running %d epochs with %s -> %s", epochs, noise.name, pipeline.ranging_filter.name)

    error_stats = WelfordStandardDeviation()
    for epoch, position in enumerate(path):
        timestamp = epoch * sim["epoch_interval_ms"]
        real = [position.distance_to(a) for a in anchors]
        measured = noise.filter(real, real, timestamp)
        measured = [
            FAILED if failures.next_double() < sim["failure_probability"] else d
            for d in measured
        ]

        estimate = pipeline.process(measured, timestamp=timestamp)
        if estimate.has_valid_fix:
            error = estimate.position.distance_to(position)
            error_stats.add_sample(error)
            logger.debug("t=%d true=%s est=%s err=%.2f m", timestamp, position, estimate.position, error)

    print("\n" + "=" * 60)
    print(f"  {pipeline.ranging_filter.name} / {pipeline.weigher.name}")
    print("=" * 60)
    stats = pipeline.get_statistics()
    print(f"Fixes:            {stats['fixes']}/{stats['attempts']}")
    print(f"Mean error:       {error_stats.mean():.3f} m")
    print(f"Error std dev:    {error_stats.standard_deviation():.3f} m")
    print(get_metrics().format_summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
