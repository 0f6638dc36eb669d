"""
Configuration for the simulation runner (scripts/simulate_session.py).
"""

# Ranging filter stage
RANGING_CONFIG = {
    "filter": "median",            # registry key: offset, median, savitzky_golay, error_simulation, hardware_profile
    "params": {
        "window_size": 5,          # samples kept per anchor
        "flush_limit": 7,          # consecutive failures before history is cleared
    },
}

# Candidate weighing stage
WEIGHTING_CONFIG = {
    "weigher": "gamma",            # registry key: gamma, gauss, mf, simple, simple2
    "params": {},                  # empty: model defaults
    "min_anchors": 3,              # valid ranges needed before solving
    "apply_robust_filter": True,   # reject outlier candidates
}

# Location filter stage
TRACKING_CONFIG = {
    "location_filter": None,       # registry key: mean, median, geometric_median, kalman; None disables
    "params": {},
}

# Synthetic session
SIMULATION_CONFIG = {
    "seed": 42,
    "epochs": 200,
    "epoch_interval_ms": 100,
    "anchors": [                   # (x, y) in metres
        (0.0, 0.0),
        (20.0, 0.0),
        (20.0, 15.0),
        (0.0, 15.0),
        (10.0, 30.0),
    ],
    "path": {                      # tag walks a straight line start -> end
        "start": (2.0, 2.0),
        "end": (18.0, 12.0),
    },
    "failure_probability": 0.05,   # chance a single reading is reported FAILED
    "noise": {                     # error_simulation filter parameters
        "los_mean_m": 0.90,
        "los_sdev_m": 0.56,
        "nlos_mean_m": 1.0,
        "nlos_threshold_m": 25.0,
        "nlos_probability": 0.2,
    },
}

# Logging
LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
