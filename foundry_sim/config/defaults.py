"""
Default Configuration Constants for foundry_sim

This module contains ALL default values used throughout the simulation.
This is the Single Source of Truth (SSOT) for default configuration.

IMPORTANT Import Policies:
    1. DO NOT use: from foundry_sim.config.defaults import *
       This causes namespace pollution and makes tracking difficult.

    2. DO use explicit imports:
       from foundry_sim.config.defaults import DEFAULT_CAPACITY, DEFAULT_STEP

    3. DO NOT define defaults elsewhere. All defaults must be in this file.
"""

# =============================================================================
# Crucible Defaults
# =============================================================================

# Crucible capacity (liters). Enforced at commit time only.
DEFAULT_CAPACITY = 5.0

# Room temperature (degC). New portions start here unless they carry
# a saved thermal state.
DEFAULT_AMBIENT_TEMP = 20.0

# Furnace dial range (degC). The setpoint is clamped into this range.
DEFAULT_SETPOINT_MIN = 200.0
DEFAULT_SETPOINT_MAX = 1000.0

# Furnace setpoint when a crucible is created (degC)
DEFAULT_INITIAL_SETPOINT = 200.0

# Volume tolerance for the capacity check (liters)
CAPACITY_TOLERANCE = 1e-9

# =============================================================================
# Thermal Defaults
# =============================================================================

# Heat-rate base coefficient (1/s). Multiplied by material heat sensitivity.
DEFAULT_HEAT_RATE_BASE = 0.25

# Integration scheme for the first-order temperature lag
# "exact": closed-form exponential approach (frame-rate independent)
# "clamped_euler": explicit Euler with k*dt clamped to 1
DEFAULT_THERMAL_INTEGRATOR = "exact"

# Cooling rate for a portion taken out of the crucible (1/s)
DEFAULT_OUTSIDE_COOLING_RATE = 0.15

# =============================================================================
# Phase Transition Defaults
# =============================================================================

# Margin above the melting point required before melt progress accrues (degC)
DEFAULT_MELT_HYSTERESIS = 10.0

# Margin below the melting point required before solidify progress accrues (degC)
DEFAULT_SOLIDIFY_HYSTERESIS = 10.0

# Global melt-time scale. 1 = normal; <1 faster; >1 slower
DEFAULT_GLOBAL_MELT_SCALE = 1.0

# Solidify-time scale. None means "same as the global melt scale"
DEFAULT_SOLIDIFY_SCALE = None

# Leak rate of progress accumulators while below threshold (seconds of
# progress lost per second)
DEFAULT_PROGRESS_DECAY_RATE = 0.2

# Lower bound on required melt/solidify time (seconds)
MIN_TRANSITION_SECONDS = 0.01

# =============================================================================
# Pour / Balancing Defaults
# =============================================================================

# Target volume of a standard pour (liters): one ingot
DEFAULT_TARGET_VOLUME = 1.0

# Quantization step for selections (liters)
DEFAULT_STEP = 0.1

# Smallest step accepted by the balancer (liters)
MIN_STEP = 1e-4

# Tolerance on selection sums and availability checks (liters)
DEFAULT_EPSILON = 0.0005

# Portions at or below this volume after a drain are removed (liters)
RESIDUAL_VOLUME = 1e-6

# =============================================================================
# Alloy Scoring
# =============================================================================

# Stat order used by every stat vector in the package
STAT_NAMES = ("workability", "sharpenability", "toughness", "density", "arcana")

# Linear score weights, in STAT_NAMES order (sum = 1.0)
SCORE_WEIGHTS = (0.28, 0.24, 0.28, 0.10, 0.10)

# Stat and score range
STAT_MIN = 0.0
STAT_MAX = 100.0

# Auto-naming thresholds (proportions)
DOMINANT_PROPORTION = 0.70
PAIR_PROPORTION = 0.30

# Score -> tier lower bounds (lower-inclusive, strictly ascending)
TIER_THRESHOLDS = (10.0, 25.0, 40.0, 55.0, 68.0, 78.0, 86.0, 93.0)

# Tolerance used when checking that normalized proportions sum to 1
PROPORTION_SUM_TOL = 1e-4
