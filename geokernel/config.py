"""Process-wide tunables for the geometry kernel."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class KernelConfig:
    """Tolerances, caps and sampling densities shared by the kernel modules."""

    # propagation
    max_propagation_steps: int = 1000

    # constructions
    construction_offset: float = 50.0
    right_angle_tolerance: float = 1.5

    # measurements: world distance per displayed unit, and label lift
    pixels_per_unit: float = 50.0
    label_offset_y: float = -20.0
    measurement_precision: int = 2

    # snapping
    snap_threshold: float = 10.0
    segment_clamp_margin: float = 0.01
    min_center_distance: float = 0.1
    curve_samples: int = 64
    ellipse_samples: int = 720
    function_line_samples: int = 40
    bisection_iterations: int = 10
    function_window_factor: float = 4.0


_KERNEL_CONFIG = KernelConfig()


def get_kernel_config() -> KernelConfig:
    return copy.deepcopy(_KERNEL_CONFIG)


def set_kernel_config(config: KernelConfig) -> None:
    global _KERNEL_CONFIG
    _KERNEL_CONFIG = copy.deepcopy(config)


def resolve_config(config: "KernelConfig | None") -> KernelConfig:
    """Return ``config`` when given, otherwise a copy of the process default."""

    return config if config is not None else get_kernel_config()


__all__ = [
    "KernelConfig",
    "get_kernel_config",
    "set_kernel_config",
    "resolve_config",
]
