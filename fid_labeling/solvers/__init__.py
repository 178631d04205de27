"""
几何求解模块
"""

from .geometry_utils import (
    compute_distance_point_line,
    compute_shift,
    compute_slope,
    compute_angle_between,
    compute_line_distance,
)

__all__ = [
    'compute_distance_point_line',
    'compute_shift',
    'compute_slope',
    'compute_angle_between',
    'compute_line_distance'
]
