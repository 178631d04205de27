"""
几何工具函数
包含点、直线之间的距离/角度/偏移计算
"""

import math
import numpy as np

from ..utils.data_structures import Dot, Line
from ..utils.exceptions import InvalidGeometry

HALF_PI = math.pi / 2.0


def normalize_angle(theta: float) -> float:
    """将无向直线的角度归一化到 [-pi/2, pi/2)"""
    return (theta + HALF_PI) % math.pi - HALF_PI


def compute_distance_point_line(dot: Dot, line: Line) -> float:
    """
    计算点到直线（通过直线两端点）的垂直距离

    Args:
        dot: 待测点
        line: 直线

    Returns:
        distance: 非负距离(像素)
    """
    line.validate()
    start = line.start_point.as_array()
    vector = line.end_point.as_array() - start
    offset = dot.as_array() - start
    cross = vector[0] * offset[1] - vector[1] * offset[0]
    return float(abs(cross) / math.hypot(vector[0], vector[1]))


def compute_shift(line1: Line, line2: Line) -> float:
    """
    计算两条直线中点之间的有符号偏移

    偏移沿 line1 的方向测量，line2 的中点在 line1 中点前方时为正。
    """
    offset = line2.midpoint - line1.midpoint
    return float(np.dot(offset, line1.direction))


def compute_slope(line: Line) -> float:
    """直线相对于x轴的角度(弧度)，归一化到 [-pi/2, pi/2)"""
    line.validate()
    dx = line.end_point.x - line.start_point.x
    dy = line.end_point.y - line.start_point.y
    return normalize_angle(math.atan2(dy, dx))


def compute_angle_between(line1: Line, line2: Line) -> float:
    """两条无向直线之间的夹角，范围 [0, pi/2]"""
    difference = abs(compute_slope(line1) - compute_slope(line2)) % math.pi
    return min(difference, math.pi - difference)


def compute_line_distance(line1: Line, line2: Line) -> float:
    """line2 中点到 line1 的垂直距离"""
    midpoint = line2.midpoint
    return compute_distance_point_line(Dot(float(midpoint[0]), float(midpoint[1])), line1)


def max_point_deviation(line: Line) -> float:
    """直线上各点到端点连线的最大距离"""
    line.validate()
    return max(compute_distance_point_line(p, line) for p in line.points)


def in_range(value: float, low: float, high: float) -> bool:
    """闭区间判断"""
    return low <= value <= high


def range_closeness(value: float, low: float, high: float) -> float:
    """值距离区间中心的接近程度：中心为1，边界为0"""
    half_width = (high - low) / 2.0
    if half_width <= 0:
        return 1.0
    centre = (high + low) / 2.0
    return max(0.0, 1.0 - abs(value - centre) / half_width)


def point_in_frame(dot: Dot, frame_size) -> bool:
    """frame_size 为 (宽, 高)；None 表示不检查"""
    if frame_size is None:
        return True
    width, height = frame_size
    return 0 <= dot.x <= width and 0 <= dot.y <= height


def check_in_frame(line: Line, frame_size):
    """越界的点抛出 InvalidGeometry"""
    for dot in line.points:
        if not point_in_frame(dot, frame_size):
            raise InvalidGeometry(f"Dot {dot.key} outside frame {tuple(frame_size)}")
