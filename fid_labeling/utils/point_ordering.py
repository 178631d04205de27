"""
点排序工具
保证直线内点的顺序确定，标注结果可复现
"""

import math
from dataclasses import replace

from .data_structures import Line


def sort_right_to_left(line: Line) -> Line:
    """按x坐标降序排列直线上的点，x相同时保持原顺序"""
    points = sorted(line.points, key=lambda p: -p.x)
    return replace(line, points=points)


def sort_left_to_right(line: Line) -> Line:
    """按x坐标升序排列直线上的点，x相同时保持原顺序"""
    points = sorted(line.points, key=lambda p: p.x)
    return replace(line, points=points)


def sort_points_by_distance_from_start_point(line: Line) -> Line:
    """
    按到起点的距离升序排列

    sorted 是稳定排序，距离相同的点按原始索引排列，
    对已排序的直线再次调用结果不变。
    """
    line.validate()
    start = line.start_point
    points = sorted(line.points, key=lambda p: math.hypot(p.x - start.x, p.y - start.y))
    return replace(line, points=points)
