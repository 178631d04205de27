"""
结果组装
图案确定后，按图案族的规则为每个点分配图案号与导线号
"""

from typing import List, Sequence

from ..patterns.pattern_definition import PatternDefinition, PatternFamily
from ..utils.data_structures import Line, LabelingResult
from ..utils.point_ordering import (
    sort_left_to_right,
    sort_points_by_distance_from_start_point,
    sort_right_to_left,
)

POINT_ORDERING = {
    'start_point': sort_points_by_distance_from_start_point,
    'left_to_right': sort_left_to_right,
    'right_to_left': sort_right_to_left,
}


def _order_points(line: Line, pattern: PatternDefinition) -> Line:
    return POINT_ORDERING[pattern.point_order](line)


def update_fixed_triple_results(pattern: PatternDefinition, left: Line, diagonal: Line,
                                right: Line) -> List[LabelingResult]:
    """
    三线图案的结果：导线号直接来自角色

    Args:
        pattern: 获胜的图案
        left: 最左侧的直线
        diagonal: 斜线
        right: 最右侧的直线

    Returns:
        results: 标注结果，按 left, diagonal, right 顺序
    """
    results = []
    for wire_id, line in enumerate((left, diagonal, right)):
        wire_name = pattern.wire_name(wire_id)
        for dot in _order_points(line, pattern).points:
            results.append(LabelingResult(pattern.pattern_id, wire_id, dot.x, dot.y, wire_name))
    return results


def update_n_line_results(pattern: PatternDefinition, result_lines: Sequence[Line]) -> List[LabelingResult]:
    """
    N线图案的结果

    Args:
        pattern: 获胜的图案
        result_lines: 按起点y坐标升序排列的直线（最上方的在前）

    Returns:
        results: 标注结果；图案区分线上每个点时导线号为 线号*每线点数+点号，否则为线号
    """
    results = []
    for line_index, line in enumerate(result_lines):
        for point_index, dot in enumerate(_order_points(line, pattern).points):
            if pattern.points_per_line:
                wire_id = line_index * pattern.points_per_line + point_index
            else:
                wire_id = line_index
            results.append(LabelingResult(pattern.pattern_id, wire_id, dot.x, dot.y,
                                          pattern.wire_name(wire_id)))
    return results


def assemble_results(pattern: PatternDefinition, lines: Sequence[Line]) -> List[LabelingResult]:
    """按图案族分派"""
    if pattern.family == PatternFamily.FIXED_TRIPLE:
        left, diagonal, right = lines
        return update_fixed_triple_results(pattern, left, diagonal, right)
    return update_n_line_results(pattern, lines)
