"""
图案匹配器
在候选直线中枚举组合，按线对约束验证，返回第一个匹配成功的图案
"""

import itertools
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .matcher_utils import MatchingHypothesis, flatten_candidate_lines, lines_disjoint
from ..core.parameters import DerivedTolerances, PairTolerance
from ..patterns.pattern_definition import PatternDefinition, PatternFamily, PatternLibrary
from ..solvers.geometry_utils import (
    check_in_frame,
    compute_angle_between,
    compute_line_distance,
    compute_shift,
    compute_slope,
    in_range,
    max_point_deviation,
    range_closeness,
)
from ..utils.data_structures import Dot, Line
from ..utils.exceptions import InvalidGeometry

logger = logging.getLogger(__name__)


def _order_fixed_triple(lines: Sequence[Line]) -> Tuple[Line, ...]:
    """按中点x坐标从左到右：left, diagonal, right"""
    return tuple(sorted(lines, key=lambda l: (l.midpoint[0], l.midpoint[1])))


def _order_n_line(lines: Sequence[Line]) -> Tuple[Line, ...]:
    """按起点y坐标从上到下"""
    return tuple(sorted(lines, key=lambda l: (l.start_point.y, l.start_point.x)))


ROLE_ORDERING = {
    PatternFamily.FIXED_TRIPLE: _order_fixed_triple,
    PatternFamily.N_LINE: _order_n_line,
}


def prepare_candidates(candidate_lines, derived: DerivedTolerances, dots: Sequence[Dot] = ()) -> List[Line]:
    """
    过滤候选直线

    退化、越界、角度超出 [min_theta, max_theta] 以及共线误差过大的直线被跳过。
    """
    min_theta, max_theta = derived.theta_range
    candidates = []
    for index, line in enumerate(flatten_candidate_lines(candidate_lines, dots)):
        try:
            line.validate()
            check_in_frame(line, derived.frame_size)
            slope = compute_slope(line)
            if not in_range(slope, min_theta, max_theta):
                raise InvalidGeometry(f"slope {np.degrees(slope):.2f} deg outside theta range")
            if derived.collinear_max_distance_px is not None:
                deviation = max_point_deviation(line)
                if deviation > derived.collinear_max_distance_px:
                    raise InvalidGeometry(f"point {deviation:.2f} px off the line")
        except InvalidGeometry as e:
            logger.debug(f"Skipping candidate line {index}: {e}")
            continue
        candidates.append(line)
    return candidates


def verify_pairs(lines: Sequence[Line], tolerances: Sequence[PairTolerance]) -> Optional[float]:
    """
    验证所有线对约束

    Args:
        lines: 按角色排序的直线
        tolerances: 该图案的线对容差

    Returns:
        goodness: 全部满足时返回平均接近程度，任一不满足返回 None
    """
    closeness = []
    for tolerance in tolerances:
        first, second = lines[tolerance.first], lines[tolerance.second]

        distance = compute_line_distance(first, second)
        if not in_range(distance, *tolerance.distance_px):
            return None
        closeness.append(range_closeness(distance, *tolerance.distance_px))

        angle = compute_angle_between(first, second)
        if not in_range(angle, *tolerance.angle_rad):
            return None
        closeness.append(range_closeness(angle, *tolerance.angle_rad))

        if tolerance.shift_px is not None:
            shift = compute_shift(first, second)
            if not in_range(shift, *tolerance.shift_px):
                return None
            closeness.append(range_closeness(shift, *tolerance.shift_px))

    return float(np.mean(closeness)) if closeness else 1.0


def find_best_hypothesis(pattern: PatternDefinition, candidates: Sequence[Line],
                         derived: DerivedTolerances) -> Optional[MatchingHypothesis]:
    """在候选直线中寻找该图案得分最高的分配"""
    if pattern.points_per_line:
        pool = [line for line in candidates if len(line) == pattern.points_per_line]
    else:
        pool = list(candidates)
    if len(pool) < pattern.line_count:
        return None

    order_roles = ROLE_ORDERING[pattern.family]
    tolerances = derived.pair_tolerances(pattern.pattern_id)

    best = None
    for combination in itertools.combinations(pool, pattern.line_count):
        if not lines_disjoint(combination):
            continue
        ordered = order_roles(combination)
        try:
            goodness = verify_pairs(ordered, tolerances)
        except InvalidGeometry as e:
            logger.debug(f"Skipping combination for pattern '{pattern.name}': {e}")
            continue
        if goodness is None:
            continue

        hypothesis = MatchingHypothesis(
            pattern=pattern,
            lines=ordered,
            intensity=float(sum(line.intensity for line in ordered)),
            goodness=goodness,
        )
        if hypothesis.is_better_than(best):
            best = hypothesis
    return best


def find_pattern(candidate_lines, library: PatternLibrary,
                 derived: DerivedTolerances, dots: Sequence[Dot] = ()) -> Optional[MatchingHypothesis]:
    """
    按图案库顺序匹配，第一个有可行组合的图案获胜

    图案之间不做全局比较，库应按从严格到宽松的顺序配置。
    """
    candidates = prepare_candidates(candidate_lines, derived, dots)
    if len(candidates) < library.min_line_count():
        logger.debug(f"Only {len(candidates)} valid candidate line(s), "
                     f"smallest pattern needs {library.min_line_count()}")
        return None

    for pattern in library:
        hypothesis = find_best_hypothesis(pattern, candidates, derived)
        if hypothesis is not None:
            return hypothesis
    return None
