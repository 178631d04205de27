"""
匹配器工具函数和数据结构
"""

import logging
from dataclasses import dataclass
from typing import Tuple, Iterable, Iterator, Sequence

import numpy as np

from ..patterns.pattern_definition import PatternDefinition
from ..utils.data_structures import Dot, Line
from ..utils.exceptions import InvalidGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchingHypothesis:
    """候选直线到图案角色的一种分配（仅在一次匹配中存在）"""
    pattern: PatternDefinition
    lines: Tuple[Line, ...]     # 按角色顺序
    intensity: float            # 各直线强度之和
    goodness: float             # 与各容差区间中心的平均接近程度 [0, 1]

    def score(self) -> Tuple[float, float]:
        return (self.intensity, self.goodness)

    def is_better_than(self, other: 'MatchingHypothesis') -> bool:
        """严格更优才替换，得分相同时保留先枚举到的"""
        return other is None or self.score() > other.score()


def flatten_candidate_lines(candidates: Iterable, dots: Sequence[Dot] = ()) -> Iterator[Line]:
    """
    将直线检测器的输出展开为直线序列

    每一项可以是 Line、点索引列表、点列表（Dot 或 (x, y[, intensity]) 坐标），
    或以上任一形式的分组（按点数分组的输出）。提供 dots 时，分组中的整数序列视为点索引，
    否则视为坐标。无法构建的项被跳过。
    """
    for index, item in enumerate(candidates):
        if isinstance(item, Line):
            yield item
            continue
        if isinstance(item, (str, bytes)):
            logger.debug(f"Skipping candidate line {index}: unexpected text {item!r}")
            continue
        try:
            item = list(item)
        except TypeError:
            logger.debug(f"Skipping candidate line {index}: {type(item).__name__} is not a sequence")
            continue
        if item and not _is_index_line(item) and not all(_is_point(v, dots) for v in item):
            yield from flatten_candidate_lines(item, dots)
            continue
        try:
            yield _build_line(item, dots)
        except InvalidGeometry as e:
            logger.debug(f"Skipping candidate line {index}: {e}")


def _is_integer(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return _is_integer(value) or isinstance(value, (float, np.floating))


def _is_index_line(item: list) -> bool:
    return all(_is_integer(v) for v in item)


def _is_point(value, dots: Sequence[Dot]) -> bool:
    """Dot 或长度为2/3的数值序列"""
    if isinstance(value, Dot):
        return True
    if isinstance(value, (str, bytes)):
        return False
    try:
        values = list(value)
    except TypeError:
        return False
    if not 2 <= len(values) <= 3 or not all(_is_number(v) for v in values):
        return False
    # 提供了点列表时，整数序列是按点数分组的索引直线
    return not (len(dots) > 0 and all(_is_integer(v) for v in values))


def _to_dot(value) -> Dot:
    if isinstance(value, Dot):
        return value
    return Dot(*(float(v) for v in value))


def _build_line(item: list, dots: Sequence[Dot]) -> Line:
    try:
        if _is_index_line(item):
            return Line.from_indices([int(v) for v in item], dots)
        return Line([_to_dot(v) for v in item])
    except (TypeError, ValueError, np.linalg.LinAlgError) as e:
        raise InvalidGeometry(f"malformed candidate line ({e})")


def lines_disjoint(lines: Sequence[Line]) -> bool:
    """同一假设中的直线不能共享点"""
    seen = set()
    for line in lines:
        keys = line.dot_keys()
        if seen & keys:
            return False
        seen |= keys
    return True
