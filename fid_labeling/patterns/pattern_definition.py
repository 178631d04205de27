"""
模体图案定义
描述模体的线数、线间距离/角度/偏移约束，以及图案库
"""

from collections import OrderedDict
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Any, Optional, Tuple, List, Iterator, Sequence

from ..utils.exceptions import ConfigurationError

Range = Tuple[float, float]

FIXED_TRIPLE_ROLES = ('left', 'diagonal', 'right')
POINT_ORDERS = ('start_point', 'left_to_right', 'right_to_left')


class PatternFamily(Enum):
    """图案族"""
    FIXED_TRIPLE = 'fixed_triple'  # 左线、斜线、右线
    N_LINE = 'n_line'              # N条平行线


@dataclass(frozen=True)
class PairConstraint:
    """两条直线（按角色索引）之间的约束，单位 mm / 度，闭区间"""
    first: int
    second: int
    distance_mm: Range
    angle_deg: Range
    shift_mm: Optional[Range] = None


@dataclass(frozen=True)
class PatternDefinition:
    """模体图案模板"""
    pattern_id: int
    name: str
    family: PatternFamily
    line_count: int
    pairs: Tuple[PairConstraint, ...]
    points_per_line: Optional[int] = None
    line_spacing_mm: Optional[Tuple[float, ...]] = None
    wire_names: Optional[Tuple[str, ...]] = None
    point_order: str = 'start_point'

    def role_names(self) -> Tuple[str, ...]:
        if self.family == PatternFamily.FIXED_TRIPLE:
            return FIXED_TRIPLE_ROLES
        return tuple(f"line_{i}" for i in range(self.line_count))

    def wire_count(self) -> int:
        """该图案输出的导线标号数量"""
        if self.family == PatternFamily.N_LINE and self.points_per_line:
            return self.line_count * self.points_per_line
        return self.line_count

    def wire_name(self, wire_id: int) -> str:
        if self.wire_names:
            return self.wire_names[wire_id]
        if self.family == PatternFamily.N_LINE and self.points_per_line:
            line_index, point_index = divmod(wire_id, self.points_per_line)
            return f"line_{line_index}:{point_index}"
        return self.role_names()[wire_id]

    @classmethod
    def from_config(cls, entry: Dict[str, Any]) -> 'PatternDefinition':
        """
        从配置字典解析图案定义

        Args:
            entry: PhantomDefinition.patterns 中的一项

        Returns:
            pattern: 图案定义
        """
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Pattern entry must be a mapping, got {type(entry).__name__}")

        pattern_id = _require(entry, 'id', 'pattern')
        if not isinstance(pattern_id, int) or isinstance(pattern_id, bool):
            raise ConfigurationError(f"Pattern id must be an integer, got {pattern_id!r}")
        name = str(entry.get('name', f"pattern_{pattern_id}"))
        context = f"pattern '{name}'"

        family_value = _require(entry, 'family', context)
        try:
            family = PatternFamily(family_value)
        except ValueError:
            choices = ', '.join(f.value for f in PatternFamily)
            raise ConfigurationError(f"{context}: unknown family '{family_value}' (expected one of {choices})")

        if family == PatternFamily.FIXED_TRIPLE:
            line_count = int(entry.get('line_count', 3))
            if line_count != 3:
                raise ConfigurationError(f"{context}: fixed_triple patterns have exactly 3 lines, got {line_count}")
        else:
            line_count = int(_require(entry, 'line_count', context))
            if line_count < 1:
                raise ConfigurationError(f"{context}: line_count must be positive, got {line_count}")

        points_per_line = entry.get('points_per_line')
        if points_per_line is not None:
            points_per_line = int(points_per_line)
            if points_per_line < 2:
                raise ConfigurationError(f"{context}: points_per_line must be at least 2, got {points_per_line}")

        point_order = entry.get('point_order', 'start_point')
        if point_order not in POINT_ORDERS:
            raise ConfigurationError(f"{context}: unknown point_order '{point_order}'")

        if family == PatternFamily.FIXED_TRIPLE:
            roles = FIXED_TRIPLE_ROLES
        else:
            roles = tuple(f"line_{i}" for i in range(line_count))

        line_spacing = None
        if 'line_spacing_mm' in entry:
            line_spacing = tuple(float(d) for d in entry['line_spacing_mm'])
            if len(line_spacing) != line_count - 1:
                raise ConfigurationError(
                    f"{context}: line_spacing_mm needs {line_count - 1} values, got {len(line_spacing)}")
            if any(d <= 0 for d in line_spacing):
                raise ConfigurationError(f"{context}: line_spacing_mm values must be positive")

        raw_pairs = entry.get('pairs')
        if raw_pairs:
            pairs = tuple(_parse_pair(p, roles, context) for p in raw_pairs)
        elif family == PatternFamily.N_LINE and line_spacing is not None:
            pairs = _derive_n_line_pairs(line_spacing)
        elif family == PatternFamily.N_LINE and line_count == 1:
            pairs = ()
        else:
            raise ConfigurationError(f"{context}: 'pairs' (or 'line_spacing_mm' for n_line) is required")

        seen = set()
        for pair in pairs:
            if (pair.first, pair.second) in seen:
                raise ConfigurationError(f"{context}: duplicated constraint for lines {pair.first}-{pair.second}")
            seen.add((pair.first, pair.second))

        pattern = cls(
            pattern_id=pattern_id,
            name=name,
            family=family,
            line_count=line_count,
            pairs=pairs,
            points_per_line=points_per_line,
            line_spacing_mm=line_spacing,
            point_order=point_order,
        )

        wire_names = entry.get('wire_names')
        if wire_names is not None:
            wire_names = tuple(str(w) for w in wire_names)
            if len(wire_names) != pattern.wire_count():
                raise ConfigurationError(
                    f"{context}: wire_names needs {pattern.wire_count()} entries, got {len(wire_names)}")
            pattern = replace(pattern, wire_names=wire_names)

        return pattern


def _require(entry: Dict[str, Any], key: str, context: str):
    if key not in entry or entry[key] is None:
        raise ConfigurationError(f"{context}: missing required field '{key}'")
    return entry[key]


def _parse_range(value, key: str, context: str) -> Range:
    try:
        low, high = (float(v) for v in value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{context}: '{key}' must be a [min, max] pair, got {value!r}")
    if low > high:
        raise ConfigurationError(f"{context}: '{key}' range is inverted ({low} > {high})")
    return (low, high)


def _resolve_role(value, roles: Sequence[str], context: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        if not 0 <= value < len(roles):
            raise ConfigurationError(f"{context}: line index {value} out of range")
        return value
    if value in roles:
        return roles.index(value)
    raise ConfigurationError(f"{context}: unknown line role {value!r} (expected one of {', '.join(roles)})")


def _parse_pair(raw: Dict[str, Any], roles: Sequence[str], context: str) -> PairConstraint:
    lines = _require(raw, 'lines', context)
    if len(lines) != 2:
        raise ConfigurationError(f"{context}: pair 'lines' must name exactly two lines")
    first, second = (_resolve_role(v, roles, context) for v in lines)
    if first == second:
        raise ConfigurationError(f"{context}: pair references line {first} twice")

    distance = _parse_range(_require(raw, 'distance_mm', context), 'distance_mm', context)
    if distance[0] < 0:
        raise ConfigurationError(f"{context}: distance_mm must be non-negative")
    angle = _parse_range(raw.get('angle_deg', [0.0, 0.0]), 'angle_deg', context)
    if angle[0] < 0 or angle[1] > 90:
        raise ConfigurationError(f"{context}: angle_deg must lie within [0, 90]")
    shift = raw.get('shift_mm')
    if shift is not None:
        shift = _parse_range(shift, 'shift_mm', context)

    return PairConstraint(first, second, distance, angle, shift)


def _derive_n_line_pairs(line_spacing: Tuple[float, ...]) -> Tuple[PairConstraint, ...]:
    """由相邻线间距推导所有线对的约束（平行，距离为间距之和）"""
    pairs = []
    line_count = len(line_spacing) + 1
    for i in range(line_count - 1):
        for j in range(i + 1, line_count):
            distance = sum(line_spacing[i:j])
            pairs.append(PairConstraint(i, j, (distance, distance), (0.0, 0.0)))
    return tuple(pairs)


class PatternLibrary:
    """有序的图案库，配置顺序即匹配优先级"""

    def __init__(self, patterns: Sequence[PatternDefinition] = ()):
        self._patterns: 'OrderedDict[int, PatternDefinition]' = OrderedDict()
        for pattern in patterns:
            if pattern.pattern_id in self._patterns:
                raise ConfigurationError(f"Duplicated pattern id {pattern.pattern_id}")
            self._patterns[pattern.pattern_id] = pattern

    @classmethod
    def from_config(cls, entries: List[Dict[str, Any]]) -> 'PatternLibrary':
        if not entries:
            raise ConfigurationError("PhantomDefinition.patterns must list at least one pattern")
        return cls([PatternDefinition.from_config(entry) for entry in entries])

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[PatternDefinition]:
        return iter(self._patterns.values())

    def __getitem__(self, pattern_id: int) -> PatternDefinition:
        return self._patterns[pattern_id]

    def __contains__(self, pattern_id) -> bool:
        return pattern_id in self._patterns

    def get(self, pattern_id: int, default=None) -> Optional[PatternDefinition]:
        return self._patterns.get(pattern_id, default)

    def ids(self) -> List[int]:
        return list(self._patterns.keys())

    def min_line_count(self) -> int:
        """最小图案所需的线数，空库返回0"""
        return min((p.line_count for p in self), default=0)
