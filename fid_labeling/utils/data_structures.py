"""
数据结构定义
定义模体识别中使用的点、直线与标注结果
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional, Tuple, List, Dict, Any, Sequence, FrozenSet

from .exceptions import InvalidGeometry

# 判断方向分量是否为0的容差
_DIRECTION_EPSILON = 1e-9


@dataclass(frozen=True)
class Dot:
    """分割得到的候选亮点（图像坐标，像素）"""
    x: float
    y: float
    intensity: float = 0.0

    @property
    def key(self) -> Tuple[float, float]:
        """位置即身份"""
        return (self.x, self.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)


def _principal_extremes(points: Sequence[Dot]) -> Tuple[Dot, Dot]:
    """沿主方向投影，返回两端的点（起点在 +x 方向的反侧）"""
    coords = np.array([[p.x, p.y] for p in points], dtype=float)
    centred = coords - coords.mean(axis=0)
    _, _, vt = np.linalg.svd(centred, full_matrices=False)
    direction = vt[0]

    # 方向归一化：指向 +x，竖直线指向 +y
    if direction[0] < -_DIRECTION_EPSILON or \
            (abs(direction[0]) <= _DIRECTION_EPSILON and direction[1] < 0):
        direction = -direction

    projections = centred @ direction
    return points[int(np.argmin(projections))], points[int(np.argmax(projections))]


@dataclass
class Line:
    """共线点组成的直线候选"""
    points: List[Dot]
    start_point: Optional[Dot] = None
    end_point: Optional[Dot] = None
    intensity: Optional[float] = None

    def __post_init__(self):
        self.points = list(self.points)
        if self.intensity is None:
            self.intensity = float(sum(p.intensity for p in self.points))
        if (self.start_point is None or self.end_point is None) and not self.is_degenerate():
            self.start_point, self.end_point = _principal_extremes(self.points)

    @classmethod
    def from_indices(cls, indices: Sequence[int], dots: Sequence[Dot]) -> 'Line':
        """根据点索引构建直线（直线检测器的输出格式）"""
        points = []
        for index in indices:
            if not 0 <= index < len(dots):
                raise InvalidGeometry(f"Dot index {index} out of range (0..{len(dots) - 1})")
            points.append(dots[index])
        return cls(points)

    def is_degenerate(self) -> bool:
        """少于2个点或所有点重合"""
        if len(self.points) < 2:
            return True
        return len({p.key for p in self.points}) < 2

    def validate(self):
        """退化直线抛出 InvalidGeometry"""
        if len(self.points) < 2:
            raise InvalidGeometry(f"Line has {len(self.points)} point(s), at least 2 required")
        if self.start_point is None or self.end_point is None:
            raise InvalidGeometry("Line endpoints are undefined")
        if self.start_point.key == self.end_point.key:
            raise InvalidGeometry(f"Line endpoints coincide at {self.start_point.key}")

    @property
    def direction(self) -> np.ndarray:
        """起点指向终点的单位向量"""
        self.validate()
        vector = self.end_point.as_array() - self.start_point.as_array()
        return vector / np.linalg.norm(vector)

    @property
    def midpoint(self) -> np.ndarray:
        self.validate()
        return (self.start_point.as_array() + self.end_point.as_array()) / 2.0

    @property
    def length(self) -> float:
        self.validate()
        return float(np.linalg.norm(self.end_point.as_array() - self.start_point.as_array()))

    def dot_keys(self) -> FrozenSet[Tuple[float, float]]:
        return frozenset(p.key for p in self.points)

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class LabelingResult:
    """单个点的标注结果"""
    pattern_id: int
    wire_id: int
    x: float
    y: float
    wire_name: Optional[str] = None

    def as_tuple(self) -> Tuple[int, int, float, float]:
        return (self.pattern_id, self.wire_id, self.x, self.y)


@dataclass
class LabelingOutcome:
    """一次匹配的输出"""
    dots_found: bool = False
    pattern_id: Optional[int] = None
    pattern_name: Optional[str] = None
    results: List[LabelingResult] = field(default_factory=list)
    found_lines: List[Line] = field(default_factory=list)
    pattern_intensity: float = 0.0
    processing_time: float = 0.0  # ms
    metadata: Dict[str, Any] = field(default_factory=dict)

    def coordinates(self) -> np.ndarray:
        """已标注点的坐标 [N, 2]，顺序与 results 一致"""
        if not self.results:
            return np.empty((0, 2), dtype=float)
        return np.array([[r.x, r.y] for r in self.results], dtype=float)
