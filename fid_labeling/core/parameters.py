"""
容差参数
一次匹配过程中不可变的参数快照，以及由其推导出的像素空间容差
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple

from ..patterns.pattern_definition import PatternFamily, PatternLibrary
from ..utils.exceptions import ConfigurationError

Range = Tuple[float, float]


@dataclass(frozen=True)
class ToleranceParameters:
    """容差参数（mm / 度 / 弧度）"""
    approximate_spacing_mm_per_pixel: float
    frame_size: Optional[Tuple[int, int]] = None
    max_line_pair_distance_error_percent: float = 10.0
    max_angle_difference_deg: float = 10.0  # 仅为兼容配置保留，匹配中不使用
    angle_tolerance_deg: float = 10.0
    min_theta_rad: float = -math.pi / 2.0
    max_theta_rad: float = math.pi / 2.0
    max_line_shift_mm: float = 10.0
    collinear_points_max_distance_mm: Optional[float] = None

    def validate(self):
        """参数非法时抛出 ConfigurationError"""
        if not self.approximate_spacing_mm_per_pixel or self.approximate_spacing_mm_per_pixel <= 0:
            raise ConfigurationError(
                f"approximate_spacing_mm_per_pixel must be positive, got {self.approximate_spacing_mm_per_pixel}")
        for name in ('max_line_pair_distance_error_percent', 'max_angle_difference_deg',
                     'angle_tolerance_deg', 'max_line_shift_mm'):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.max_line_pair_distance_error_percent > 100:
            raise ConfigurationError("max_line_pair_distance_error_percent cannot exceed 100")
        if self.collinear_points_max_distance_mm is not None and self.collinear_points_max_distance_mm < 0:
            raise ConfigurationError("collinear_points_max_distance_mm must be non-negative")
        if self.min_theta_rad > self.max_theta_rad:
            raise ConfigurationError(
                f"Theta range is inverted ({math.degrees(self.min_theta_rad):.2f} > "
                f"{math.degrees(self.max_theta_rad):.2f} degrees)")
        if self.frame_size is not None:
            if len(self.frame_size) != 2 or min(self.frame_size) <= 0:
                raise ConfigurationError(f"frame_size must be two positive values, got {self.frame_size}")

    def mm_to_px(self, value_mm: float) -> float:
        return value_mm / self.approximate_spacing_mm_per_pixel


@dataclass(frozen=True)
class PairTolerance:
    """像素/弧度空间中的线对容差"""
    first: int
    second: int
    distance_px: Range
    angle_rad: Range
    shift_px: Optional[Range] = None


@dataclass(frozen=True)
class DerivedTolerances:
    """update_parameters 的输出，与生成它的参数绑定"""
    parameters: ToleranceParameters
    pairs: Dict[int, Tuple[PairTolerance, ...]] = field(default_factory=dict)
    collinear_max_distance_px: Optional[float] = None

    @property
    def frame_size(self) -> Optional[Tuple[int, int]]:
        return self.parameters.frame_size

    @property
    def theta_range(self) -> Range:
        return (self.parameters.min_theta_rad, self.parameters.max_theta_rad)

    def pair_tolerances(self, pattern_id: int) -> Tuple[PairTolerance, ...]:
        return self.pairs[pattern_id]


def update_parameters(parameters: ToleranceParameters, library: PatternLibrary) -> DerivedTolerances:
    """
    根据参数与图案库重新计算像素空间容差

    距离区间按误差百分比放宽后除以像素间距，角度区间按角度容差放宽并限制在 [0, 90] 度，
    N线图案未配置偏移的线对使用 ±max_line_shift_mm。

    Args:
        parameters: 容差参数
        library: 图案库

    Returns:
        derived: 推导出的容差
    """
    parameters.validate()

    error_ratio = parameters.max_line_pair_distance_error_percent / 100.0
    angle_tolerance = parameters.angle_tolerance_deg

    derived_pairs = {}
    for pattern in library:
        tolerances = []
        for pair in pattern.pairs:
            distance_px = (
                parameters.mm_to_px(pair.distance_mm[0] * (1.0 - error_ratio)),
                parameters.mm_to_px(pair.distance_mm[1] * (1.0 + error_ratio)),
            )
            angle_rad = (
                math.radians(max(0.0, pair.angle_deg[0] - angle_tolerance)),
                math.radians(min(90.0, pair.angle_deg[1] + angle_tolerance)),
            )

            shift_mm = pair.shift_mm
            if shift_mm is None and pattern.family == PatternFamily.N_LINE:
                shift_mm = (-parameters.max_line_shift_mm, parameters.max_line_shift_mm)
            shift_px = None
            if shift_mm is not None:
                shift_px = (parameters.mm_to_px(shift_mm[0]), parameters.mm_to_px(shift_mm[1]))

            tolerances.append(PairTolerance(pair.first, pair.second, distance_px, angle_rad, shift_px))
        derived_pairs[pattern.pattern_id] = tuple(tolerances)

    collinear_px = None
    if parameters.collinear_points_max_distance_mm is not None:
        collinear_px = parameters.mm_to_px(parameters.collinear_points_max_distance_mm)

    return DerivedTolerances(parameters=parameters, pairs=derived_pairs,
                             collinear_max_distance_px=collinear_px)


def parameters_from_config(segmentation: Dict[str, Any],
                           min_theta_rad: Optional[float] = None,
                           max_theta_rad: Optional[float] = None) -> ToleranceParameters:
    """从 Segmentation 配置节解析容差参数，显式传入的角度范围覆盖配置值"""
    if not isinstance(segmentation, dict):
        raise ConfigurationError("Segmentation section must be a mapping")
    if segmentation.get('approximate_spacing_mm_per_pixel') is None:
        raise ConfigurationError("Segmentation: missing required field 'approximate_spacing_mm_per_pixel'")

    try:
        if min_theta_rad is None:
            min_theta_rad = math.radians(float(segmentation.get('min_theta_deg', -90.0)))
        if max_theta_rad is None:
            max_theta_rad = math.radians(float(segmentation.get('max_theta_deg', 90.0)))

        frame_size = segmentation.get('frame_size')
        if frame_size is not None:
            frame_size = tuple(int(v) for v in frame_size)

        collinear = segmentation.get('collinear_points_max_distance_mm')
        parameters = ToleranceParameters(
            approximate_spacing_mm_per_pixel=float(segmentation['approximate_spacing_mm_per_pixel']),
            frame_size=frame_size,
            max_line_pair_distance_error_percent=float(
                segmentation.get('max_line_pair_distance_error_percent', 10.0)),
            max_angle_difference_deg=float(segmentation.get('max_angle_difference_deg', 10.0)),
            angle_tolerance_deg=float(segmentation.get('angle_tolerance_deg', 10.0)),
            min_theta_rad=float(min_theta_rad),
            max_theta_rad=float(max_theta_rad),
            max_line_shift_mm=float(segmentation.get('max_line_shift_mm', 10.0)),
            collinear_points_max_distance_mm=None if collinear is None else float(collinear),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Segmentation: invalid value ({e})")

    parameters.validate()
    return parameters
