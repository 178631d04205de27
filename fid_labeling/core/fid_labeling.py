"""
模体点标注核心实现
从候选直线中识别配置的模体图案，并为每个点标注图案号与导线号
"""

import math
import time
import logging
import threading
from dataclasses import replace
from typing import Dict, Any, Optional, Sequence, List

import numpy as np

from .configuration import read_configuration
from .parameters import ToleranceParameters, DerivedTolerances, update_parameters
from .result_assembler import assemble_results
from ..matchers.pattern_matcher import find_pattern
from ..patterns.pattern_definition import PatternLibrary
from ..utils.config_manager import ConfigManager
from ..utils.data_structures import Dot, Line, LabelingResult, LabelingOutcome
from ..utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class FidLabeling:
    """
    模体点标注器

    由调用方持有，每个设备流水线一个实例。图案库与容差参数在一次标定会话中只读，
    不同帧可以在不同线程中并发调用 find_pattern；重新配置需要调用方与匹配串行化。
    """

    def __init__(self, parameters: Optional[ToleranceParameters] = None,
                 library: Optional[PatternLibrary] = None):
        self.parameters = parameters
        self.library = library if library is not None else PatternLibrary()

        self._state_lock = threading.Lock()
        self._derived: Optional[DerivedTolerances] = None
        self._parameters_dirty = True

        self.clear()
        if parameters is not None:
            self.update_parameters()

    @classmethod
    def from_config_file(cls, config_path: str, min_theta_rad: Optional[float] = None,
                         max_theta_rad: Optional[float] = None) -> 'FidLabeling':
        """从YAML配置文件创建标注器"""
        labeling = cls()
        labeling.read_configuration(ConfigManager.load_config(config_path), min_theta_rad, max_theta_rad)
        return labeling

    def read_configuration(self, config_tree: Dict[str, Any], min_theta_rad: Optional[float] = None,
                           max_theta_rad: Optional[float] = None):
        """读取配置树并重新计算推导容差"""
        parameters, library = read_configuration(config_tree, min_theta_rad, max_theta_rad)
        self.parameters = parameters
        self.library = library
        self.update_parameters()

    def update_parameters(self) -> DerivedTolerances:
        """参数或图案库变化后重新计算像素空间容差"""
        if self.parameters is None:
            raise ConfigurationError("Tolerance parameters are not set, call read_configuration first")
        derived = update_parameters(self.parameters, self.library)
        with self._state_lock:
            self._derived = derived
            self._parameters_dirty = False
        return derived

    def clear(self):
        """清除上一次匹配的状态"""
        with self._state_lock:
            self.dots_found = False
            self.dots: List[Dot] = []
            self.lines_vector: List[Any] = []
            self.found_lines: List[Line] = []
            self.results: List[LabelingResult] = []
            self.pattern_intensity = 0.0

    # 参数设置：修改后标记推导容差过期
    def _replace_parameters(self, **changes):
        if self.parameters is None:
            raise ConfigurationError("Tolerance parameters are not set, call read_configuration first")
        parameters = replace(self.parameters, **changes)
        parameters.validate()
        with self._state_lock:
            self.parameters = parameters
            self._parameters_dirty = True

    def set_frame_size(self, frame_size: Sequence[int]):
        self._replace_parameters(frame_size=tuple(int(v) for v in frame_size))

    def set_approximate_spacing_mm_per_pixel(self, value: float):
        self._replace_parameters(approximate_spacing_mm_per_pixel=float(value))

    def set_max_line_pair_distance_error_percent(self, value: float):
        self._replace_parameters(max_line_pair_distance_error_percent=float(value))

    def set_max_angle_difference_degrees(self, value: float):
        self._replace_parameters(max_angle_difference_deg=float(value))

    def set_min_theta_deg(self, value: float):
        self._replace_parameters(min_theta_rad=math.radians(value))

    def set_max_theta_deg(self, value: float):
        self._replace_parameters(max_theta_rad=math.radians(value))

    def set_angle_tolerance_deg(self, value: float):
        self._replace_parameters(angle_tolerance_deg=float(value))

    def set_max_line_shift(self, value_mm: float):
        self._replace_parameters(max_line_shift_mm=float(value_mm))

    def get_max_line_shift(self) -> float:
        return self.parameters.max_line_shift_mm

    def set_patterns(self, library: PatternLibrary):
        with self._state_lock:
            self.library = library
            self._parameters_dirty = True

    def _current_derived(self) -> DerivedTolerances:
        with self._state_lock:
            stale = self._parameters_dirty or self._derived is None
        if stale:
            logger.debug("Tolerance parameters changed since last update, recomputing derived values")
            return self.update_parameters()
        return self._derived

    def find_pattern(self, dots: Sequence[Dot] = (), lines=()) -> LabelingOutcome:
        """
        执行一次匹配

        Args:
            dots: 当前帧的候选点
            lines: 候选直线（Line、点索引列表、坐标点列表，或按点数分组的列表）

        Returns:
            outcome: 匹配结果；未找到图案时 dots_found 为 False 且 results 为空
        """
        start_time = time.time()
        self.clear()

        derived = self._current_derived()
        dots = list(dots)
        lines = list(lines)
        hypothesis = find_pattern(lines, self.library, derived, dots)

        outcome = LabelingOutcome()
        if hypothesis is None:
            logger.debug(f"No pattern matched among {len(self.library)} pattern(s)")
        else:
            pattern = hypothesis.pattern
            outcome.dots_found = True
            outcome.pattern_id = pattern.pattern_id
            outcome.pattern_name = pattern.name
            outcome.results = assemble_results(pattern, hypothesis.lines)
            outcome.found_lines = list(hypothesis.lines)
            outcome.pattern_intensity = hypothesis.intensity
            outcome.metadata['goodness'] = hypothesis.goodness
        outcome.processing_time = (time.time() - start_time) * 1000

        with self._state_lock:
            self.dots = dots
            self.lines_vector = list(lines)
            self.dots_found = outcome.dots_found
            self.found_lines = outcome.found_lines
            self.results = outcome.results
            self.pattern_intensity = outcome.pattern_intensity
        return outcome

    @property
    def found_dots_coordinates(self) -> np.ndarray:
        """最近一次匹配中已标注点的坐标 [N, 2]"""
        if not self.results:
            return np.empty((0, 2), dtype=float)
        return np.array([[r.x, r.y] for r in self.results], dtype=float)
