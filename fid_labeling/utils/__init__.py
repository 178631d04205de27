"""
工具模块
包含数据结构、配置管理、点排序等实用工具
"""

from .config_manager import ConfigManager
from .data_structures import Dot, Line, LabelingResult, LabelingOutcome
from .exceptions import FidLabelingError, ConfigurationError, InvalidGeometry
from .point_ordering import sort_right_to_left, sort_left_to_right, sort_points_by_distance_from_start_point

__all__ = [
    'ConfigManager',
    'Dot',
    'Line',
    'LabelingResult',
    'LabelingOutcome',
    'FidLabelingError',
    'ConfigurationError',
    'InvalidGeometry',
    'sort_right_to_left',
    'sort_left_to_right',
    'sort_points_by_distance_from_start_point'
]
