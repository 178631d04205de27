"""
FidLabeling: 超声标定模体的点标注

从分割得到的亮点与直线候选中识别配置的模体图案（三线图案、N线图案），
并为每个点标注图案号与导线号，供探头标定计算使用。
"""

from .version import __version__
from .core.fid_labeling import FidLabeling
from .core.configuration import read_configuration
from .core.parameters import ToleranceParameters, update_parameters
from .patterns.pattern_definition import PatternDefinition, PatternFamily, PatternLibrary, PairConstraint
from .utils.data_structures import Dot, Line, LabelingResult, LabelingOutcome
from .utils.exceptions import FidLabelingError, ConfigurationError, InvalidGeometry
from .utils.config_manager import ConfigManager

__all__ = [
    '__version__',
    'FidLabeling',
    'read_configuration',
    'ToleranceParameters',
    'update_parameters',
    'PatternDefinition',
    'PatternFamily',
    'PatternLibrary',
    'PairConstraint',
    'Dot',
    'Line',
    'LabelingResult',
    'LabelingOutcome',
    'FidLabelingError',
    'ConfigurationError',
    'InvalidGeometry',
    'ConfigManager',
]

# Package metadata
__author__ = "FidLabeling Team"

def get_version():
    """获取版本信息"""
    return __version__
