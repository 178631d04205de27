"""
核心模块
参数、配置解析、结果组装与标注器
"""

from .parameters import ToleranceParameters, DerivedTolerances, update_parameters
from .configuration import read_configuration
from .result_assembler import update_fixed_triple_results, update_n_line_results
from .fid_labeling import FidLabeling

__all__ = [
    'ToleranceParameters',
    'DerivedTolerances',
    'update_parameters',
    'read_configuration',
    'update_fixed_triple_results',
    'update_n_line_results',
    'FidLabeling'
]
