"""
配置解析
将配置树解析为容差参数与图案库
"""

import logging
from typing import Dict, Any, Optional, Tuple

from .parameters import ToleranceParameters, parameters_from_config
from ..patterns.pattern_definition import PatternLibrary
from ..utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SEGMENTATION_SECTION = 'Segmentation'
PHANTOM_SECTION = 'PhantomDefinition'


def read_configuration(config_tree: Dict[str, Any],
                       min_theta_rad: Optional[float] = None,
                       max_theta_rad: Optional[float] = None) -> Tuple[ToleranceParameters, PatternLibrary]:
    """
    解析配置树

    Args:
        config_tree: 配置字典（通常由 ConfigManager.load_config 读取）
        min_theta_rad: 直线最小角度，给出时覆盖配置中的 min_theta_deg
        max_theta_rad: 直线最大角度，给出时覆盖配置中的 max_theta_deg

    Returns:
        parameters: 容差参数
        library: 图案库
    """
    if not isinstance(config_tree, dict):
        raise ConfigurationError("Configuration root must be a mapping")

    for section in (SEGMENTATION_SECTION, PHANTOM_SECTION):
        if section not in config_tree or config_tree[section] is None:
            raise ConfigurationError(f"Missing required configuration section '{section}'")

    parameters = parameters_from_config(config_tree[SEGMENTATION_SECTION], min_theta_rad, max_theta_rad)

    phantom = config_tree[PHANTOM_SECTION]
    if not isinstance(phantom, dict) or 'patterns' not in phantom:
        raise ConfigurationError(f"{PHANTOM_SECTION}: missing required field 'patterns'")
    library = PatternLibrary.from_config(phantom['patterns'])

    logger.info(f"Read phantom configuration: {len(library)} pattern(s) "
                f"[{', '.join(p.name for p in library)}]")
    return parameters, library
