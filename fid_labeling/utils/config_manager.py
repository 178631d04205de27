"""
配置管理器
模体配置文件的加载、继承与保存
"""

import copy
import logging
import yaml
from typing import Dict, Any, List, Optional
from pathlib import Path

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ('Segmentation', 'PhantomDefinition')
INHERIT_KEY = 'inherit_from'


class ConfigManager:
    """配置管理器"""

    @staticmethod
    def load_config(config_path: str, _chain: Optional[List[Path]] = None) -> Dict[str, Any]:
        """
        加载YAML配置文件

        inherit_from 可以是一个文件或文件列表（相对当前文件），按顺序合并，
        当前文件的值最后覆盖。

        Args:
            config_path: 配置文件路径

        Returns:
            config: 配置字典
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        chain = list(_chain or [])
        resolved = config_path.resolve()
        if resolved in chain:
            cycle = ' -> '.join(p.name for p in chain + [resolved])
            raise ConfigurationError(f"Circular inherit_from: {cycle}")
        chain.append(resolved)

        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ConfigurationError(f"{config_path}: top level must be a mapping")

        parents = config.pop(INHERIT_KEY, None)
        if parents is None:
            return config
        if isinstance(parents, str):
            parents = [parents]

        merged: Dict[str, Any] = {}
        for parent in parents:
            parent_config = ConfigManager.load_config(config_path.parent / parent, chain)
            merged = ConfigManager.merge_configs(merged, parent_config)
        logger.debug(f"{config_path.name} inherits from {', '.join(parents)}")
        return ConfigManager.merge_configs(merged, config)

    @staticmethod
    def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
        """递归合并配置字典，列表（如图案列表）整体替换，输入不被修改"""
        merged = copy.deepcopy(base_config)

        for key, value in override_config.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = ConfigManager.merge_configs(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)

        return merged

    @staticmethod
    def validate_config(config: Dict[str, Any]) -> bool:
        """检查必需的配置节是否存在"""
        missing = [s for s in REQUIRED_SECTIONS if s not in config]
        if missing:
            logger.warning(f"Missing required section(s) {', '.join(missing)} in config")
            return False

        patterns = (config.get('PhantomDefinition') or {}).get('patterns')
        if not patterns:
            logger.warning("PhantomDefinition defines no patterns")
            return False

        return True

    @staticmethod
    def save_config(config: Dict[str, Any], save_path: str):
        """保存为YAML，保持键的插入顺序"""
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config, f, default_flow_style=False, allow_unicode=True, indent=2, sort_keys=False)
