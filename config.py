# config.py
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Union

import yaml

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "service": {
        "endpoint": "",
        "timeout_sec": 60,
    },
    "quiz": {
        "difficulties": ["简单", "中等", "困难"],
        "default_difficulty": "中等",
        "counts": ["1", "3", "5", "10"],
        "default_count": "3",
    },
    "ui": {
        "title": "题目练习",
        "width": 800,
        "height": 600,
    },
}


def _deep_update(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = deepcopy(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_update(out[k], v)
        else:
            out[k] = v
    return out


def load_config(config_path: Union[str, Path, None]) -> Dict[str, Any]:
    """读取 YAML 配置并覆盖默认值；文件缺失或格式错误时用默认值"""
    if not config_path:
        return deepcopy(DEFAULT_CONFIG)
    cfg_path = Path(config_path)
    if not cfg_path.exists():
        LOGGER.warning("Config not found: %s. Using defaults.", cfg_path)
        return deepcopy(DEFAULT_CONFIG)
    try:
        loaded = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        LOGGER.warning("Failed to parse config (%s). Using defaults.", exc)
        return deepcopy(DEFAULT_CONFIG)
    if not isinstance(loaded, dict):
        LOGGER.warning("Config format invalid. Using defaults.")
        return deepcopy(DEFAULT_CONFIG)
    return _deep_update(DEFAULT_CONFIG, loaded)
