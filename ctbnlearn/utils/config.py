#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
配置工具
"""
import yaml
from pathlib import Path
from typing import Dict, Any


def load_config(config_path: str = "config.yaml") -> Dict[str, Any]:
    """
    加载配置文件

    Args:
        config_path: 配置文件路径

    Returns:
        配置字典
    """
    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)
    return config or {}


def get_section(config: Dict[str, Any], section: str, defaults: Dict[str, Any]) -> Dict[str, Any]:
    """
    读取配置中的一个小节，缺失的键使用默认值补齐

    Args:
        config: 配置字典
        section: 小节名
        defaults: 默认值

    Returns:
        合并后的小节字典
    """
    merged = dict(defaults)
    merged.update(config.get(section) or {})
    return merged


def ensure_dir(directory: str) -> None:
    """
    确保目录存在，不存在则创建

    Args:
        directory: 目录路径
    """
    if directory:  # 防止空字符串
        Path(directory).mkdir(parents=True, exist_ok=True)
