#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
工具模块
"""
from ctbnlearn.utils.logging import setup_logger, set_level, set_log_dir
from ctbnlearn.utils.config import load_config, get_section, ensure_dir

__all__ = [
    'setup_logger',
    'set_level',
    'set_log_dir',
    'load_config',
    'get_section',
    'ensure_dir'
]
