#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
日志工具
"""
import os
import logging
from pathlib import Path


def setup_logger(name: str, log_dir: str = "logs", level: str = "INFO") -> logging.Logger:
    """
    设置日志记录器

    同名记录器只配置一次，重复调用直接返回已有的记录器

    Args:
        name: 日志记录器名称
        log_dir: 日志目录
        level: 日志级别

    Returns:
        配置好的日志记录器
    """
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level))

    # 避免重复添加处理器
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level))

    file_handler = logging.FileHandler(
        os.path.join(log_dir, f"{name}.log"),
        encoding='utf-8'
    )
    file_handler.setLevel(getattr(logging, level))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)
    file_handler.setFormatter(formatter)

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    return logger


def set_level(level: str) -> None:
    """
    调整所有ctbnlearn日志记录器的级别

    Args:
        level: 日志级别，如 'DEBUG', 'INFO'
    """
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("ctbn"):
            logger = logging.getLogger(name)
            logger.setLevel(getattr(logging, level))
            for handler in logger.handlers:
                handler.setLevel(getattr(logging, level))


def set_log_dir(log_dir: str) -> None:
    """
    把所有ctbnlearn日志记录器的文件输出改到新的目录

    Args:
        log_dir: 日志目录
    """
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    for name in list(logging.root.manager.loggerDict):
        if not name.startswith("ctbn"):
            continue
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if isinstance(handler, logging.FileHandler):
                new_handler = logging.FileHandler(os.path.join(log_dir, f"{name}.log"), encoding='utf-8')
                new_handler.setLevel(handler.level)
                new_handler.setFormatter(handler.formatter)
                logger.removeHandler(handler)
                handler.close()
                logger.addHandler(new_handler)
