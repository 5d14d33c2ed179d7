#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
过程模型模块
包含CTBN（多节点）与CTMP（单节点）两种过程
"""
from ctbnlearn.process.base import NetworkError, NodeInsertionError, NetworkProcess
from ctbnlearn.process.ctbn import CtbnNetwork
from ctbnlearn.process.ctmp import CtmpProcess

__all__ = [
    'NetworkError',
    'NodeInsertionError',
    'NetworkProcess',
    'CtbnNetwork',
    'CtmpProcess'
]
