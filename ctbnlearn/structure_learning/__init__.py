#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
结构学习模块
包含基于评分的爬山法与基于约束的CTPC，以及它们使用的评分函数和假设检验
"""
from ctbnlearn.structure_learning.base import StructureLearningAlgorithm
from ctbnlearn.structure_learning.score_function import ScoreFunction, LogLikelihood, BIC
from ctbnlearn.structure_learning.score_based_algorithm import HillClimbing
from ctbnlearn.structure_learning.hypothesis_test import HypothesisTest, ChiSquare, F
from ctbnlearn.structure_learning.constraint_based_algorithm import Cache, CTPC

__all__ = [
    'StructureLearningAlgorithm',
    'ScoreFunction',
    'LogLikelihood',
    'BIC',
    'HillClimbing',
    'HypothesisTest',
    'ChiSquare',
    'F',
    'Cache',
    'CTPC'
]
