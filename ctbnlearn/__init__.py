#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
ctbnlearn - 连续时间贝叶斯网络的采样、参数学习与结构学习
"""
from ctbnlearn.params import (
    Params,
    DiscreteStatesContinuousTimeParams,
    ParamsError,
    ParametersNotInitialized,
    InvalidCIM
)
from ctbnlearn.process import NetworkProcess, CtbnNetwork, CtmpProcess, NetworkError, NodeInsertionError
from ctbnlearn.sampling import Sample, Sampler, ForwardSampler
from ctbnlearn.tools import Trajectory, Dataset, trajectory_generator
from ctbnlearn.parameter_learning import ParameterLearning, MLE, BayesianApproach, sufficient_statistics

__version__ = '0.1.0'

__all__ = [
    'Params',
    'DiscreteStatesContinuousTimeParams',
    'ParamsError',
    'ParametersNotInitialized',
    'InvalidCIM',
    'NetworkProcess',
    'CtbnNetwork',
    'CtmpProcess',
    'NetworkError',
    'NodeInsertionError',
    'Sample',
    'Sampler',
    'ForwardSampler',
    'Trajectory',
    'Dataset',
    'trajectory_generator',
    'ParameterLearning',
    'MLE',
    'BayesianApproach',
    'sufficient_statistics'
]
