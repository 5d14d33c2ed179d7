#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
评分函数
基于充分统计量的贝叶斯-狄利克雷边际对数似然，以及其BIC版本
"""
from abc import ABC, abstractmethod
from typing import Set, Tuple

import numpy as np
from scipy.special import gammaln

from ctbnlearn.parameter_learning import sufficient_statistics
from ctbnlearn.process.base import NetworkProcess
from ctbnlearn.tools import Dataset


class ScoreFunction(ABC):
    """给定节点与候选父节点集合的评分，越大越好"""

    @abstractmethod
    def call(self, net: NetworkProcess, node: int, parent_set: Set[int], dataset: Dataset) -> float:
        """计算评分"""


class LogLikelihood(ScoreFunction):
    """
    边际对数似然

    先验强度按父配置数 q 平均分配：alpha/q，tau/q。
    评分 = 停留时间部分（q）+ 转移分布部分（theta）
    """

    def __init__(self, alpha: float = 1.0, tau: float = 1.0):
        """
        Args:
            alpha: 转移次数的先验强度
            tau: 停留时间的先验强度，必须 >= 0

        Raises:
            ValueError: tau 为负
        """
        if tau < 0.0:
            raise ValueError("tau must be >=0.0")
        self.alpha = alpha
        self.tau = tau

    def compute_score(
        self,
        net: NetworkProcess,
        node: int,
        parent_set: Set[int],
        dataset: Dataset
    ) -> Tuple[float, np.ndarray]:
        """
        计算对数似然

        Returns:
            (对数似然, 转移次数 M)
        """
        M, T = sufficient_statistics(net, dataset, node, parent_set)

        alpha = self.alpha / M.shape[0]
        tau = self.tau / M.shape[0]

        m = M.sum(axis=2)
        log_ll_q = np.sum(
            gammaln(alpha + m + 1.0)
            + (alpha + 1.0) * np.log(tau)
            - gammaln(alpha + 1.0)
            - (alpha + m + 1.0) * np.log(tau + T)
        )

        log_ll_theta = np.sum(
            gammaln(alpha)
            - gammaln(alpha + m)
            + np.sum(gammaln(alpha + M) - gammaln(alpha), axis=2)
        )

        return float(log_ll_theta + log_ll_q), M

    def call(self, net: NetworkProcess, node: int, parent_set: Set[int], dataset: Dataset) -> float:
        return self.compute_score(net, node, parent_set, dataset)[0]


class BIC(ScoreFunction):
    """
    BIC 评分

    对数似然减去 ln(N)/2 * 参数个数，N 为样本对总数
    """

    def __init__(self, alpha: float = 1.0, tau: float = 1.0):
        self.ll = LogLikelihood(alpha, tau)

    def call(self, net: NetworkProcess, node: int, parent_set: Set[int], dataset: Dataset) -> float:
        ll, M = self.ll.compute_score(net, node, parent_set, dataset)
        n_parameters = M.shape[0] * M.shape[1] * (M.shape[2] - 1)
        sample_size = dataset.sample_size()
        return float(ll - np.log(sample_size) / 2.0 * n_parameters)
