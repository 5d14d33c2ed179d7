#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
参数学习
从轨迹中计算充分统计量，并估计节点的条件强度矩阵（CIM）
"""
import copy
from abc import ABC, abstractmethod
from typing import Optional, Set, Tuple

import numpy as np

from ctbnlearn.params import Params
from ctbnlearn.process.base import NetworkProcess
from ctbnlearn.tools import Dataset
from ctbnlearn.utils.logging import setup_logger

logger = setup_logger("ctbn_parameter_learning")


def sufficient_statistics(
    net: NetworkProcess,
    dataset: Dataset,
    node: int,
    parent_set: Set[int]
) -> Tuple[np.ndarray, np.ndarray]:
    """
    计算节点在给定父节点集合下的充分统计量

    对每条轨迹的每个相邻样本对 (t1,s1)->(t2,s2)：
    T[u, s1[node]] += t2 - t1；若节点状态改变，M[u, s1[node], s2[node]] += 1，
    其中 u 是 s1 在父节点集合上的混合进制编码。

    Args:
        net: 网络
        dataset: 数据集
        node: 目标节点
        parent_set: 父节点集合

    Returns:
        (M, T)：转移次数 [父配置数, 状态数, 状态数]，停留时间 [父配置数, 状态数]
    """
    node_domain = net.get_node(node).get_reserved_space_as_parent()

    parents = sorted(parent_set)
    parentset_domain = [net.get_node(x).get_reserved_space_as_parent() for x in parents]

    # 父配置 -> 行索引 的步长向量
    vector_to_idx = np.zeros(net.get_number_of_nodes(), dtype=np.int64)
    stride = 1
    for parent, cardinality in zip(parents, parentset_domain):
        vector_to_idx[parent] = stride
        stride *= cardinality

    n_configurations = int(np.prod(parentset_domain, dtype=np.int64))
    M = np.zeros((n_configurations, node_domain, node_domain), dtype=np.int64)
    T = np.zeros((n_configurations, node_domain), dtype=float)

    for trj in dataset.get_trajectories():
        events = trj.get_events()
        if events.shape[0] < 2:
            continue
        ev1 = events[:-1]
        ev2 = events[1:]
        idx1 = ev1 @ vector_to_idx
        from_state = ev1[:, node]
        to_state = ev2[:, node]

        # np.add.at 按轨迹顺序逐个累加
        np.add.at(T, (idx1, from_state), np.diff(trj.get_time()))
        changed = from_state != to_state
        np.add.at(M, (idx1[changed], from_state[changed], to_state[changed]), 1)

    return M, T


class ParameterLearning(ABC):
    """参数估计器接口"""

    def fit(
        self,
        net: NetworkProcess,
        dataset: Dataset,
        node: int,
        parent_set: Optional[Set[int]] = None
    ) -> Params:
        """
        估计节点参数

        Args:
            net: 网络
            dataset: 数据集
            node: 目标节点
            parent_set: 父节点集合，None 表示使用网络当前的父节点集合

        Returns:
            节点参数的副本，写入了 CIM、M 与 T
        """
        if parent_set is None:
            parent_set = net.get_parent_set(node)

        M, T = sufficient_statistics(net, dataset, node, parent_set)
        cim = self.estimate_cim(M, T)

        params = copy.deepcopy(net.get_node(node))
        # 充分统计量保证行和为零，这里不做校验
        params.set_cim_unchecked(cim)
        params.transitions = M
        params.residence_time = T
        return params

    @abstractmethod
    def estimate_cim(self, M: np.ndarray, T: np.ndarray) -> np.ndarray:
        """由充分统计量计算 CIM"""


def _set_diagonal_to_negative_row_sum(cim: np.ndarray) -> np.ndarray:
    n_states = cim.shape[1]
    diagonal = np.arange(n_states)
    cim[:, diagonal, diagonal] = 0.0
    cim[:, diagonal, diagonal] = -cim.sum(axis=2)
    return cim


class MLE(ParameterLearning):
    """
    最大似然估计

    CIM[i,x,y] = M[i,x,y] / T[i,x]，对角线为负的行和。
    某个父配置下状态从未被访问（T=0）时结果为 NaN/Inf，并记录警告。
    """

    def estimate_cim(self, M: np.ndarray, T: np.ndarray) -> np.ndarray:
        unvisited = np.argwhere(T == 0)
        if len(unvisited) > 0:
            logger.warning(
                f"MLE: {len(unvisited)} 个 (父配置, 状态) 的停留时间为 0，CIM 将包含非有限值: "
                f"{unvisited.tolist()[:10]}"
            )

        with np.errstate(divide='ignore', invalid='ignore'):
            cim = M / T[:, :, np.newaxis]
        return _set_diagonal_to_negative_row_sum(cim)


class BayesianApproach(ParameterLearning):
    """
    贝叶斯估计（Dirichlet-Gamma 共轭先验）

    先验强度按父配置数平均分配：alpha' = alpha / q，tau' = tau / q
    CIM[i,x,y] = (M[i,x,y] + alpha') / (T[i,x] + tau')

    Attributes:
        alpha: 转移次数的先验强度
        tau: 停留时间的先验强度
    """

    def __init__(self, alpha: float = 1.0, tau: float = 1.0):
        self.alpha = alpha
        self.tau = tau

    def __repr__(self) -> str:
        return f"BayesianApproach(alpha={self.alpha}, tau={self.tau})"

    def estimate_cim(self, M: np.ndarray, T: np.ndarray) -> np.ndarray:
        n_configurations = M.shape[0]
        alpha = self.alpha / n_configurations
        tau = self.tau / n_configurations

        with np.errstate(divide='ignore', invalid='ignore'):
            cim = (M + alpha) / (T[:, :, np.newaxis] + tau)
        return _set_diagonal_to_negative_row_sum(cim)
