#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
基于约束的结构学习：CTPC（Continuous-Time Peter Clark）
以及为其搜索顺序设计的两代参数缓存
"""
from itertools import combinations
from typing import Dict, FrozenSet, Optional, Set, Tuple

from ctbnlearn.parameter_learning import ParameterLearning
from ctbnlearn.params import Params
from ctbnlearn.process.base import NetworkProcess
from ctbnlearn.structure_learning.base import StructureLearningAlgorithm
from ctbnlearn.structure_learning.hypothesis_test import ChiSquare, F
from ctbnlearn.tools import Dataset
from ctbnlearn.utils.logging import setup_logger

logger = setup_logger("ctbn_ctpc")


class Cache:
    """
    参数学习结果的缓存

    按父节点集合（与顺序无关）作键，分为"小""大"两代：
    小代保存大小不超过 parent_set_size_small 的集合，大代保存更大的集合。
    当请求的集合大小超过 parent_set_size_small + 1 时，两代互换、清空新的大代、
    前沿加一。CTPC 的分离集大小每轮恰好加一，因此只有当前与上一轮的结果会被复用，
    内存最多保留两个大小级别。

    一个 Cache 只服务于一个节点的搜索。
    """

    def __init__(self, parameter_learning: ParameterLearning):
        self.parameter_learning = parameter_learning
        self.cache_persistent_small: Dict[Optional[FrozenSet[int]], Params] = {}
        self.cache_persistent_big: Dict[Optional[FrozenSet[int]], Params] = {}
        self.parent_set_size_small = 0

    def fit(
        self,
        net: NetworkProcess,
        dataset: Dataset,
        node: int,
        parent_set: Optional[Set[int]] = None
    ) -> Params:
        """
        带缓存的参数学习

        Args:
            net: 网络
            dataset: 数据集
            node: 目标节点
            parent_set: 父节点集合，None 表示网络当前的父节点集合

        Returns:
            缓存或新学习的节点参数（调用方不应修改）
        """
        key = None if parent_set is None else frozenset(parent_set)
        parent_set_len = len(net.get_parent_set(node) if parent_set is None else key)

        if parent_set_len > self.parent_set_size_small + 1:
            self.cache_persistent_small, self.cache_persistent_big = \
                self.cache_persistent_big, self.cache_persistent_small
            self.cache_persistent_big = {}
            self.parent_set_size_small += 1
            logger.debug(f"缓存换代，前沿大小: {self.parent_set_size_small}")

        if parent_set_len > self.parent_set_size_small:
            generation = self.cache_persistent_big
        else:
            generation = self.cache_persistent_small

        params = generation.get(key)
        if params is None:
            params = self.parameter_learning.fit(net, dataset, node, None if key is None else set(key))
            generation[key] = params
        return params


class CTPC(StructureLearningAlgorithm):
    """
    CTPC 算法

    每个节点的候选父节点初始为其余所有节点。分离集大小 s 从 0 开始递增，
    对每个候选父节点 p 枚举候选集中（去掉 p）大小为 s 的子集作为分离集，
    F 检验与卡方检验都判定独立时移除 p，并停止对 p 的本轮检验。

    Attributes:
        parameter_learning: 参数估计器
        Ftest: F 检验
        Chi2test: 卡方检验
    """

    def __init__(
        self,
        parameter_learning: ParameterLearning,
        Ftest: F,
        Chi2test: ChiSquare,
        n_jobs: int = -1,
        backend: Optional[str] = None
    ):
        super().__init__(n_jobs=n_jobs, backend=backend)
        self.parameter_learning = parameter_learning
        self.Ftest = Ftest
        self.Chi2test = Chi2test

    def _learn_node(self, net: NetworkProcess, dataset: Dataset, child_node: int) -> Tuple[int, Set[int]]:
        logger.info(f"Learning node {child_node}")
        cache = Cache(self.parameter_learning)
        candidate_parent_set = set(net.get_node_indices()) - {child_node}

        separation_set_size = 0
        while separation_set_size < len(candidate_parent_set):
            candidate_parent_set_tmp = set(candidate_parent_set)
            for parent_node in sorted(candidate_parent_set):
                others = sorted(candidate_parent_set - {parent_node})
                for separation_set in combinations(others, separation_set_size):
                    separation_set = set(separation_set)
                    if self.Ftest.call(net, child_node, parent_node, separation_set, dataset, cache) \
                            and self.Chi2test.call(net, child_node, parent_node, separation_set, dataset, cache):
                        logger.debug(f"节点 {child_node}: 移除候选父节点 {parent_node}，分离集 {sorted(separation_set)}")
                        candidate_parent_set_tmp.discard(parent_node)
                        break
            candidate_parent_set = candidate_parent_set_tmp
            separation_set_size += 1

        return child_node, candidate_parent_set
