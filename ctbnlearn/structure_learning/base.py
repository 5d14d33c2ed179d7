#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
结构学习算法的通用框架
每个节点独立搜索父节点集合，所有节点完成后再统一写入邻接矩阵
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Set, Tuple

from joblib import Parallel, delayed

from ctbnlearn.process.base import NetworkProcess
from ctbnlearn.tools import Dataset
from ctbnlearn.utils.logging import setup_logger

logger = setup_logger("ctbn_structure_learning")


class StructureLearningAlgorithm(ABC):
    """
    结构学习算法

    节点之间的搜索相互独立，使用 joblib 并行执行；
    搜索期间网络与数据集只读，邻接矩阵只在全部搜索返回后串行修改。

    Attributes:
        n_jobs: 并行任务数，-1 表示使用全部CPU
        backend: joblib 后端，None 表示默认后端
    """

    def __init__(self, n_jobs: int = -1, backend: Optional[str] = None):
        self.n_jobs = n_jobs
        self.backend = backend

    def fit_transform(self, net: NetworkProcess, dataset: Dataset) -> NetworkProcess:
        """
        从数据中学习网络结构

        原有的边会被清除，学到的父节点集合写入 net 并返回同一个对象

        Args:
            net: 节点已定义的网络
            dataset: 数据集

        Returns:
            结构更新后的网络

        Raises:
            ValueError: 数据集与网络的变量数不一致
        """
        if net.get_number_of_nodes() != dataset.n_variables:
            raise ValueError("Dataset and Network must have the same number of variables.")

        logger.info(f"{type(self).__name__}: 开始结构学习，共 {net.get_number_of_nodes()} 个节点")
        net.initialize_adj_matrix()

        learned_parent_sets: List[Tuple[int, Set[int]]] = Parallel(n_jobs=self.n_jobs, backend=self.backend)(
            delayed(self._learn_node)(net, dataset, node) for node in net.get_node_indices()
        )

        for child_node, parent_set in learned_parent_sets:
            logger.info(f"节点 {child_node} 的父节点集合: {sorted(parent_set)}")
            for parent_node in sorted(parent_set):
                net.add_edge(parent_node, child_node)

        logger.info(f"{type(self).__name__}: 结构学习完成")
        return net

    @abstractmethod
    def _learn_node(self, net: NetworkProcess, dataset: Dataset, node: int) -> Tuple[int, Set[int]]:
        """
        搜索单个节点的父节点集合

        Returns:
            (节点, 父节点集合)
        """
