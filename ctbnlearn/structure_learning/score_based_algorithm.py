#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
基于评分的结构学习：爬山法
"""
from typing import Optional, Set, Tuple

from ctbnlearn.process.base import NetworkProcess
from ctbnlearn.structure_learning.base import StructureLearningAlgorithm
from ctbnlearn.structure_learning.score_function import ScoreFunction
from ctbnlearn.tools import Dataset
from ctbnlearn.utils.logging import setup_logger

logger = setup_logger("ctbn_hill_climbing")


class HillClimbing(StructureLearningAlgorithm):
    """
    爬山法

    每个节点从空父节点集合出发，反复遍历其余节点，逐个切换其是否属于
    父节点集合，只有评分严格提升时才保留切换；一整轮没有提升即停止
    （局部最优）。

    Attributes:
        score_function: 评分函数
        max_parent_set: 父节点集合大小上限，None 表示不限
    """

    def __init__(
        self,
        score_function: ScoreFunction,
        max_parent_set: Optional[int] = None,
        n_jobs: int = -1,
        backend: Optional[str] = None
    ):
        super().__init__(n_jobs=n_jobs, backend=backend)
        self.score_function = score_function
        self.max_parent_set = max_parent_set

    def _learn_node(self, net: NetworkProcess, dataset: Dataset, node: int) -> Tuple[int, Set[int]]:
        logger.info(f"Learning node {node}")
        max_parent_set = self.max_parent_set if self.max_parent_set is not None else net.get_number_of_nodes()

        parent_set: Set[int] = set()
        current_score = self.score_function.call(net, node, parent_set, dataset)
        old_score = float('-inf')

        while current_score > old_score:
            old_score = current_score
            for parent in net.get_node_indices():
                if parent == node:
                    continue

                is_removed = parent in parent_set
                if is_removed:
                    parent_set.remove(parent)
                elif len(parent_set) < max_parent_set:
                    parent_set.add(parent)
                else:
                    continue

                tmp_score = self.score_function.call(net, node, parent_set, dataset)
                if tmp_score > current_score:
                    current_score = tmp_score
                    logger.debug(f"节点 {node}: {'移除' if is_removed else '加入'} {parent}, 评分 {tmp_score:.4f}")
                elif is_removed:
                    parent_set.add(parent)
                else:
                    parent_set.remove(parent)

        return node, parent_set
