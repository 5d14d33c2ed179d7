#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
连续时间马尔可夫过程（CTMP）
只有一个节点，通常由 CtbnNetwork.amalgamation 生成
"""
from typing import Optional, Sequence, Set

from ctbnlearn.params import Params
from ctbnlearn.process.base import NetworkProcess, NodeInsertionError


class CtmpProcess(NetworkProcess):
    """单节点过程，不支持任何边操作"""

    def __init__(self):
        self.param: Optional[Params] = None

    def initialize_adj_matrix(self) -> None:
        raise NotImplementedError("CtmpProcess has only one node")

    def add_node(self, n: Params) -> int:
        if self.param is not None:
            raise NodeInsertionError("CtmpProcess has only one node")
        self.param = n
        return 0

    def add_edge(self, parent: int, child: int) -> None:
        raise NotImplementedError("CtmpProcess has only one node")

    def get_number_of_nodes(self) -> int:
        return 0 if self.param is None else 1

    def get_node(self, node_idx: int) -> Params:
        self._check_node(node_idx)
        return self.param

    def get_param_index_network(self, node: int, current_state: Sequence[int]) -> int:
        # 单个CIM块，没有父节点
        self._check_node(node)
        return 0

    def get_param_index_from_custom_parent_set(self, current_state: Sequence[int], parent_set: Set[int]) -> int:
        raise NotImplementedError("CtmpProcess has only one node")

    def get_parent_set(self, node: int) -> Set[int]:
        self._check_node(node)
        return set()

    def get_children_set(self, node: int) -> Set[int]:
        self._check_node(node)
        return set()

    def _check_node(self, node_idx: int) -> None:
        if self.param is None:
            raise RuntimeError("Uninitialized CtmpProcess")
        if node_idx != 0:
            raise NotImplementedError("CtmpProcess has only one node")
