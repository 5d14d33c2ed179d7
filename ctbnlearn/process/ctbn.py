#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
连续时间贝叶斯网络（CTBN）
节点参数列表 + 邻接矩阵，节点之间的关系只通过整数索引表达
"""
from typing import Dict, List, Optional, Sequence, Set

import networkx as nx
import numpy as np

from ctbnlearn.params import DiscreteStatesContinuousTimeParams, Params
from ctbnlearn.process.base import NetworkProcess
from ctbnlearn.process.ctmp import CtmpProcess
from ctbnlearn.utils.logging import setup_logger

logger = setup_logger("ctbn_network")


class CtbnNetwork(NetworkProcess):
    """
    CTBN的结构与参数

    节点在 nodes 列表中的位置同时也是其在邻接矩阵中的索引；
    adj_matrix[parent, child] == 1 表示存在边 parent -> child。
    """

    def __init__(self):
        """初始化空网络"""
        self.adj_matrix: Optional[np.ndarray] = None
        self.nodes: List[Params] = []

    def initialize_adj_matrix(self) -> None:
        n = len(self.nodes)
        self.adj_matrix = np.zeros((n, n), dtype=np.uint16)

    def add_node(self, n: Params) -> int:
        # 新节点使旧的邻接矩阵失效
        n.reset_params()
        self.adj_matrix = None
        self.nodes.append(n)
        logger.debug(f"添加节点: {n.get_label()} (索引 {len(self.nodes) - 1})")
        return len(self.nodes) - 1

    def add_edge(self, parent: int, child: int) -> None:
        if self.adj_matrix is None:
            self.initialize_adj_matrix()

        self.adj_matrix[parent, child] = 1
        # 父节点集合改变后子节点的CIM形状失效
        self.nodes[child].reset_params()
        logger.debug(f"添加边: {parent} -> {child}")

    def get_adj_matrix(self) -> Optional[np.ndarray]:
        return self.adj_matrix

    def get_number_of_nodes(self) -> int:
        return len(self.nodes)

    def get_node(self, node_idx: int) -> Params:
        return self.nodes[node_idx]

    def get_param_index_network(self, node: int, current_state: Sequence[int]) -> int:
        return self.get_param_index_from_custom_parent_set(current_state, self.get_parent_set(node))

    def get_param_index_from_custom_parent_set(self, current_state: Sequence[int], parent_set: Set[int]) -> int:
        # 混合进制编码：按索引递增遍历父节点
        index = 0
        stride = 1
        for parent in sorted(parent_set):
            index += self.nodes[parent].state_to_index(current_state[parent]) * stride
            stride *= self.nodes[parent].get_reserved_space_as_parent()
        return index

    def get_parent_set(self, node: int) -> Set[int]:
        if self.adj_matrix is None:
            return set()
        return set(np.flatnonzero(self.adj_matrix[:, node]).tolist())

    def get_children_set(self, node: int) -> Set[int]:
        if self.adj_matrix is None:
            return set()
        return set(np.flatnonzero(self.adj_matrix[node, :]).tolist())

    @staticmethod
    def idx_to_state(variables_domain: Sequence[int], state: int) -> np.ndarray:
        """
        将单个整数表示的联合状态解码为各节点的状态

        Args:
            variables_domain: 各变量的基数
            state: 联合状态编号

        Returns:
            各节点状态组成的数组
        """
        array_state = np.zeros(len(variables_domain), dtype=int)
        for idx, var in enumerate(variables_domain):
            array_state[idx] = state % var
            state = state // var
        return array_state

    def amalgamation(self) -> CtmpProcess:
        """
        将CTBN合并为等价的单节点CTMP

        CTMP 的状态空间大小为所有节点基数之积

        Returns:
            等价的 CtmpProcess
        """
        logger.info("开始网络合并（amalgamation）")

        variables_domain = [node.get_reserved_space_as_parent() for node in self.nodes]
        state_space = int(np.prod(variables_domain))
        variables_set = set(self.get_node_indices())
        amalgamated_cim = np.zeros((1, state_space, state_space))

        for idx_current_state in range(state_space):
            current_state = self.idx_to_state(variables_domain, idx_current_state)

            for idx_node, node in enumerate(self.nodes):
                cim = node.get_cim()
                u = self.get_param_index_network(idx_node, current_state)
                for next_node_state in range(variables_domain[idx_node]):
                    next_state = current_state.copy()
                    next_state[idx_node] = next_node_state
                    idx_next_state = self.get_param_index_from_custom_parent_set(next_state, variables_set)
                    amalgamated_cim[0, idx_current_state, idx_next_state] += \
                        cim[u, current_state[idx_node], next_node_state]

        amalgamated_param = DiscreteStatesContinuousTimeParams(
            "ctmp",
            [str(x) for x in range(state_space)]
        )
        amalgamated_param.set_cim(amalgamated_cim)

        ctmp = CtmpProcess()
        ctmp.add_node(amalgamated_param)

        logger.info(f"网络合并完成，状态空间大小: {state_space}")
        return ctmp

    def to_networkx(self) -> nx.DiGraph:
        """
        导出为 networkx 有向图，节点名为节点标签

        Returns:
            有向图
        """
        graph = nx.DiGraph()
        labels = [node.get_label() for node in self.nodes]
        graph.add_nodes_from(labels)
        for child in self.get_node_indices():
            for parent in sorted(self.get_parent_set(child)):
                graph.add_edge(labels[parent], labels[child])
        return graph

    def export_structure(self) -> Dict:
        """
        导出网络结构

        CTBN 允许有环，拓扑序只在无环时给出

        Returns:
            结构字典
        """
        graph = self.to_networkx()
        is_acyclic = nx.is_directed_acyclic_graph(graph)
        return {
            'nodes': list(graph.nodes()),
            'edges': [list(edge) for edge in graph.edges()],
            'is_acyclic': is_acyclic,
            'topological_order': list(nx.topological_sort(graph)) if is_acyclic else None
        }
