#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
过程模型的通用接口与错误类型
"""
from abc import ABC, abstractmethod
from typing import Sequence, Set

from ctbnlearn.params import Params


class NetworkError(Exception):
    """网络结构相关错误的基类"""


class NodeInsertionError(NetworkError):
    """节点插入失败"""


class NetworkProcess(ABC):
    """
    网络过程的通用接口

    节点以整数索引标识，网络结构由邻接矩阵表示，
    状态为按节点索引排列的离散取值向量。
    """

    @abstractmethod
    def initialize_adj_matrix(self) -> None:
        """初始化（清空）邻接矩阵"""

    @abstractmethod
    def add_node(self, n: Params) -> int:
        """
        添加节点

        Args:
            n: 节点参数

        Returns:
            新节点的索引
        """

    @abstractmethod
    def add_edge(self, parent: int, child: int) -> None:
        """
        添加有向边

        Args:
            parent: 父节点
            child: 子节点
        """

    @abstractmethod
    def get_number_of_nodes(self) -> int:
        """节点数量"""

    def get_node_indices(self) -> range:
        """所有节点的索引"""
        return range(self.get_number_of_nodes())

    @abstractmethod
    def get_node(self, node_idx: int) -> Params:
        """获取节点参数（可直接修改）"""

    @abstractmethod
    def get_param_index_network(self, node: int, current_state: Sequence[int]) -> int:
        """
        计算给定网络状态下，访问 node 参数所用的行索引

        只有 node 父节点对应的状态分量会被使用

        Args:
            node: 节点索引
            current_state: 网络当前状态

        Returns:
            CIM 的父配置行索引
        """

    @abstractmethod
    def get_param_index_from_custom_parent_set(self, current_state: Sequence[int], parent_set: Set[int]) -> int:
        """
        与 get_param_index_network 相同，但使用显式给出的父节点集合

        Args:
            current_state: 网络当前状态
            parent_set: 父节点集合

        Returns:
            行索引
        """

    @abstractmethod
    def get_parent_set(self, node: int) -> Set[int]:
        """节点的父节点集合"""

    @abstractmethod
    def get_children_set(self, node: int) -> Set[int]:
        """节点的子节点集合"""
