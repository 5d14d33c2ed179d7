#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
前向采样
基于相互竞争的指数时钟模拟CTBN的异步动态
"""
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Optional, Sequence

import numpy as np

from ctbnlearn.process.base import NetworkProcess


class Sample(NamedTuple):
    """一个采样点：时间 t 与该时刻的网络状态"""
    t: float
    state: np.ndarray


class Sampler(ABC):
    """可重置的无限采样序列"""

    def __iter__(self):
        return self

    @abstractmethod
    def __next__(self) -> Sample:
        """生成下一个采样点"""

    @abstractmethod
    def reset(self) -> None:
        """回到 t=0"""


class ForwardSampler(Sampler):
    """
    前向采样器

    每个节点维护一个"预定转移时间"；没有预定时间的节点按当前状态与父配置
    抽取停留时间。全局最早的节点发生转移，随后清除该节点及其所有子节点
    的预定时间（它们的强度依赖刚刚改变的父状态）。

    采样器只属于单个调用者，不可在多个任务之间共享。
    """

    def __init__(
        self,
        net: NetworkProcess,
        seed: Optional[int] = None,
        initial_state: Optional[Sequence[int]] = None
    ):
        """
        初始化采样器

        Args:
            net: 已参数化的网络
            seed: 随机种子，None 表示使用系统熵
            initial_state: 初始状态，None 表示每次重置时均匀随机抽取
        """
        self.net = net
        self.rng = np.random.default_rng(seed)
        self.initial_state = None if initial_state is None else np.asarray(initial_state, dtype=int)
        self.current_time = 0.0
        self.current_state: np.ndarray = np.zeros(0, dtype=int)
        self.next_transitions: List[Optional[float]] = []
        self.reset()

    def reset(self) -> None:
        # 随机数流继续，不重新播种
        self.current_time = 0.0
        if self.initial_state is None:
            self.current_state = np.array(
                [self.net.get_node(x).get_random_state_uniform(self.rng) for x in self.net.get_node_indices()],
                dtype=int
            )
        else:
            self.current_state = self.initial_state.copy()
        self.next_transitions = [None for _ in self.net.get_node_indices()]

    def __next__(self) -> Sample:
        ret_time = self.current_time
        ret_state = self.current_state.copy()

        for idx, val in enumerate(self.next_transitions):
            if val is None:
                node = self.net.get_node(idx)
                self.next_transitions[idx] = node.get_random_residence_time(
                    node.state_to_index(self.current_state[idx]),
                    self.net.get_param_index_network(idx, self.current_state),
                    self.rng
                ) + self.current_time

        next_node_transition = int(np.argmin(self.next_transitions))
        self.current_time = self.next_transitions[next_node_transition]

        node = self.net.get_node(next_node_transition)
        self.current_state[next_node_transition] = node.get_random_state(
            node.state_to_index(self.current_state[next_node_transition]),
            self.net.get_param_index_network(next_node_transition, self.current_state),
            self.rng
        )

        self.next_transitions[next_node_transition] = None
        for child in self.net.get_children_set(next_node_transition):
            self.next_transitions[child] = None

        return Sample(ret_time, ret_state)
