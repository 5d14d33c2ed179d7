#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
轨迹与数据集
以及基于前向采样的轨迹生成
"""
from typing import List, Optional, Sequence

import numpy as np
from tqdm import tqdm

from ctbnlearn.process.base import NetworkProcess
from ctbnlearn.sampling import ForwardSampler
from ctbnlearn.utils.logging import setup_logger

logger = setup_logger("ctbn_tools")


class Trajectory:
    """
    一条观测轨迹

    Attributes:
        time: 时间点，形状 [样本数]
        events: 每个时间点的网络状态，形状 [样本数, 变量数]
    """

    def __init__(self, time: Sequence[float], events: Sequence[Sequence[int]]):
        """
        Args:
            time: 时间点
            events: 状态矩阵，行与时间点一一对应

        Raises:
            ValueError: 时间点与状态行数不一致
        """
        time = np.asarray(time, dtype=float)
        events = np.asarray(events, dtype=int)

        if events.ndim != 2:
            raise ValueError(f"events 必须是二维数组，实际维度: {events.ndim}")
        # 时间与状态是同一条轨迹的两部分，样本数必须一致
        if time.shape[0] != events.shape[0]:
            raise ValueError(
                f"time.shape[0] ({time.shape[0]}) 必须等于 events.shape[0] ({events.shape[0]})"
            )
        self.time = time
        self.events = events

    def __len__(self) -> int:
        return self.time.shape[0]

    def get_time(self) -> np.ndarray:
        return self.time

    def get_events(self) -> np.ndarray:
        return self.events

    @property
    def n_variables(self) -> int:
        return self.events.shape[1]


class Dataset:
    """
    轨迹集合

    所有轨迹描述同一个过程，因此变量数必须一致
    """

    def __init__(self, trajectories: List[Trajectory]):
        """
        Args:
            trajectories: 非空的轨迹列表

        Raises:
            ValueError: 轨迹为空或变量数不一致
        """
        if len(trajectories) == 0:
            raise ValueError("数据集至少需要一条轨迹")
        n_variables = trajectories[0].n_variables
        if any(trj.n_variables != n_variables for trj in trajectories):
            raise ValueError("All the trajectories must represent the same number of variables")
        self.trajectories = list(trajectories)

    def __len__(self) -> int:
        return len(self.trajectories)

    def get_trajectories(self) -> List[Trajectory]:
        return self.trajectories

    @property
    def n_variables(self) -> int:
        return self.trajectories[0].n_variables

    def sample_size(self) -> int:
        """所有轨迹中相邻样本对的总数"""
        return sum(len(trj) - 1 for trj in self.trajectories)


def trajectory_generator(
    net: NetworkProcess,
    n_trajectories: int,
    t_end: float,
    seed: Optional[int] = None,
    show_progress: bool = False
) -> Dataset:
    """
    用前向采样生成轨迹数据集

    每条轨迹在 t_end 处截断，并以最后一个状态补齐 t_end 这个时间点

    Args:
        net: 已参数化的网络
        n_trajectories: 轨迹数量
        t_end: 每条轨迹的结束时间
        seed: 随机种子
        show_progress: 是否显示进度条

    Returns:
        生成的数据集
    """
    if t_end <= 0:
        raise ValueError(f"t_end 必须为正数: {t_end}")
    logger.info(f"开始生成轨迹: {n_trajectories} 条, t_end={t_end}, seed={seed}")

    trajectories = []
    sampler = ForwardSampler(net, seed, None)

    for _ in tqdm(range(n_trajectories), desc="生成轨迹", disable=not show_progress):
        time = []
        events = []

        sample = next(sampler)
        while sample.t < t_end:
            time.append(sample.t)
            events.append(sample.state)
            sample = next(sampler)

        events.append(events[-1].copy())
        time.append(t_end)

        trajectories.append(Trajectory(np.array(time), np.vstack(events)))
        sampler.reset()

    dataset = Dataset(trajectories)
    logger.info(f"轨迹生成完成，共 {dataset.sample_size()} 个样本对")
    return dataset
