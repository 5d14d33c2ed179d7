#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
输入输出工具
轨迹数据与 DataFrame（长格式）之间的转换，以及元数据保存
"""
from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd
import yaml

from ctbnlearn.tools import Dataset, Trajectory

TRAJECTORY_COLUMN = 'trajectory'
TIME_COLUMN = 'time'


def load_data(file_path: str) -> pd.DataFrame:
    """
    加载数据文件

    Args:
        file_path: 文件路径

    Returns:
        DataFrame
    """
    if file_path.endswith('.parquet'):
        return pd.read_parquet(file_path)
    elif file_path.endswith('.csv'):
        return pd.read_csv(file_path, encoding='utf-8-sig')
    else:
        raise ValueError(f"不支持的文件格式: {file_path}")


def save_data(df: pd.DataFrame, file_path: str) -> None:
    """
    保存数据文件

    Args:
        df: DataFrame
        file_path: 文件路径
    """
    if file_path.endswith('.parquet'):
        df.to_parquet(file_path, index=False)
    elif file_path.endswith('.csv'):
        df.to_csv(file_path, index=False, encoding='utf-8-sig')
    else:
        raise ValueError(f"不支持的文件格式: {file_path}")


def save_metadata(metadata: Dict[str, Any], output_path: str) -> None:
    """
    保存元数据到YAML文件

    Args:
        metadata: 元数据字典
        output_path: 输出路径
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.dump(metadata, f, allow_unicode=True, default_flow_style=False, sort_keys=False)


def trajectory_to_frame(
    trajectory: Trajectory,
    variables: Optional[Sequence[str]] = None,
    trajectory_id: int = 0
) -> pd.DataFrame:
    """
    将一条轨迹转换为长格式 DataFrame

    Args:
        trajectory: 轨迹
        variables: 变量列名，默认 x0, x1, ...
        trajectory_id: 写入 trajectory 列的编号

    Returns:
        列为 trajectory, time, 各变量 的 DataFrame
    """
    if variables is None:
        variables = [f"x{i}" for i in range(trajectory.n_variables)]
    if len(variables) != trajectory.n_variables:
        raise ValueError(f"变量名数量 ({len(variables)}) 与轨迹变量数 ({trajectory.n_variables}) 不一致")

    df = pd.DataFrame(trajectory.get_events(), columns=list(variables))
    df.insert(0, TIME_COLUMN, trajectory.get_time())
    df.insert(0, TRAJECTORY_COLUMN, trajectory_id)
    return df


def dataset_to_frame(dataset: Dataset, variables: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """
    将数据集转换为长格式 DataFrame，轨迹按顺序编号

    Args:
        dataset: 数据集
        variables: 变量列名

    Returns:
        DataFrame
    """
    frames = [
        trajectory_to_frame(trj, variables, trajectory_id=i)
        for i, trj in enumerate(dataset.get_trajectories())
    ]
    return pd.concat(frames, ignore_index=True)


def dataset_from_frame(df: pd.DataFrame, variables: Optional[Sequence[str]] = None) -> Dataset:
    """
    从长格式 DataFrame 构建数据集

    每个 trajectory 编号对应一条轨迹，轨迹内按 time 排序；
    变量列默认为除 trajectory 与 time 以外的所有列（保持原列顺序）。

    Args:
        df: DataFrame
        variables: 变量列名，决定变量的索引顺序

    Returns:
        数据集

    Raises:
        ValueError: 缺少必需列
    """
    missing = [c for c in (TRAJECTORY_COLUMN, TIME_COLUMN) if c not in df.columns]
    if missing:
        raise ValueError(f"缺少必需列: {missing}")

    if variables is None:
        variables = [c for c in df.columns if c not in (TRAJECTORY_COLUMN, TIME_COLUMN)]
    variables = list(variables)

    trajectories = []
    for _, group in df.groupby(TRAJECTORY_COLUMN, sort=True):
        group = group.sort_values(TIME_COLUMN, kind='stable')
        trajectories.append(Trajectory(
            group[TIME_COLUMN].to_numpy(dtype=float),
            group[variables].to_numpy(dtype=np.int64)
        ))
    return Dataset(trajectories)
