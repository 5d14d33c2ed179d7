#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
节点参数定义
每个节点的参数块：标签、取值域、条件强度矩阵（CIM）及其充分统计量
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional

import numpy as np

from ctbnlearn.utils.logging import setup_logger

logger = setup_logger("ctbn_params")


class ParamsError(Exception):
    """参数相关错误的基类"""


class ParametersNotInitialized(ParamsError):
    """参数（CIM）尚未初始化"""


class InvalidCIM(ParamsError):
    """CIM不满足合法性约束"""


class Params(ABC):
    """
    节点参数的通用接口

    构成网络节点所需的全部能力：重置、采样停留时间、采样下一状态、
    作为父节点时占用的空间（基数）以及参数校验。
    目前只有离散状态连续时间一种实现。
    """

    def __init__(self, label: str):
        self.label = label

    def get_label(self) -> str:
        """返回节点标签"""
        return self.label

    @abstractmethod
    def reset_params(self) -> None:
        """清空参数"""

    @abstractmethod
    def get_random_state_uniform(self, rng: np.random.Generator) -> int:
        """不考虑当前状态与父节点，均匀随机生成一个状态"""

    @abstractmethod
    def get_random_residence_time(self, state: int, u: int, rng: np.random.Generator) -> float:
        """给定当前状态与父节点配置 u，随机生成停留时间"""

    @abstractmethod
    def get_random_state(self, state: int, u: int, rng: np.random.Generator) -> int:
        """给定当前状态与父节点配置 u，随机生成下一个状态"""

    @abstractmethod
    def get_reserved_space_as_parent(self) -> int:
        """作为父节点时，子节点CIM中为其预留的空间"""

    @abstractmethod
    def state_to_index(self, state) -> int:
        """将状态转换为索引"""

    @abstractmethod
    def validate_params(self) -> None:
        """校验参数，不合法时抛出 ParamsError"""


class DiscreteStatesContinuousTimeParams(Params):
    """
    离散状态、连续时间节点的参数

    Attributes:
        label: 节点变量名
        domain: 有序且穷尽的状态集合
        cim: 条件强度矩阵，形状 [父配置数, 状态数, 状态数]
        transitions: 转移次数 M，形状同 cim，参数学习时写入
        residence_time: 停留时间 T，形状 [父配置数, 状态数]，参数学习时写入
    """

    def __init__(self, label: str, domain: Iterable[str]):
        super().__init__(label)
        self.domain = tuple(sorted(set(domain)))
        self._cim: Optional[np.ndarray] = None
        self.transitions: Optional[np.ndarray] = None
        self.residence_time: Optional[np.ndarray] = None

    def __repr__(self) -> str:
        shape = None if self._cim is None else self._cim.shape
        return f"DiscreteStatesContinuousTimeParams(label={self.label!r}, domain={self.domain}, cim_shape={shape})"

    @property
    def cim(self) -> Optional[np.ndarray]:
        return self._cim

    def get_cim(self) -> Optional[np.ndarray]:
        return self._cim

    def set_cim(self, cim) -> None:
        """
        设置CIM并校验

        校验失败时清空CIM（不保留不合法的状态）并重新抛出异常

        Args:
            cim: 三维数组 [父配置数, 状态数, 状态数]

        Raises:
            InvalidCIM: 无法转换为数值数组，或形状、对角线、行和不合法
        """
        self._cim = None
        try:
            try:
                self._cim = np.asarray(cim, dtype=float)
            except (TypeError, ValueError) as e:
                raise InvalidCIM(f"CIM is not a numeric array: {e}") from e
            self.validate_params()
        except ParamsError as e:
            self._cim = None
            logger.debug(f"节点 {self.label} 的CIM校验失败，已清空: {e}")
            raise

    def set_cim_unchecked(self, cim: np.ndarray) -> None:
        """不做校验直接设置CIM，仅供参数学习内部使用"""
        self._cim = cim

    def reset_params(self) -> None:
        self._cim = None
        self.transitions = None
        self.residence_time = None

    def get_random_state_uniform(self, rng: np.random.Generator) -> int:
        return int(rng.integers(0, len(self.domain)))

    def get_random_residence_time(self, state: int, u: int, rng: np.random.Generator) -> float:
        # 指数分布的逆变换采样
        cim = self._require_cim()
        # 0.0 - x 避免吸收态得到 -0.0
        lambda_ = 0.0 - cim[u, state, state]
        x = 1.0 - rng.random()
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(np.float64(-np.log(x)) / lambda_)

    def get_random_state(self, state: int, u: int, rng: np.random.Generator) -> int:
        # 按出边强度归一化后的类别分布采样，跳过对角线
        cim = self._require_cim()
        lambda_ = 0.0 - cim[u, state, state]
        if lambda_ <= 0.0:
            return state

        probabilities = np.delete(cim[u, state], state) / lambda_
        cumulative = np.cumsum(probabilities)
        urand = rng.random()
        next_state = int(np.searchsorted(cumulative, urand, side='right'))
        next_state = min(next_state, len(probabilities) - 1)

        if next_state >= state:
            next_state += 1
        return next_state

    def get_reserved_space_as_parent(self) -> int:
        return len(self.domain)

    def state_to_index(self, state) -> int:
        return int(state)

    def validate_params(self) -> None:
        domain_size = len(self.domain)

        if self._cim is None:
            raise ParametersNotInitialized("CIM not initialized")
        cim = self._cim

        # CIM 的内层维度必须等于变量的基数
        if cim.ndim != 3 or cim.shape[1] != domain_size or cim.shape[2] != domain_size:
            raise InvalidCIM(f"Incompatible shape {list(cim.shape)} with domain {domain_size}")

        if not np.all(np.isfinite(cim)):
            raise InvalidCIM("The cim must contain only finite values")

        if np.any(np.diagonal(cim, axis1=1, axis2=2) > 0.0):
            raise InvalidCIM("The diagonal of each cim must be non-positive")

        if np.any(np.abs(cim.sum(axis=2)) > np.sqrt(np.finfo(float).eps)):
            raise InvalidCIM("The sum of each row must be 0")

    def _require_cim(self) -> np.ndarray:
        if self._cim is None:
            raise ParametersNotInitialized("CIM not initialized")
        return self._cim
