#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试节点参数模块
"""
import unittest
import numpy as np
import ctbnlearn
from ctbnlearn.params import (
    DiscreteStatesContinuousTimeParams,
    InvalidCIM,
    ParametersNotInitialized,
    ParamsError
)


def generate_param(cardinality: int, label: str = "n1") -> DiscreteStatesContinuousTimeParams:
    return DiscreteStatesContinuousTimeParams(label, [str(x) for x in range(cardinality)])


class TestSetCim(unittest.TestCase):
    """测试CIM的设置与校验"""

    def setUp(self):
        """准备三状态节点"""
        self.param = generate_param(3)

    def test_domain_sorted_and_unique(self):
        """测试取值域去重并排序"""
        param = DiscreteStatesContinuousTimeParams("x", ["b", "a", "b"])
        self.assertEqual(param.domain, ("a", "b"))
        self.assertEqual(param.get_reserved_space_as_parent(), 2)

    def test_valid_cim(self):
        """测试合法CIM"""
        cim = np.array([[[-3.0, 2.0, 1.0], [1.0, -5.0, 4.0], [2.3, 1.7, -4.0]]])
        self.param.set_cim(cim)
        np.testing.assert_allclose(self.param.get_cim(), cim)

    def test_absorbing_state_allowed(self):
        """测试全零行（吸收态）是合法的"""
        cim = np.array([[[-3.0, 2.0, 1.0], [0.0, 0.0, 0.0], [2.3, 1.7, -4.0]]])
        self.param.set_cim(cim)
        self.assertIsNotNone(self.param.get_cim())

    def test_positive_diagonal(self):
        """测试对角线为正时报错并清空CIM"""
        cim = np.array([[[2.0, -3.0, 1.0], [1.0, -5.0, 4.0], [2.3, 1.7, -4.0]]])
        with self.assertRaises(InvalidCIM) as ctx:
            self.param.set_cim(cim)
        self.assertIn("diagonal", str(ctx.exception))
        self.assertIsNone(self.param.get_cim())

    def test_wrong_shape(self):
        """测试形状与取值域不符"""
        cim = np.array([[[-3.0, 3.0], [2.0, -2.0]]])
        with self.assertRaises(InvalidCIM) as ctx:
            self.param.set_cim(cim)
        self.assertIn("Incompatible shape", str(ctx.exception))
        self.assertIsNone(self.param.get_cim())

    def test_two_dimensional_cim_rejected(self):
        """测试二维数组不是合法CIM"""
        with self.assertRaises(InvalidCIM):
            self.param.set_cim(np.array([[-3.0, 2.0, 1.0], [1.0, -5.0, 4.0], [2.3, 1.7, -4.0]]))

    def test_row_sum_not_zero(self):
        """测试行和不为零"""
        cim = np.array([[[-3.0, 2.0, 1.0], [1.0, -5.0, 4.0], [2.0, 1.7, -4.0]]])
        with self.assertRaises(InvalidCIM) as ctx:
            self.param.set_cim(cim)
        self.assertIn("sum", str(ctx.exception))
        self.assertIsNone(self.param.get_cim())

    def test_previous_cim_cleared_on_failure(self):
        """测试设置失败会清除之前合法的CIM"""
        self.param.set_cim(np.array([[[-3.0, 2.0, 1.0], [1.0, -5.0, 4.0], [2.3, 1.7, -4.0]]]))
        with self.assertRaises(InvalidCIM):
            self.param.set_cim(np.array([[[-3.0, 3.0], [2.0, -2.0]]]))
        self.assertIsNone(self.param.get_cim())

    def test_ragged_cim_rejected(self):
        """测试无法转换为数组的CIM被拒绝，并清除之前合法的CIM"""
        self.param.set_cim(np.array([[[-3.0, 2.0, 1.0], [1.0, -5.0, 4.0], [2.3, 1.7, -4.0]]]))
        with self.assertRaises(InvalidCIM):
            self.param.set_cim([[[-3.0, 2.0, 1.0], [1.0, -1.0], [2.3, 1.7, -4.0]]])
        self.assertIsNone(self.param.get_cim())

    def test_non_numeric_cim_rejected(self):
        """测试非数值CIM被拒绝"""
        with self.assertRaises(InvalidCIM):
            self.param.set_cim([[["a", "b", "c"], ["d", "e", "f"], ["g", "h", "i"]]])
        self.assertIsNone(self.param.get_cim())

    def test_nan_cim_rejected(self):
        """测试含NaN的CIM被拒绝"""
        cim = np.array([[[np.nan, np.nan, np.nan], [1.0, -5.0, 4.0], [2.3, 1.7, -4.0]]])
        with self.assertRaises(InvalidCIM):
            self.param.set_cim(cim)
        self.assertIsNone(self.param.get_cim())

    def test_infinite_cim_rejected(self):
        """测试含无穷值的CIM被拒绝"""
        cim = np.array([[[-np.inf, np.inf, 0.0], [1.0, -5.0, 4.0], [2.3, 1.7, -4.0]]])
        with self.assertRaises(InvalidCIM):
            self.param.set_cim(cim)

    def test_validate_without_cim(self):
        """测试未初始化时校验报错"""
        with self.assertRaises(ParametersNotInitialized):
            self.param.validate_params()

    def test_reset_params(self):
        """测试重置清空CIM和充分统计量"""
        self.param.set_cim(np.array([[[-3.0, 2.0, 1.0], [1.0, -5.0, 4.0], [2.3, 1.7, -4.0]]]))
        self.param.transitions = np.zeros((1, 3, 3))
        self.param.reset_params()
        self.assertIsNone(self.param.get_cim())
        self.assertIsNone(self.param.transitions)
        self.assertIsNone(self.param.residence_time)


class TestRandomDraws(unittest.TestCase):
    """测试随机抽样"""

    def setUp(self):
        """准备参数和随机数生成器"""
        self.param = generate_param(3)
        self.param.set_cim(np.array([[[-3.0, 2.0, 1.0], [1.0, -5.0, 4.0], [2.3, 1.7, -4.0]]]))
        self.rng = np.random.default_rng(6347747169756259)

    def test_uniform_state(self):
        """测试均匀初始状态在取值范围内且覆盖所有状态"""
        states = {self.param.get_random_state_uniform(self.rng) for _ in range(200)}
        self.assertEqual(states, {0, 1, 2})

    def test_random_state_never_current(self):
        """测试转移目标状态不等于当前状态"""
        for _ in range(500):
            self.assertNotEqual(self.param.get_random_state(1, 0, self.rng), 1)

    def test_random_state_frequencies(self):
        """测试转移目标状态的频率与强度成比例"""
        n = 30000
        draws = np.array([self.param.get_random_state(0, 0, self.rng) for _ in range(n)])
        self.assertAlmostEqual(np.mean(draws == 1), 2.0 / 3.0, delta=0.02)
        self.assertAlmostEqual(np.mean(draws == 2), 1.0 / 3.0, delta=0.02)

    def test_residence_time_mean(self):
        """测试停留时间服从强度为 -cim[u,s,s] 的指数分布"""
        n = 20000
        times = np.array([self.param.get_random_residence_time(1, 0, self.rng) for _ in range(n)])
        self.assertTrue(np.all(times >= 0.0))
        self.assertAlmostEqual(times.mean(), 1.0 / 5.0, delta=0.01)

    def test_absorbing_state(self):
        """测试吸收态：停留时间无穷大，状态不变"""
        param = generate_param(2)
        param.set_cim(np.array([[[-1.0, 1.0], [0.0, 0.0]]]))
        self.assertTrue(np.isinf(param.get_random_residence_time(1, 0, self.rng)))
        self.assertEqual(param.get_random_state(1, 0, self.rng), 1)

    def test_draws_without_cim(self):
        """测试未初始化时抽样报错"""
        param = generate_param(2)
        with self.assertRaises(ParametersNotInitialized):
            param.get_random_residence_time(0, 0, self.rng)
        with self.assertRaises(ParametersNotInitialized):
            param.get_random_state(0, 0, self.rng)


class TestErrors(unittest.TestCase):
    """测试参数异常的层次"""

    def test_public_errors(self):
        """测试公开的异常都继承自 ParamsError"""
        for error in (ParametersNotInitialized, InvalidCIM):
            self.assertTrue(issubclass(error, ParamsError))
        self.assertNotIn('UnsupportedMethod', ctbnlearn.__all__)


if __name__ == '__main__':
    unittest.main()
