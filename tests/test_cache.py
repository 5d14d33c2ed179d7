#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试CTPC的参数缓存
"""
import unittest
from ctbnlearn.parameter_learning import BayesianApproach
from ctbnlearn.params import DiscreteStatesContinuousTimeParams
from ctbnlearn.process import CtbnNetwork
from ctbnlearn.structure_learning import Cache
from ctbnlearn.tools import Dataset, Trajectory


class CountingBayesianApproach(BayesianApproach):
    """记录实际参数学习次数的估计器"""

    def __init__(self):
        super().__init__(1.0, 1.0)
        self.calls = 0

    def fit(self, net, dataset, node, parent_set=None):
        self.calls += 1
        return super().fit(net, dataset, node, parent_set)


class TestCache(unittest.TestCase):
    """测试两代缓存"""

    def setUp(self):
        """四个二值节点的网络和一条手工轨迹"""
        self.net = CtbnNetwork()
        for i in range(4):
            self.net.add_node(DiscreteStatesContinuousTimeParams(f"n{i}", ["0", "1"]))
        self.dataset = Dataset([Trajectory(
            [0.0, 0.5, 1.2, 2.0, 2.4, 3.0],
            [[0, 0, 0, 0], [1, 0, 0, 0], [1, 1, 0, 0], [1, 1, 1, 0], [0, 1, 1, 1], [0, 1, 1, 1]]
        )])
        self.estimator = CountingBayesianApproach()
        self.cache = Cache(self.estimator)

    def test_hit(self):
        """测试相同父节点集合只学习一次并返回同一对象"""
        first = self.cache.fit(self.net, self.dataset, 0, {1})
        second = self.cache.fit(self.net, self.dataset, 0, {1})
        self.assertIs(first, second)
        self.assertEqual(self.estimator.calls, 1)

    def test_key_ignores_order(self):
        """测试键与父节点顺序无关"""
        first = self.cache.fit(self.net, self.dataset, 0, {1, 2})
        second = self.cache.fit(self.net, self.dataset, 0, {2, 1})
        self.assertIs(first, second)
        self.assertEqual(self.estimator.calls, 1)

    def test_none_is_separate_key(self):
        """测试 None（网络当前父节点）与显式空集是不同的键"""
        self.cache.fit(self.net, self.dataset, 0, None)
        self.cache.fit(self.net, self.dataset, 0, set())
        self.assertEqual(self.estimator.calls, 2)

    def test_result_shape(self):
        """测试缓存返回的参数形状与父节点集合一致"""
        p = self.cache.fit(self.net, self.dataset, 0, {1, 3})
        self.assertEqual(p.get_cim().shape, (4, 2, 2))

    def test_generations(self):
        """测试小代保存不超过前沿的集合，大代保存前沿+1"""
        self.cache.fit(self.net, self.dataset, 0, set())
        self.cache.fit(self.net, self.dataset, 0, {1})
        self.assertIn(frozenset(), self.cache.cache_persistent_small)
        self.assertIn(frozenset({1}), self.cache.cache_persistent_big)
        self.assertEqual(self.cache.parent_set_size_small, 0)

    def test_swap(self):
        """测试超过前沿+1时两代互换，最小的一代被丢弃"""
        self.cache.fit(self.net, self.dataset, 0, set())
        self.cache.fit(self.net, self.dataset, 0, {1})
        self.cache.fit(self.net, self.dataset, 0, {1, 2})
        self.assertEqual(self.estimator.calls, 3)
        self.assertEqual(self.cache.parent_set_size_small, 1)
        self.assertIn(frozenset({1}), self.cache.cache_persistent_small)
        self.assertIn(frozenset({1, 2}), self.cache.cache_persistent_big)
        self.assertNotIn(frozenset(), self.cache.cache_persistent_small)

        # 上一轮的大集合仍然命中
        self.cache.fit(self.net, self.dataset, 0, {1})
        self.assertEqual(self.estimator.calls, 3)

        # 被丢弃的空集需要重新学习
        self.cache.fit(self.net, self.dataset, 0, set())
        self.assertEqual(self.estimator.calls, 4)


if __name__ == '__main__':
    unittest.main()
