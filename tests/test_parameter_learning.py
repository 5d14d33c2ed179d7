#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试参数学习
"""
import unittest
import numpy as np
from ctbnlearn.parameter_learning import MLE, BayesianApproach, sufficient_statistics
from ctbnlearn.params import DiscreteStatesContinuousTimeParams
from ctbnlearn.process import CtbnNetwork
from ctbnlearn.tools import Dataset, Trajectory, trajectory_generator

BINARY_CIM_N2 = np.array([
    [[-1.0, 1.0], [4.0, -4.0]],
    [[-6.0, 6.0], [2.0, -2.0]]
])

TERNARY_CIM_N1 = np.array([
    [[-3.0, 2.0, 1.0], [1.5, -2.0, 0.5], [0.4, 0.6, -1.0]]
])

TERNARY_CIM_N2 = np.array([
    [[-1.0, 0.5, 0.5], [3.0, -4.0, 1.0], [0.9, 0.1, -1.0]],
    [[-6.0, 2.0, 4.0], [1.5, -2.0, 0.5], [3.0, 1.0, -4.0]],
    [[-1.0, 0.1, 0.9], [2.0, -2.5, 0.5], [0.9, 0.1, -1.0]]
])


def generate_chain(cardinality: int) -> CtbnNetwork:
    """n1 -> n2，两个节点基数相同，未设置CIM"""
    net = CtbnNetwork()
    domain = [str(x) for x in range(cardinality)]
    n1 = net.add_node(DiscreteStatesContinuousTimeParams("n1", domain))
    n2 = net.add_node(DiscreteStatesContinuousTimeParams("n2", domain))
    net.add_edge(n1, n2)
    return net


class TestSufficientStatistics(unittest.TestCase):
    """测试充分统计量与估计器在手工数据上的结果"""

    def setUp(self):
        """n1 -> n2 的二值网络和一条手工轨迹"""
        self.net = generate_chain(2)
        trj = Trajectory(
            [0.0, 1.0, 3.0, 4.0, 6.0],
            [[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]
        )
        self.dataset = Dataset([trj])

    def test_sufficient_statistics(self):
        """测试转移次数和停留时间"""
        M, T = sufficient_statistics(self.net, self.dataset, 1, {0})
        np.testing.assert_array_equal(M, [[[0, 0], [1, 0]], [[0, 1], [0, 0]]])
        np.testing.assert_allclose(T, [[1.0, 2.0], [2.0, 1.0]])

    def test_sufficient_statistics_without_parents(self):
        """测试空父节点集合只有一个父配置"""
        M, T = sufficient_statistics(self.net, self.dataset, 1, set())
        np.testing.assert_array_equal(M, [[[0, 1], [1, 0]]])
        np.testing.assert_allclose(T, [[3.0, 3.0]])

    def test_total_residence_time(self):
        """测试停留时间之和等于轨迹总时长"""
        M, T = sufficient_statistics(self.net, self.dataset, 0, {1})
        self.assertAlmostEqual(T.sum(), 6.0)
        # n1 在轨迹中改变了两次
        self.assertEqual(M.sum(), 2)

    def test_mle(self):
        """测试MLE：M/T，对角线为负行和"""
        p = MLE().fit(self.net, self.dataset, 1, {0})
        expected = np.array([
            [[0.0, 0.0], [0.5, -0.5]],
            [[-0.5, 0.5], [0.0, 0.0]]
        ])
        np.testing.assert_allclose(p.get_cim(), expected)

    def test_bayesian(self):
        """测试贝叶斯估计：先验强度按父配置数平均分配"""
        p = BayesianApproach(1.0, 1.0).fit(self.net, self.dataset, 1, {0})
        # alpha/q = tau/q = 0.5
        expected = np.array([
            [[-1.0 / 3.0, 1.0 / 3.0], [0.6, -0.6]],
            [[-0.6, 0.6], [1.0 / 3.0, -1.0 / 3.0]]
        ])
        np.testing.assert_allclose(p.get_cim(), expected)

    def test_fit_returns_copy(self):
        """测试估计结果是副本，不修改网络中的节点"""
        p = MLE().fit(self.net, self.dataset, 1)
        self.assertIsNot(p, self.net.get_node(1))
        self.assertIsNone(self.net.get_node(1).get_cim())
        self.assertEqual(p.get_label(), "n2")
        self.assertEqual(p.get_cim().shape, (2, 2, 2))
        self.assertEqual(p.transitions.shape, (2, 2, 2))
        self.assertEqual(p.residence_time.shape, (2, 2))

    def test_mle_warns_on_unvisited_state(self):
        """测试MLE在停留时间为0时记录警告"""
        dataset = Dataset([Trajectory([0.0, 1.0], [[0, 0], [0, 0]])])
        with self.assertLogs('ctbn_parameter_learning', level='WARNING'):
            p = MLE().fit(self.net, dataset, 1, set())
        self.assertFalse(np.all(np.isfinite(p.get_cim())))


class TestLearnCim(unittest.TestCase):
    """测试从生成的轨迹中恢复CIM"""

    @classmethod
    def setUpClass(cls):
        """生成二值与三值网络的数据"""
        cls.binary_net = generate_chain(2)
        cls.binary_net.get_node(0).set_cim(np.array([[[-3.0, 3.0], [2.0, -2.0]]]))
        cls.binary_net.get_node(1).set_cim(BINARY_CIM_N2)
        cls.binary_data = trajectory_generator(cls.binary_net, 100, 100.0, seed=6347747169756259)

        cls.ternary_net = generate_chain(3)
        cls.ternary_net.get_node(0).set_cim(TERNARY_CIM_N1)
        cls.ternary_net.get_node(1).set_cim(TERNARY_CIM_N2)
        cls.ternary_data = trajectory_generator(cls.ternary_net, 100, 100.0, seed=6347747169756259)

    def _check(self, estimator, net, data, node, expected):
        p = estimator.fit(net, data, node)
        self.assertEqual(p.get_cim().shape, expected.shape)
        np.testing.assert_allclose(p.get_cim(), expected, atol=0.1)

    def test_learn_binary_cim_mle(self):
        """测试MLE恢复二值子节点的CIM"""
        self._check(MLE(), self.binary_net, self.binary_data, 1, BINARY_CIM_N2)

    def test_learn_binary_cim_bayesian(self):
        """测试贝叶斯估计恢复二值子节点的CIM"""
        self._check(BayesianApproach(1.0, 1.0), self.binary_net, self.binary_data, 1, BINARY_CIM_N2)

    def test_learn_ternary_cim_mle(self):
        """测试MLE恢复三值子节点的CIM"""
        self._check(MLE(), self.ternary_net, self.ternary_data, 1, TERNARY_CIM_N2)

    def test_learn_ternary_cim_bayesian(self):
        """测试贝叶斯估计恢复三值子节点的CIM"""
        self._check(BayesianApproach(1.0, 1.0), self.ternary_net, self.ternary_data, 1, TERNARY_CIM_N2)

    def test_learn_ternary_cim_no_parents(self):
        """测试恢复根节点的CIM"""
        self._check(MLE(), self.ternary_net, self.ternary_data, 0, TERNARY_CIM_N1)
        self._check(BayesianApproach(1.0, 1.0), self.ternary_net, self.ternary_data, 0, TERNARY_CIM_N1)


if __name__ == '__main__':
    unittest.main()
