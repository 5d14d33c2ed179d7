#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
实验Pipeline
真实网络 -> 轨迹数据 -> 结构学习 -> 参数重估 -> 结构评估 -> 汇总
"""
from typing import Any, Dict, Optional

import numpy as np

from ctbnlearn.evaluation import compare_parent_sets, structure_metrics
from ctbnlearn.parameter_learning import BayesianApproach, MLE, ParameterLearning
from ctbnlearn.params import DiscreteStatesContinuousTimeParams
from ctbnlearn.process import CtbnNetwork
from ctbnlearn.structure_learning import (
    BIC,
    CTPC,
    ChiSquare,
    F,
    HillClimbing,
    LogLikelihood,
    StructureLearningAlgorithm
)
from ctbnlearn.tools import Dataset, trajectory_generator
from ctbnlearn.utils.config import ensure_dir, get_section
from ctbnlearn.utils.io import dataset_from_frame, load_data, save_metadata
from ctbnlearn.utils.logging import set_level, set_log_dir, setup_logger

logger = setup_logger("ctbn_pipeline")

DATA_DEFAULTS = {'path': None, 'n_trajectories': 100, 't_end': 100.0, 'seed': None}
PARAMETER_LEARNING_DEFAULTS = {'method': 'bayesian', 'alpha': 1.0, 'tau': 1.0}
STRUCTURE_LEARNING_DEFAULTS = {
    'algorithm': 'hill_climbing',
    'score': 'bic',
    'alpha': 1.0,
    'tau': 1.0,
    'max_parent_set': None,
    'f_alpha': 1e-6,
    'chi2_alpha': 1e-4,
    'n_jobs': -1
}
OUTPUT_DEFAULTS = {'summary_dir': 'outputs'}


class CTBNLearningPipeline:
    """
    CTBN结构学习Pipeline

    流程：
    1. 由配置构建真实网络（节点、边、CIM）
    2. 获取数据：读取观测轨迹文件，或从真实网络前向采样
    3. 结构学习（爬山法或CTPC）
    4. 在学到的结构上重新估计每个节点的参数
    5. 比较学到的父节点集合与真实父节点集合，保存YAML汇总
    """

    SUPPORTED_ALGORITHMS = ['hill_climbing', 'ctpc']
    SUPPORTED_SCORES = ['bic', 'log_likelihood']
    SUPPORTED_PARAMETER_LEARNING = ['mle', 'bayesian']

    def __init__(self, config: Dict[str, Any]):
        """
        初始化Pipeline

        Args:
            config: 配置字典（见 config.yaml）
        """
        self.config = config
        logging_config = config.get('logging') or {}
        if logging_config.get('log_dir'):
            set_log_dir(str(logging_config['log_dir']))
        if logging_config.get('level'):
            set_level(str(logging_config['level']).upper())

        self.data_config = get_section(config, 'data', DATA_DEFAULTS)
        self.parameter_learning_config = get_section(config, 'parameter_learning', PARAMETER_LEARNING_DEFAULTS)
        self.structure_learning_config = get_section(config, 'structure_learning', STRUCTURE_LEARNING_DEFAULTS)
        self.output_config = get_section(config, 'output', OUTPUT_DEFAULTS)

        logger.info("=" * 80)
        logger.info("CTBN Learning Pipeline 初始化")
        logger.info("=" * 80)

    def run(self, algorithm: Optional[str] = None, seed: Optional[int] = None) -> Dict[str, Any]:
        """
        运行完整Pipeline

        Args:
            algorithm: 覆盖配置中的结构学习算法
            seed: 覆盖配置中的随机种子

        Returns:
            汇总字典
        """
        algorithm = algorithm or self.structure_learning_config['algorithm']
        if algorithm not in self.SUPPORTED_ALGORITHMS:
            raise ValueError(f"不支持的算法: {algorithm}。支持的算法: {self.SUPPORTED_ALGORITHMS}")
        if seed is None:
            seed = self.data_config['seed']

        # ========== 阶段1: 构建真实网络 ==========
        logger.info("【阶段1】构建网络")
        true_net = self.build_network()

        # ========== 阶段2: 获取轨迹数据 ==========
        logger.info("【阶段2】获取轨迹数据")
        dataset = self.load_dataset(true_net, seed)

        # ========== 阶段3: 结构学习 ==========
        logger.info(f"【阶段3】结构学习 ({algorithm})")
        learned_net = self._empty_copy(true_net)
        learner = self.build_structure_learner(algorithm)
        learner.fit_transform(learned_net, dataset)

        # ========== 阶段4: 参数重估 ==========
        logger.info("【阶段4】在学到的结构上估计参数")
        self._refit_parameters(learned_net, dataset)

        # ========== 阶段5: 结构评估 ==========
        logger.info("【阶段5】结构评估")
        summary = self._generate_summary(true_net, learned_net, dataset, algorithm, seed)

        summary_path = self._save_summary(summary, algorithm)
        summary['summary_file'] = summary_path

        logger.info("=" * 80)
        logger.info(f"Pipeline 完成，汇总已保存到 {summary_path}")
        logger.info("=" * 80)
        return summary

    def build_network(self) -> CtbnNetwork:
        """
        由配置构建网络

        边可以用节点标签或索引表示；边全部加入之后才设置CIM，
        因为加边会清空子节点的参数。

        Returns:
            已参数化的网络

        Raises:
            ValueError: 配置中没有节点，或边引用了未知节点
        """
        network_config = self.config.get('network') or {}
        nodes_config = network_config.get('nodes') or []
        if not nodes_config:
            raise ValueError("配置中缺少 network.nodes")

        net = CtbnNetwork()
        label_to_idx = {}
        for node_config in nodes_config:
            label = str(node_config['label'])
            domain = [str(x) for x in node_config['domain']]
            label_to_idx[label] = net.add_node(DiscreteStatesContinuousTimeParams(label, domain))

        def resolve(ref) -> int:
            if isinstance(ref, int) and 0 <= ref < net.get_number_of_nodes():
                return ref
            if str(ref) in label_to_idx:
                return label_to_idx[str(ref)]
            raise ValueError(f"边引用了未知节点: {ref}")

        net.initialize_adj_matrix()
        for parent, child in network_config.get('edges') or []:
            net.add_edge(resolve(parent), resolve(child))

        for idx, node_config in enumerate(nodes_config):
            if node_config.get('cim') is not None:
                net.get_node(idx).set_cim(np.array(node_config['cim'], dtype=float))

        logger.info(
            f"网络已构建: {net.get_number_of_nodes()} 个节点, "
            f"{len(network_config.get('edges') or [])} 条边"
        )
        return net

    def load_dataset(self, net: CtbnNetwork, seed: Optional[int]) -> Dataset:
        """
        获取数据集：配置了 data.path 时读取文件，否则从网络采样

        Args:
            net: 真实网络（采样时需要所有CIM）
            seed: 随机种子

        Returns:
            数据集
        """
        path = self.data_config['path']
        if path:
            labels = [net.get_node(i).get_label() for i in net.get_node_indices()]
            dataset = dataset_from_frame(load_data(path), variables=labels)
            logger.info(f"从 {path} 读取 {len(dataset)} 条轨迹")
            return dataset

        return trajectory_generator(
            net,
            int(self.data_config['n_trajectories']),
            float(self.data_config['t_end']),
            seed=seed,
            show_progress=True
        )

    def build_parameter_learning(self) -> ParameterLearning:
        """按配置创建参数估计器"""
        method = self.parameter_learning_config['method']
        if method == 'mle':
            return MLE()
        if method == 'bayesian':
            return BayesianApproach(
                float(self.parameter_learning_config['alpha']),
                float(self.parameter_learning_config['tau'])
            )
        raise ValueError(f"不支持的参数学习方法: {method}。支持的方法: {self.SUPPORTED_PARAMETER_LEARNING}")

    def build_structure_learner(self, algorithm: str) -> StructureLearningAlgorithm:
        """
        按配置创建结构学习算法

        Args:
            algorithm: 'hill_climbing' 或 'ctpc'

        Returns:
            结构学习算法
        """
        cfg = self.structure_learning_config
        n_jobs = int(cfg['n_jobs'])

        if algorithm == 'hill_climbing':
            score = cfg['score']
            if score == 'bic':
                score_function = BIC(float(cfg['alpha']), float(cfg['tau']))
            elif score == 'log_likelihood':
                score_function = LogLikelihood(float(cfg['alpha']), float(cfg['tau']))
            else:
                raise ValueError(f"不支持的评分函数: {score}。支持的评分函数: {self.SUPPORTED_SCORES}")
            max_parent_set = cfg['max_parent_set']
            return HillClimbing(
                score_function,
                None if max_parent_set is None else int(max_parent_set),
                n_jobs=n_jobs
            )

        if algorithm == 'ctpc':
            return CTPC(
                self.build_parameter_learning(),
                F(float(cfg['f_alpha'])),
                ChiSquare(float(cfg['chi2_alpha'])),
                n_jobs=n_jobs
            )

        raise ValueError(f"不支持的算法: {algorithm}。支持的算法: {self.SUPPORTED_ALGORITHMS}")

    @staticmethod
    def _empty_copy(net: CtbnNetwork) -> CtbnNetwork:
        """同样节点、没有边和参数的新网络"""
        learned = CtbnNetwork()
        for idx in net.get_node_indices():
            node = net.get_node(idx)
            learned.add_node(DiscreteStatesContinuousTimeParams(node.get_label(), node.domain))
        return learned

    def _refit_parameters(self, net: CtbnNetwork, dataset: Dataset) -> None:
        parameter_learning = self.build_parameter_learning()
        for idx in net.get_node_indices():
            net.nodes[idx] = parameter_learning.fit(net, dataset, idx)
        logger.info(f"参数重估完成 ({type(parameter_learning).__name__})")

    def _generate_summary(
        self,
        true_net: CtbnNetwork,
        learned_net: CtbnNetwork,
        dataset: Dataset,
        algorithm: str,
        seed: Optional[int]
    ) -> Dict[str, Any]:
        parent_sets = compare_parent_sets(true_net, learned_net)
        for row in parent_sets:
            status = "一致" if row['match'] else f"缺失 {row['missing']}, 多余 {row['extra']}"
            logger.info(
                f"  节点 {row['node']}: 真实 {row['true_parents']}, 学到 {row['learned_parents']} ({status})"
            )

        return {
            'algorithm': algorithm,
            'seed': seed,
            'data': {
                'n_trajectories': len(dataset),
                'n_variables': dataset.n_variables,
                'sample_size': dataset.sample_size()
            },
            'metrics': structure_metrics(true_net, learned_net),
            'parent_sets': parent_sets,
            'learned_structure': learned_net.export_structure(),
            'learned_cims': {
                learned_net.get_node(idx).get_label(): learned_net.get_node(idx).get_cim().tolist()
                for idx in learned_net.get_node_indices()
            }
        }

    def _save_summary(self, summary: Dict[str, Any], algorithm: str) -> str:
        output_dir = self.output_config['summary_dir']
        ensure_dir(output_dir)
        output_path = f"{output_dir}/summary_{algorithm}.yaml"
        save_metadata(summary, output_path)
        return output_path
