#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
结构学习评估指标
把邻接矩阵的非对角元素视为二分类样本，计算 Precision, Recall, F1 等
"""
from typing import Dict, List

import numpy as np
from sklearn.metrics import (
    precision_score,
    recall_score,
    f1_score,
    confusion_matrix
)

from ctbnlearn.process.base import NetworkProcess
from ctbnlearn.utils.logging import setup_logger

logger = setup_logger("ctbn_evaluation")


def adjacency_of(net: NetworkProcess) -> np.ndarray:
    """
    由父节点集合构造 0/1 邻接矩阵，adj[parent, child] == 1 表示存在边

    Args:
        net: 网络

    Returns:
        邻接矩阵 [节点数, 节点数]
    """
    n = net.get_number_of_nodes()
    adj = np.zeros((n, n), dtype=int)
    for child in net.get_node_indices():
        for parent in net.get_parent_set(child):
            adj[parent, child] = 1
    return adj


def structure_metrics(true_net: NetworkProcess, learned_net: NetworkProcess) -> Dict[str, float]:
    """
    比较真实结构与学到的结构

    只考虑有向边，方向相反的边同时计为一条缺失与一条多余，
    SHD 为缺失边数与多余边数之和。

    Args:
        true_net: 真实网络
        learned_net: 学到的网络

    Returns:
        指标字典

    Raises:
        ValueError: 两个网络的节点数不同
    """
    if true_net.get_number_of_nodes() != learned_net.get_number_of_nodes():
        raise ValueError("两个网络的节点数必须相同")

    true_adj = adjacency_of(true_net)
    learned_adj = adjacency_of(learned_net)
    off_diagonal = ~np.eye(true_adj.shape[0], dtype=bool)

    y_true = true_adj[off_diagonal]
    y_pred = learned_adj[off_diagonal]

    metrics = {}
    if y_true.size == 0:
        # 单节点网络没有可能的边
        metrics.update(precision=0.0, recall=0.0, f1=0.0)
        tn = fp = fn = tp = 0
    else:
        metrics['precision'] = float(precision_score(y_true, y_pred, zero_division=0))
        metrics['recall'] = float(recall_score(y_true, y_pred, zero_division=0))
        metrics['f1'] = float(f1_score(y_true, y_pred, zero_division=0))
        tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()

    metrics['true_positive'] = int(tp)
    metrics['false_positive'] = int(fp)
    metrics['false_negative'] = int(fn)
    metrics['true_negative'] = int(tn)
    metrics['shd'] = int(fp + fn)

    logger.info(
        f"结构评估: Precision={metrics['precision']:.4f}, Recall={metrics['recall']:.4f}, "
        f"F1={metrics['f1']:.4f}, SHD={metrics['shd']}"
    )
    return metrics


def compare_parent_sets(true_net: NetworkProcess, learned_net: NetworkProcess) -> List[Dict]:
    """
    逐节点比较父节点集合

    Returns:
        每个节点一条记录：node, true_parents, learned_parents, missing, extra, match
    """
    rows = []
    for node in true_net.get_node_indices():
        true_parents = true_net.get_parent_set(node)
        learned_parents = learned_net.get_parent_set(node)
        rows.append({
            'node': node,
            'true_parents': sorted(true_parents),
            'learned_parents': sorted(learned_parents),
            'missing': sorted(true_parents - learned_parents),
            'extra': sorted(learned_parents - true_parents),
            'match': true_parents == learned_parents
        })
    return rows
