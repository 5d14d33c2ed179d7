#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
主执行脚本
从配置构建网络、生成或读取轨迹、学习结构并输出汇总
"""
import argparse

from ctbnlearn.pipeline import CTBNLearningPipeline
from ctbnlearn.utils import load_config, setup_logger

logger = setup_logger("ctbn_main")


def main():
    """主函数"""
    parser = argparse.ArgumentParser(description='连续时间贝叶斯网络 - 结构学习实验')
    parser.add_argument('--config', type=str, default='config.yaml', help='配置文件路径')
    parser.add_argument('--algorithm', type=str, nargs='+',
                        choices=['hill_climbing', 'ctpc', 'all'],
                        default=None, help='结构学习算法，默认使用配置中的算法')
    parser.add_argument('--seed', type=int, default=None, help='随机种子，覆盖配置中的 data.seed')

    args = parser.parse_args()

    # 加载配置
    config = load_config(args.config)
    pipeline = CTBNLearningPipeline(config)

    # 确定要运行的算法
    if args.algorithm is None:
        algorithms = [None]
    elif 'all' in args.algorithm:
        algorithms = CTBNLearningPipeline.SUPPORTED_ALGORITHMS
    else:
        algorithms = args.algorithm

    results = {}
    for algorithm in algorithms:
        try:
            summary = pipeline.run(algorithm, args.seed)
            results[summary['algorithm']] = summary
        except Exception as e:
            logger.error(f"运行算法 {algorithm} 时出错: {e}", exc_info=True)
            continue

    # 打印汇总
    for algorithm, summary in results.items():
        metrics = summary['metrics']
        logger.info(
            f"{algorithm}: F1={metrics['f1']:.4f}, SHD={metrics['shd']}, "
            f"汇总文件 {summary['summary_file']}"
        )

    logger.info("所有任务完成！")


if __name__ == '__main__':
    main()
