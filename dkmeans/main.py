from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from dkmeans.core.config import EmptyClusterPolicy
from dkmeans.core.driver import kmeans
from dkmeans.core.errors import KMeansError
from dkmeans.data.dataset import PointDataset
from dkmeans.data.generator import UniformPointSource, generate_blobs
from dkmeans.dataflow.context import DataflowContext, MultiprocessingConfig
from dkmeans.metrics.timers import Timer
from dkmeans.utils.logging import PrefixedLogger, format_run_prefix, setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dkmeans",
        description="Распределённый k-means (Ллойд) на партиционированных данных.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Сгенерировать датасет (make_blobs) в текстовый файл.")
    gen.add_argument("--n", type=int, required=True, help="Количество точек.")
    gen.add_argument("--d", type=int, required=True, help="Размерность.")
    gen.add_argument("--k", type=int, required=True, help="Количество облаков.")
    gen.add_argument("--cluster-std", type=float, default=1.0)
    gen.add_argument("--seed", type=int, default=42)
    gen.add_argument("--out", type=Path, required=True, help="Путь к выходному файлу.")

    run = sub.add_parser("run", help="Запустить k-means.")
    src = run.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", type=Path, help="Текстовый датасет.")
    src.add_argument(
        "--random",
        type=int,
        metavar="N",
        help="Сгенерировать N равномерных точек в [0, 1)^D (нужен --d).",
    )
    run.add_argument("--d", type=int, default=None, help="Размерность (по умолчанию из датасета).")
    run.add_argument("--k", type=int, required=True, help="Количество кластеров.")
    run.add_argument("--iterations", type=int, default=10, help="Число итераций.")
    run.add_argument(
        "--processes",
        type=int,
        default=1,
        help="Число процессов пула (1 = без пула).",
    )
    run.add_argument("--chunk-size", type=int, default=None, help="Размер партиции.")
    run.add_argument("--seed", type=int, default=None, help="Seed выборки центроидов.")
    run.add_argument(
        "--empty-cluster-policy",
        choices=[p.value for p in EmptyClusterPolicy],
        default=EmptyClusterPolicy.DROP.value,
        help="Что делать с опустевшими кластерами.",
    )
    run.add_argument("--model-out", type=Path, default=None, help="Сохранить модель в JSON.")
    run.add_argument("--verbose", action="store_true", help="Логировать на уровне DEBUG.")
    return parser


def cmd_generate(args: argparse.Namespace, logger) -> int:
    dataset = generate_blobs(
        N=args.n, D=args.d, K=args.k, cluster_std=args.cluster_std, seed=args.seed
    )
    dataset.save(args.out)
    logger.info(f"Generated N={dataset.N} D={dataset.D} K={args.k} -> {args.out}")
    return 0


def cmd_run(args: argparse.Namespace, logger) -> int:
    mp = MultiprocessingConfig(n_processes=args.processes, chunk_size=args.chunk_size)

    with DataflowContext(mp, logger=logger) as ctx:
        if args.input is not None:
            dataset = PointDataset.load(args.input)
            D = args.d if args.d is not None else dataset.D
            points = dataset.to_sequence(ctx)
            source = "file"
        else:
            if args.d is None:
                logger.error("--random requires --d")
                return 2
            D = args.d
            points = ctx.generate(args.random, UniformPointSource(D, seed=args.seed))
            source = "random"

        prefix = format_run_prefix({"N": points.size(), "D": D, "K": args.k, "source": source})
        run_logger = PrefixedLogger(logger, prefix)

        # генерируемый источник читается дважды (выборка + итерации)
        points = points.cache()

        try:
            with Timer() as t:
                model = kmeans(
                    points,
                    dimensions=D,
                    num_clusters=args.k,
                    iterations=args.iterations,
                    seed=args.seed,
                    empty_cluster_policy=args.empty_cluster_policy,
                    logger=run_logger,
                )
            cost = model.compute_total_cost(points)
        except KMeansError as e:
            run_logger.error(f"k-means failed: {e}")
            return 1

    run_logger.info(
        f"Finished in {t.elapsed:.3f}s: {len(model.centroids)}/{model.num_clusters} "
        f"centroids, total cost={cost:.6f}"
    )
    for i, c in enumerate(model.centroids):
        run_logger.info(f"  centroid {i}: {json.dumps(c.to_list())}")

    if args.model_out is not None:
        model.save(args.model_out)
        run_logger.info(f"Model saved to {args.model_out}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger = setup_logger(logging.DEBUG if getattr(args, "verbose", False) else logging.INFO)

    if args.command == "generate":
        return cmd_generate(args, logger)
    return cmd_run(args, logger)


if __name__ == "__main__":
    raise SystemExit(main())
