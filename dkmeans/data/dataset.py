"""
Загрузка и сохранение наборов точек в текстовом формате.

Формат файла:
# {метаданные в JSON}
метка x_1 ... x_D      (если в метаданных "labeled": true)
x_1 ... x_D            (иначе)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np

from dkmeans.core.point import Point
from dkmeans.dataflow.context import DataflowContext
from dkmeans.dataflow.sequence import PartitionedSequence


class PointDataset:
    """Набор точек (N, D) с необязательными истинными метками."""

    def __init__(
        self,
        X: np.ndarray,
        labels: np.ndarray | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.X = np.ascontiguousarray(X, dtype=np.float64)
        if self.X.ndim != 2:
            raise ValueError(f"Expected a 2-D array of points, got shape {self.X.shape}")
        self.labels = None if labels is None else np.asarray(labels, dtype=np.int32)
        self.metadata: dict[str, Any] = dict(metadata or {})

    @property
    def N(self) -> int:
        return int(self.X.shape[0])

    @property
    def D(self) -> int:
        return int(self.X.shape[1])

    def points(self) -> list[Point]:
        return [Point(row) for row in self.X]

    def to_sequence(
        self, context: DataflowContext, num_partitions: Optional[int] = None
    ) -> PartitionedSequence:
        """Раскладывает точки по партициям контекста."""
        return context.parallelize(self.points(), num_partitions=num_partitions)

    # --- Ввод/вывод ---

    @classmethod
    def load(cls, path: str | Path) -> PointDataset:
        """
        Загружает датасет из текстового файла.

        Строки, начинающиеся с ``#``, кроме первой (метаданные), пропускаются.
        """
        path = Path(path)
        logging.info(f"Loading dataset from {path}")

        metadata: dict[str, Any] = {}
        rows: list[list[float]] = []
        labels: list[int] = []

        with open(path, "r", encoding="utf-8") as f:
            first = True
            for line in f:
                line = line.strip()
                if first and line.startswith("#"):
                    first = False
                    payload = line[1:].strip()
                    if payload.startswith("{"):
                        metadata = json.loads(payload)
                    continue
                first = False
                if not line or line.startswith("#"):
                    continue

                parts = line.split()
                if metadata.get("labeled"):
                    labels.append(int(parts[0]))
                    parts = parts[1:]
                rows.append([float(x) for x in parts])

        widths = {len(r) for r in rows}
        if len(widths) > 1:
            raise ValueError(f"Inconsistent row widths in {path}: {sorted(widths)}")

        X = np.array(rows, dtype=np.float64).reshape(len(rows), widths.pop() if widths else 0)
        dataset = cls(X, np.array(labels) if labels else None, metadata)
        validate_dataset(dataset)

        logging.info(f"Dataset loaded: X.shape={dataset.X.shape}")
        return dataset

    def save(self, path: str | Path) -> None:
        """Сохраняет датасет в текстовом формате (см. описание модуля)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        metadata = {
            **self.metadata,
            "N": self.N,
            "D": self.D,
            "labeled": self.labels is not None,
        }

        with open(path, "w", encoding="utf-8") as f:
            f.write("# " + json.dumps(metadata, ensure_ascii=False) + "\n")
            for i, row in enumerate(self.X):
                coords = " ".join(repr(float(x)) for x in row)
                if self.labels is not None:
                    f.write(f"{int(self.labels[i])} {coords}\n")
                else:
                    f.write(coords + "\n")


def validate_dataset(dataset: PointDataset) -> None:
    """
    Проверяет соответствие данных метаданным (N, D), если они указаны.

    Raises:
        ValueError: Если размеры данных не соответствуют метаданным
    """
    meta = dataset.metadata

    if "N" in meta and dataset.N != meta["N"]:
        raise ValueError(f"Expected {meta['N']} points, got {dataset.N}")
    if "D" in meta and dataset.N > 0 and dataset.D != meta["D"]:
        raise ValueError(f"Expected {meta['D']} dimensions, got {dataset.D}")
    if dataset.labels is not None and dataset.labels.shape[0] != dataset.N:
        raise ValueError(
            f"Expected {dataset.N} labels, got {dataset.labels.shape[0]}"
        )
