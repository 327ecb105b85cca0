from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class SeriesData:
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    source_name: str | None = None

    @classmethod
    def empty(cls) -> "SeriesData":
        blank = np.zeros(0, dtype=np.float64)
        return cls(x=blank, y=blank.copy(), mask=np.zeros(0, dtype=bool))

    @property
    def is_empty(self) -> bool:
        return self.x.size == 0

    def finite_xy(self) -> tuple[np.ndarray, np.ndarray]:
        return self.x[self.mask], self.y[self.mask]
