from .csv_points import read_points_csv
from .normalize import normalize_points

__all__ = ["normalize_points", "read_points_csv"]
