from .csv_reader import CsvLoadResult, read_trajectory_csv

__all__ = ["CsvLoadResult", "read_trajectory_csv"]
