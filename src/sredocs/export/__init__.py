"""Table serialization for downstream loaders."""

from .csv_writer import BatchWriteResult, TableWriteError, write_batch, write_table

__all__ = ["BatchWriteResult", "TableWriteError", "write_batch", "write_table"]
