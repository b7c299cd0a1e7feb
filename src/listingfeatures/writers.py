"""Output helpers for writing data to various sinks."""

from pathlib import Path

import pandas as pd
from sqlite_utils import Database


def ensure_parent(path: Path) -> None:
    """Ensure the parent directory of ``path`` exists."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def to_csv(df: pd.DataFrame, path: Path) -> None:
    """Write a DataFrame to a CSV file."""
    ensure_parent(path)
    df.to_csv(path, index=False)


def to_sqlite(df: pd.DataFrame, db_path: Path, table: str) -> None:
    """Write a DataFrame to a SQLite database table, replacing its rows."""
    ensure_parent(db_path)
    db = Database(str(db_path))
    records = df.astype(object).where(df.notna(), None).to_dict(orient="records")
    db[table].drop(ignore=True)
    db[table].insert_all(records, alter=True)


def write_table(df: pd.DataFrame, path: Path, fmt: str = "csv", table: str = "listings") -> None:
    """Write ``df`` to ``path`` in the configured output format."""
    if fmt == "csv":
        to_csv(df, path)
    elif fmt == "sqlite":
        to_sqlite(df, path, table)
    else:
        raise ValueError(f"Unsupported output format: {fmt}")


__all__ = ["ensure_parent", "to_csv", "to_sqlite", "write_table"]
