"""Loading of listings tables."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

logger = logging.getLogger(__name__)


def load_listings(path: str | Path, columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Read a listings CSV (optionally ``.gz``) keeping the file's row order."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    df = pd.read_csv(path, usecols=columns, compression="infer", low_memory=False)
    logger.info("Loaded %s listings from %s", len(df), path)
    return df


__all__ = ["load_listings"]
