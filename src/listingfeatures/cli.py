"""Command-line interface for building amenity features from listings tables."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer

from .amenities import normalize_amenities, normalize_column
from .config import settings
from .covariates import prepare_covariates
from .dummies import add_amenity_dummies
from .exceptions import AmenityFeatureError, MalformedAmenityField
from .models import default_specs, fit_specs, summarize_results
from .readers import load_listings
from .vocabulary import (
    DEFAULT_EXCLUDED,
    Vocabulary,
    build_vocabulary,
    load_vocabulary,
    save_vocabulary,
)
from .writers import write_table

app = typer.Typer(name="listing-features", help="Amenity dummy features for listings tables")

logger = logging.getLogger(__name__)

COUNT_MODES = ("occurrence", "listing")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _excluded() -> List[str]:
    return sorted(DEFAULT_EXCLUDED | set(settings.EXTRA_EXCLUDED))


def _load(listings: Optional[Path], column: str) -> pd.DataFrame:
    if listings is None:
        raise typer.BadParameter("no listings file given", param_hint="--listings")
    df = load_listings(listings)
    if column not in df.columns:
        raise typer.BadParameter(f"column {column!r} not found in {listings}", param_hint="--column")
    return df


def _check_mode(count_mode: str) -> str:
    if count_mode not in COUNT_MODES:
        raise typer.BadParameter(f"expected one of {COUNT_MODES}", param_hint="--count-mode")
    return count_mode


def _features(
    df: pd.DataFrame,
    column: str,
    vocab_path: Optional[Path],
    min_count: int,
    count_mode: str,
) -> tuple[pd.DataFrame, Vocabulary]:
    vocabulary = load_vocabulary(vocab_path) if vocab_path else None
    return add_amenity_dummies(
        df,
        column=column,
        vocabulary=vocabulary,
        min_count=min_count,
        exclude=_excluded(),
        count_mode=count_mode,
    )


@app.command()
def vocab(
    listings: Optional[Path] = typer.Option(settings.LISTINGS_PATH, "--listings", help="Listings CSV"),
    column: str = typer.Option(settings.AMENITIES_COLUMN, "--column", help="Amenities column"),
    min_count: int = typer.Option(settings.MIN_COUNT, "--min-count", help="Keep tokens seen more often than this"),
    count_mode: str = typer.Option(settings.COUNT_MODE, "--count-mode", help="occurrence or listing"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the vocabulary as JSON"),
    top: int = typer.Option(20, "--top", help="Number of tokens to print"),
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Logging level"),
) -> None:
    """Build the amenity vocabulary and print the most frequent tokens."""
    _setup_logging(log_level)
    _check_mode(count_mode)
    df = _load(listings, column)
    try:
        vocabulary = build_vocabulary(
            normalize_column(df[column]),
            min_count=min_count,
            exclude=_excluded(),
            count_mode=count_mode,
        )
    except AmenityFeatureError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1)

    typer.echo(f"Vocabulary size: {len(vocabulary)} (of {vocabulary.candidates} tokens)")
    for token in vocabulary.tokens[:top]:
        typer.echo(f"- {token}: {vocabulary.counts[token]}")
    if out:
        save_vocabulary(vocabulary, out)
        logger.info("Wrote vocabulary to %s", out)


@app.command()
def features(
    listings: Optional[Path] = typer.Option(settings.LISTINGS_PATH, "--listings", help="Listings CSV"),
    column: str = typer.Option(settings.AMENITIES_COLUMN, "--column", help="Amenities column"),
    vocab_path: Optional[Path] = typer.Option(None, "--vocab", help="Reuse a saved vocabulary"),
    min_count: int = typer.Option(settings.MIN_COUNT, "--min-count", help="Keep tokens seen more often than this"),
    count_mode: str = typer.Option(settings.COUNT_MODE, "--count-mode", help="occurrence or listing"),
    out: Path = typer.Option(settings.OUTPUT_PATH, "--out", help="Output path"),
    fmt: str = typer.Option(settings.OUTPUT_FORMAT, "--format", help="csv or sqlite"),
    table: str = typer.Option(settings.SQLITE_TABLE, "--table", help="SQLite table name"),
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Logging level"),
) -> None:
    """Append amenity dummy columns to a listings table and write it out."""
    _setup_logging(log_level)
    _check_mode(count_mode)
    df = _load(listings, column)
    try:
        augmented, vocabulary = _features(df, column, vocab_path, min_count, count_mode)
        write_table(augmented, out, fmt, table)
    except (AmenityFeatureError, ValueError) as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1)
    logger.info(
        "Wrote %s rows with %s amenity columns to %s", len(augmented), len(vocabulary), out
    )


@app.command()
def validate(
    listings: Optional[Path] = typer.Option(settings.LISTINGS_PATH, "--listings", help="Listings CSV"),
    column: str = typer.Option(settings.AMENITIES_COLUMN, "--column", help="Amenities column"),
    top: int = typer.Option(10, "--top", help="Number of tokens to print"),
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Logging level"),
) -> None:
    """Print quality-control stats for the amenities column."""
    _setup_logging(log_level)
    df = _load(listings, column)
    excluded = set(_excluded())
    total = len(df)
    present = 0
    malformed: list[int] = []
    counter: Counter[str] = Counter()

    for position, raw in enumerate(df[column]):
        try:
            tokens = normalize_amenities(raw)
        except MalformedAmenityField:
            malformed.append(position)
            continue
        if any(tokens):
            present += 1
        counter.update(t for t in tokens if t not in excluded)

    typer.echo(f"Total rows: {total}")
    if total == 0:
        return
    typer.echo(f"Amenities present: {present / total * 100:.1f}%")
    typer.echo(f"Distinct tokens: {len(counter)}")
    if malformed:
        typer.echo(f"Malformed rows: {len(malformed)}")
        for position in malformed[:5]:
            typer.echo(f"  - row {position}: {df[column].iloc[position]!r}")
    else:
        typer.echo("No malformed rows")
    typer.echo("Top amenities:")
    for token, count in counter.most_common(top):
        typer.echo(f"- {token}: {count}")


@app.command()
def fit(
    listings: Optional[Path] = typer.Option(settings.LISTINGS_PATH, "--listings", help="Listings CSV"),
    column: str = typer.Option(settings.AMENITIES_COLUMN, "--column", help="Amenities column"),
    vocab_path: Optional[Path] = typer.Option(None, "--vocab", help="Reuse a saved vocabulary"),
    min_count: int = typer.Option(settings.MIN_COUNT, "--min-count", help="Keep tokens seen more often than this"),
    count_mode: str = typer.Option(settings.COUNT_MODE, "--count-mode", help="occurrence or listing"),
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Logging level"),
) -> None:
    """Fit the price specifications and print their fit statistics."""
    _setup_logging(log_level)
    _check_mode(count_mode)
    df = _load(listings, column)
    try:
        augmented, vocabulary = _features(df, column, vocab_path, min_count, count_mode)
        dummies = augmented[vocabulary.tokens].reset_index(drop=True)
        frame = pd.concat([prepare_covariates(df).reset_index(drop=True), dummies], axis=1)
        results = fit_specs(frame, default_specs(vocabulary))
    except (AmenityFeatureError, ValueError) as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1)
    typer.echo(summarize_results(results).to_string(index=False))


if __name__ == "__main__":
    app()
