"""Read (timestamp, latency) datapoints from text sources.

Supported formats (latency values are always milliseconds):

- ``epoch-line``: ``<epoch seconds> <latency>`` separated by spaces/tabs
- ``epoch-csv``: ``<epoch seconds>,<latency>``
- ``json``: ``[{"time": <epoch seconds or RFC3339>, "latency": <ms>}, ...]``
- ``rfc3339nano-milliseconds-csv``: ``<RFC3339 with optional nanos>,<latency>``
- ``random``: seeded synthetic data, the source is ignored

``auto`` detects the format from the first 100 characters. The readers
return an unsorted DataFrame with ``time`` / ``latency`` columns; sorting
and validation happen in ``prepare_dataset``.
"""

from __future__ import annotations

import io
import json
import logging
import re
import sys
from pathlib import Path
from typing import Any, List, TextIO, Tuple, Union

import pandas as pd

from latheat.core.dataset import LATENCY_COL, TIME_COL
from latheat.core.errors import EmptyInputError, SourceFormatError
from latheat.sources.synthetic import random_datapoints

logger = logging.getLogger(__name__)

DETECT_BYTES = 100

EPOCH_LINE = "epoch-line"
EPOCH_CSV = "epoch-csv"
JSON = "json"
RFC3339_CSV = "rfc3339nano-milliseconds-csv"
RANDOM = "random"
AUTO = "auto"

FORMATS = [EPOCH_LINE, EPOCH_CSV, JSON, RFC3339_CSV, RANDOM]

# Checked in order; epoch-csv must win over the looser rfc3339 pattern.
_DETECTORS: List[Tuple[str, re.Pattern]] = [
    (EPOCH_LINE, re.compile(r"^\d+[ \t]+\d+(?:\.\d+)?[ \t]*(?:\r?\n|$)")),
    (EPOCH_CSV, re.compile(r"^\d+[ \t]*,[ \t]*\d+(?:\.\d+)?[ \t]*(?:\r?\n|$)")),
    (JSON, re.compile(r"^\s*\[\s*[{\]]")),
    (
        RFC3339_CSV,
        re.compile(
            r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2}),"
            r"\d+(?:\.\d+)?[ \t]*(?:\r?\n|$)"
        ),
    ),
]

Source = Union[str, Path, TextIO]


def detect_format(head: str) -> str:
    """Return the format name whose pattern matches the start of *head*."""
    sample = head[:DETECT_BYTES]
    for name, pattern in _DETECTORS:
        if pattern.match(sample):
            return name
    raise SourceFormatError(f"failed to determine source format from first {DETECT_BYTES} bytes")


def _read_text(source: Source) -> str:
    if isinstance(source, Path):
        return source.read_text(encoding="utf-8")
    if isinstance(source, str):
        if source == "":
            raise ValueError("source cannot be empty ''")
        if source == "-":
            return sys.stdin.read()
        return Path(source).read_text(encoding="utf-8")
    return source.read()


_PARSER_LINE = re.compile(r"line (\d+)")


def _read_pairs(text: str, sep: str) -> pd.DataFrame:
    """Read two-field rows with pandas, dropping blank lines.

    Blank lines are kept while parsing so the returned index is the
    0-based line number of each row.
    """
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=sep,
            header=None,
            names=[TIME_COL, LATENCY_COL],
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        )
    except pd.errors.ParserError as e:
        m = _PARSER_LINE.search(str(e))
        raise SourceFormatError("expected 2 fields", line=int(m.group(1)) if m else None) from e

    if not isinstance(df.index, pd.RangeIndex):
        # A first row with extra fields turns into an implicit index column.
        lead = pd.Series(df.index).fillna("").astype(str).str.strip()
        first = lead.index[lead != ""]
        raise SourceFormatError(
            "expected 2 fields", line=int(first[0]) + 1 if len(first) else None
        )

    df = df.fillna("").apply(lambda col: col.str.strip())
    df = df[(df[TIME_COL] != "") | (df[LATENCY_COL] != "")]
    short = df.index[df[LATENCY_COL] == ""]
    if len(short):
        raise SourceFormatError("expected 2 fields, found 1", line=int(short[0]) + 1)
    return df


def _first_bad(values: pd.Series, linenos: List[int]) -> int | None:
    bad = values.index[values.isna()]
    return linenos[int(bad[0])] if len(bad) else None


def _latencies(raw: List[Any], linenos: List[int]) -> pd.Series:
    ms = pd.to_numeric(pd.Series(raw, dtype=object), errors="coerce")
    line = _first_bad(ms, linenos)
    if line is not None:
        raise SourceFormatError("failed to parse latency milliseconds", line=line)
    return pd.to_timedelta(ms.astype(float), unit="ms")


def _epoch_times(raw: List[Any], linenos: List[int]) -> pd.Series:
    secs = pd.to_numeric(pd.Series(raw, dtype=object), errors="coerce")
    line = _first_bad(secs, linenos)
    if line is not None:
        raise SourceFormatError("failed to parse epoch seconds", line=line)
    return pd.to_datetime(secs.astype(float), unit="s")


def _rfc3339_times(raw: List[Any], linenos: List[int]) -> pd.Series:
    times = pd.to_datetime(pd.Series(raw, dtype=object), utc=True, format="ISO8601", errors="coerce")
    line = _first_bad(times, linenos)
    if line is not None:
        raise SourceFormatError("failed to parse RFC3339 time", line=line)
    return times.dt.tz_localize(None)


def _frame(times: pd.Series, latencies: pd.Series) -> pd.DataFrame:
    return pd.DataFrame(
        {TIME_COL: times.reset_index(drop=True), LATENCY_COL: latencies.reset_index(drop=True)}
    )


def _parse_pairs(text: str, sep: str, parse_times) -> pd.DataFrame:
    rows = _read_pairs(text, sep)
    linenos = (rows.index + 1).tolist()
    times = parse_times(rows[TIME_COL].tolist(), linenos)
    return _frame(times, _latencies(rows[LATENCY_COL].tolist(), linenos))


def parse_epoch_lines(text: str) -> pd.DataFrame:
    return _parse_pairs(text, r"\s+", _epoch_times)


def parse_epoch_csv(text: str) -> pd.DataFrame:
    return _parse_pairs(text, ",", _epoch_times)


def parse_rfc3339_csv(text: str) -> pd.DataFrame:
    return _parse_pairs(text, ",", _rfc3339_times)


def parse_json(text: str) -> pd.DataFrame:
    """Parse an array of ``{"time": ..., "latency": ...}`` records.

    ``time`` may be epoch seconds or an RFC3339 string; errors report the
    1-based record number in place of a line number.
    """
    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise SourceFormatError(f"invalid JSON: {e.msg}", line=e.lineno) from e
    if not isinstance(records, list):
        raise SourceFormatError("JSON input must be an array of records")

    numbers = list(range(1, len(records) + 1))
    times: List[Any] = []
    lats: List[Any] = []
    for n, rec in zip(numbers, records):
        if not isinstance(rec, dict) or TIME_COL not in rec or LATENCY_COL not in rec:
            raise SourceFormatError(f"record {n} must have '{TIME_COL}' and '{LATENCY_COL}'")
        times.append(rec[TIME_COL])
        lats.append(rec[LATENCY_COL])

    if all(isinstance(t, (int, float)) and not isinstance(t, bool) for t in times):
        parsed = _epoch_times(times, numbers)
    else:
        parsed = _rfc3339_times([str(t) for t in times], numbers)
    return _frame(parsed, _latencies(lats, numbers))


_PARSERS = {
    EPOCH_LINE: parse_epoch_lines,
    EPOCH_CSV: parse_epoch_csv,
    JSON: parse_json,
    RFC3339_CSV: parse_rfc3339_csv,
}


def read_datapoints(source: Source, fmt: str = AUTO, seed: int | None = None) -> pd.DataFrame:
    """Read datapoints from *source* (path, ``"-"`` for stdin, or text stream)."""
    if fmt == RANDOM:
        logger.info("Generating random datapoints (seed=%s)", seed)
        return random_datapoints(seed=seed)
    if fmt != AUTO and fmt not in _PARSERS:
        raise SourceFormatError(f"unknown source format '{fmt}'")

    text = _read_text(source)
    if not text.strip():
        raise EmptyInputError("input contains no datapoints")
    if fmt == AUTO:
        fmt = detect_format(text)
        logger.debug("Detected source format %s", fmt)

    df = _PARSERS[fmt](text)
    logger.debug("Read %d datapoints as %s", len(df), fmt)
    return df

