# -*- coding: utf-8 -*-
"""
Dataset loading for the bundled CSV / JSON files.

pandas does the parsing and the type coercion (numeric text becomes
int/float, everything else stays str). Records come back as plain dicts
with Python scalars. Anything wrong with a file, including an empty
required field, is reported as ``DataLoadFailure`` at load time.
"""
from __future__ import annotations

import logging
import math
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, List, Sequence, Union
from urllib.parse import urlparse

import pandas as pd

from errors import DataLoadFailure

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

def _is_url(resource: Union[str, Path]) -> bool:
    return str(resource).startswith(("http://", "https://"))


def _suffix(source: Union[str, Path]) -> str:
    if _is_url(source):
        return PurePosixPath(urlparse(str(source)).path).suffix.lower()
    return Path(source).suffix.lower()


def _read_frame(source: Union[str, Path]) -> pd.DataFrame:
    suffix = _suffix(source)
    if suffix == ".csv":
        return pd.read_csv(source, skipinitialspace=True)
    if suffix == ".json":
        return pd.read_json(source, orient="records", convert_dates=False)
    raise DataLoadFailure(str(source), f"unsupported format {suffix or '(none)'}")


def _native(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if hasattr(value, "item"):
        # numpy scalar
        return _native(value.item())
    if isinstance(value, str):
        return value.strip()
    return value


def frame_to_records(frame: pd.DataFrame) -> List[Record]:
    return [{str(k): _native(v) for k, v in row.items()} for row in frame.to_dict(orient="records")]


def load_dataset(resource: Union[str, Path], required: Sequence[str] = ()) -> List[Record]:
    """
    Reads ``resource`` (a local path or an http(s) URL) into a list of records.

    ``required`` names the fields a chart depends on: each must exist as a
    column and be filled in on every row.
    """
    path = str(resource) if _is_url(resource) else Path(resource)
    if isinstance(path, Path) and not path.exists():
        logger.warning("dataset not found: %s", path)
        raise DataLoadFailure(str(path), "file not found")

    try:
        frame = _read_frame(path)
    except DataLoadFailure:
        raise
    except (ValueError, OSError, pd.errors.ParserError) as exc:
        logger.warning("could not parse %s: %s", path, exc)
        raise DataLoadFailure(str(path), f"unreadable: {exc}") from exc

    frame.columns = [str(c).strip() for c in frame.columns]
    missing = [c for c in required if c not in frame.columns]
    if missing:
        raise DataLoadFailure(str(path), f"missing columns: {', '.join(missing)}")

    records = frame_to_records(frame)
    for i, rec in enumerate(records):
        empty = [c for c in required if rec.get(c) in (None, "")]
        if empty:
            raise DataLoadFailure(str(path), f"row {i + 1} has no value for {', '.join(empty)}")

    logger.info("loaded %d records from %s", len(records), PurePosixPath(str(path)).name)
    return records


def save_dataset(records: Iterable[Record], resource: Union[str, Path]) -> Path:
    """Writes records in the format implied by the file suffix."""
    path = Path(resource)
    frame = pd.DataFrame(list(records))
    suffix = path.suffix.lower()
    if suffix == ".csv":
        frame.to_csv(path, index=False)
    elif suffix == ".json":
        frame.to_json(path, orient="records", indent=2)
    else:
        raise ValueError(f"unsupported format {suffix or '(none)'}")
    return path


def unique(records: Iterable[Record], field: str) -> List[Any]:
    """Distinct values of ``field`` in first-seen order."""
    return list(dict.fromkeys(r[field] for r in records))


def summarize(records: Sequence[Record], max_rows: int = 12) -> str:
    """Short CSV-ish text of the first rows, used in prompts."""
    if not records:
        return "[no rows]"
    frame = pd.DataFrame(list(records)[:max_rows])
    return frame.to_csv(index=False).strip()
