"""Load prospect records from CSV/JSON files."""

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .models import Prospect

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "json", "jsonl")


class RecordLoadError(Exception):
    """Raised when a prospect file cannot be read or parsed."""
    pass


@dataclass
class LoadResult:
    """Prospects loaded from a file plus row accounting."""

    prospects: list[Prospect] = field(default_factory=list)
    total_rows: int = 0
    skipped: int = 0
    duplicates: int = 0


def dedup_key(prospect: Prospect) -> Optional[tuple]:
    """
    Identity used to match an incoming record to an existing one.

    External (place) ID when present, otherwise company name plus city.
    Records without a company name have no identity.
    """
    if prospect.external_id:
        return ("external_id", prospect.external_id)
    if not prospect.company_name:
        return None
    return (
        "name_city",
        prospect.company_name.strip().lower(),
        (prospect.city or "").strip().lower(),
    )


def dedup_prospects(prospects: Iterable[Prospect]) -> tuple[list[Prospect], int]:
    """
    Collapse duplicate records, later rows replacing earlier ones.

    The surviving record keeps the position of the first occurrence.

    Returns:
        (unique prospects, number of duplicates replaced)
    """
    by_key: dict[tuple, Prospect] = {}
    duplicates = 0

    for prospect in prospects:
        key = dedup_key(prospect)
        if key is None:
            continue
        if key in by_key:
            duplicates += 1
        by_key[key] = prospect

    return list(by_key.values()), duplicates


def _detect_format(path: Path, input_format: Optional[str]) -> str:
    fmt = (input_format or path.suffix.lstrip(".")).lower()
    if fmt not in SUPPORTED_FORMATS:
        raise RecordLoadError(
            f"Unsupported format '{fmt}' for {path} (expected one of: {', '.join(SUPPORTED_FORMATS)})"
        )
    return fmt


def read_records(path: str, input_format: Optional[str] = None) -> list[dict]:
    """
    Read raw records from a CSV, JSON array or JSON-lines file.

    Args:
        path: File to read
        input_format: Force a format instead of using the file extension

    Returns:
        List of raw record dictionaries

    Raises:
        RecordLoadError: If the file is missing, unreadable or malformed
    """
    file_path = Path(path)
    fmt = _detect_format(file_path, input_format)

    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise RecordLoadError(f"Cannot read {file_path}: {e}") from e

    try:
        if fmt == "csv":
            return [dict(row) for row in csv.DictReader(io.StringIO(text))]

        if fmt == "jsonl":
            data = [json.loads(line) for line in text.splitlines() if line.strip()]
        else:
            data = json.loads(text) if text.strip() else []
    except (json.JSONDecodeError, csv.Error) as e:
        raise RecordLoadError(f"Cannot parse {file_path}: {e}") from e

    # Accept {"prospects": [...]} wrappers from API exports
    if isinstance(data, dict):
        data = data.get("prospects", [data])
    if not isinstance(data, list):
        raise RecordLoadError(f"Expected a list of records in {file_path}")

    return [r for r in data if isinstance(r, dict)]


def load_prospects(
    path: str,
    input_format: Optional[str] = None,
    dedup: bool = True,
) -> LoadResult:
    """
    Load prospects from a file.

    Rows without a company name are skipped. Bad field values are coerced
    to None rather than rejected.

    Args:
        path: File to read
        input_format: Force a format instead of using the file extension
        dedup: Collapse duplicates by external ID or name+city

    Returns:
        LoadResult with prospects and row counts
    """
    records = read_records(path, input_format)
    result = LoadResult(total_rows=len(records))

    prospects = []
    for record in records:
        prospect = Prospect.from_dict(record)
        if not prospect.company_name:
            result.skipped += 1
            continue
        prospects.append(prospect)

    if dedup:
        prospects, result.duplicates = dedup_prospects(prospects)

    result.prospects = prospects
    logger.info(
        "Loaded %d prospects from %s (%d skipped, %d duplicates)",
        len(prospects), path, result.skipped, result.duplicates,
    )
    return result
