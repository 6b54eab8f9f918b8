import logging
from pathlib import Path
from typing import Iterable, List, Mapping

import pandas as pd
from pydantic import ValidationError

from ..config import Config
from ..models import NewSurveyRecord
from ..storage import SurveyStore
from .mapper import pick_field, row_to_payload

logger = logging.getLogger(__name__)


class RecordValidationError(ValueError):
    """Raised when an incoming row cannot be coerced into a survey record."""

    def __init__(self, row: int, errors: list):
        self.row = row
        self.errors = errors
        super().__init__(f"Row {row + 1}: invalid survey record")


class EmptyUploadError(ValueError):
    """Raised when a file holds no survey rows under any known header."""


def _standardize_columns(df: pd.DataFrame) -> pd.DataFrame:
    mapping = {c: pick_field(c) for c in df.columns}
    known = {c: f for c, f in mapping.items() if f}
    ignored = [c for c, f in mapping.items() if not f]
    if ignored:
        logger.info("Ignoring unknown columns: %s", ignored)
    return df[list(known)].rename(columns=known)


def _read_any(path: Path) -> pd.DataFrame:
    suf = path.suffix.lower()
    if suf not in Config.ALLOWED_EXTENSIONS:
        raise ValueError(f"Unsupported file type: {suf}")
    if suf == ".csv":
        try:
            return pd.read_csv(path, encoding="utf-8-sig")
        except UnicodeDecodeError:
            return pd.read_csv(path, encoding="latin-1")
    return pd.read_excel(path, engine="openpyxl")


def validate_records(payloads: Iterable[Mapping]) -> List[NewSurveyRecord]:
    """
    Validate every payload before anything is stored; the first bad row
    aborts the whole batch.
    """
    records = []
    for i, payload in enumerate(payloads):
        try:
            records.append(NewSurveyRecord.model_validate(payload))
        except ValidationError as exc:
            raise RecordValidationError(i, exc.errors(include_url=False, include_context=False)) from exc
    return records


def frame_to_records(df: pd.DataFrame) -> List[NewSurveyRecord]:
    df = _standardize_columns(df).dropna(how="all")
    if df.empty or not len(df.columns):
        return []
    return validate_records(row_to_payload(row) for row in df.to_dict("records"))


def ingest_file(path: Path, store: SurveyStore, clear: bool = False) -> int:
    """
    Read a survey CSV/Excel file into ``store`` and return the number of
    records inserted. With ``clear`` the previous data set is replaced.

    A file without survey rows raises ``EmptyUploadError`` and leaves the
    store untouched.
    """
    df = _read_any(Path(path))
    records = frame_to_records(df)
    if not records:
        raise EmptyUploadError(f"{Path(path).name} contains no survey records")
    if clear:
        store.clear()
    stored = store.insert_many(records)
    logger.info("Ingested %d rows from %s", len(stored), Path(path).name)
    return len(stored)
