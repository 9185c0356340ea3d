"""Single decode step from raw dataset JSON to a typed :class:`Dataset`.

Either a fully-typed dataset comes back or a :class:`DatasetError` is raised
carrying the validation errors in its context. Hosts treat the error as fatal
for the session and offer a retry that re-fetches from scratch.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Union

from pydantic import ValidationError

from ..exceptions import DatasetError, ErrorCode
from ..logging_config import get_logger
from .models import Dataset

logger = get_logger(__name__)

RawDataset = Union[str, bytes, Mapping[str, Any]]

_RETRY_HINT = "Re-fetch the dataset and load it into a fresh session"


def decode_dataset(payload: RawDataset) -> Dataset:
    """Decode and validate a dataset.

    Args:
        payload: JSON text/bytes, or an already-parsed mapping

    Returns:
        Dataset with commits in ascending epoch order

    Raises:
        DatasetError: CF100 for malformed JSON, CF101 for schema violations
    """
    try:
        if isinstance(payload, (str, bytes)):
            dataset = Dataset.model_validate_json(payload)
        else:
            dataset = Dataset.model_validate(payload)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        if any(err.get("type") == "json_invalid" for err in errors):
            raise DatasetError(
                "Dataset is not valid JSON",
                ErrorCode.CF100,
                context={"detail": errors[0].get("msg", "")},
                recovery_hint=_RETRY_HINT,
            ) from e
        raise DatasetError(
            f"Dataset failed validation ({len(errors)} error(s))",
            ErrorCode.CF101,
            context={
                "errors": [
                    {"loc": ".".join(str(p) for p in err.get("loc", ())), "msg": err.get("msg", "")}
                    for err in errors
                ]
            },
            recovery_hint=_RETRY_HINT,
        ) from e

    dataset = _ensure_chronological(dataset)
    logger.debug(f"Decoded dataset with {len(dataset.commits)} commits")
    return dataset


def load_dataset(path: str | Path) -> Dataset:
    """Read a dataset JSON file and decode it.

    Raises:
        DatasetError: CF102 if the file can't be read, otherwise as decode_dataset
    """
    path = Path(path)
    try:
        payload = path.read_bytes()
    except OSError as e:
        raise DatasetError(
            f"Cannot read dataset: {path}",
            ErrorCode.CF102,
            context={"path": str(path), "reason": str(e)},
            recovery_hint=_RETRY_HINT,
        ) from e
    return decode_dataset(payload)


def _ensure_chronological(dataset: Dataset) -> Dataset:
    commits = dataset.commits
    if all(a.epoch <= b.epoch for a, b in zip(commits, commits[1:])):
        return dataset
    logger.warning("Dataset commits are not in ascending epoch order; sorting")
    ordered = sorted(commits, key=lambda c: c.epoch)
    return dataset.model_copy(update={"commits": ordered})
