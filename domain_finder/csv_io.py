"""
Reading names from and writing domains to CSV files.
"""

import logging
from typing import Iterable, List

import pandas as pd

from domain_finder.models import Failed, NotFound, Outcome, Resolution, Resolved

# Initialize logger
log = logging.getLogger(__name__)

PLACEHOLDER = "---"
NOT_FOUND_MARKER = "Not Found"
ERROR_MARKER = "Error"
OUTPUT_COLUMNS = ["Name", "Domain"]


class InputFileError(Exception):
    """Exception raised when the input file cannot be read."""
    pass


class OutputFileError(Exception):
    """Exception raised when the output file cannot be written."""
    pass


def read_names(path: str) -> List[str]:
    """
    Read names from the first column of a CSV file with a header row.

    Values are trimmed; empty values and the ``---`` placeholder are dropped.

    Args:
        path: Path to the input CSV file

    Returns:
        Names in file order

    Raises:
        InputFileError: If the file is missing or cannot be parsed
    """
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, index_col=False)
    except (OSError, ValueError) as e:
        raise InputFileError(f"Error reading input file {path}: {e}") from e

    if len(df.columns) == 0:
        raise InputFileError(f"Input file has no columns: {path}")

    names = []
    for value in df.iloc[:, 0]:
        name = str(value).strip()
        if name and name != PLACEHOLDER:
            names.append(name)

    log.debug("Kept %d of %d rows from %s", len(names), len(df), path)
    return names


def domain_cell(resolution: Resolution) -> str:
    """Map a resolution to the value written in the Domain column."""
    if isinstance(resolution, Resolved):
        return resolution.hostname
    if isinstance(resolution, NotFound):
        return NOT_FOUND_MARKER
    if isinstance(resolution, Failed):
        return ERROR_MARKER
    raise TypeError(f"Unknown resolution: {resolution!r}")


def write_outcomes(path: str, outcomes: Iterable[Outcome]) -> int:
    """
    Write one ``Name,Domain`` row per outcome, replacing any existing file.

    Args:
        path: Output CSV path
        outcomes: Outcomes in the order they should appear

    Returns:
        Number of rows written

    Raises:
        OutputFileError: If the file cannot be written
    """
    rows = [
        {"Name": o.name, "Domain": domain_cell(o.resolution)}
        for o in outcomes
    ]
    df = pd.DataFrame(rows, columns=OUTPUT_COLUMNS)
    try:
        df.to_csv(path, index=False)
    except OSError as e:
        raise OutputFileError(f"Failed to save output file {path}: {e}") from e
    return len(df)
