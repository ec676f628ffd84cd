"""Mirrors the patron roster to a plain delimited text file.

One patron per line, fields in fixed order::

    patronId,name,address,overdueFine
    1234567,Jane Doe,123 Main St,12.5

There is no quoting: the delimiter and line breaks are replaced with a space
inside text fields before writing, so nothing ever needs unescaping on read.
The file has no in-place delete, so removals go through ``save_all_patrons``.
"""
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from lms.patron import Patron
from lms.patron_manager import PatronManager
from lms.validators import FIELD_DELIMITER, PatronValidationError, PatronValidator, sanitize_text

logger = logging.getLogger(__name__)

DELIMITER = FIELD_DELIMITER
FIELD_NAMES = ("patronId", "name", "address", "overdueFine")
HEADER_LINE = DELIMITER.join(FIELD_NAMES)
ENCODING = "utf-8"
# Editors on some platforms prefix a BOM; it must not hide the first id
READ_ENCODING = "utf-8-sig"

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass
class SkippedLine:
    line_number: int
    reason: str


@dataclass
class LoadResult:
    loaded_count: int = 0
    skipped_count: int = 0
    error: Optional[str] = None
    skipped_lines: List[SkippedLine] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def skip(self, line_number: int, reason: str) -> None:
        self.skipped_count += 1
        self.skipped_lines.append(SkippedLine(line_number, reason))
        logger.debug(f"Skipped line {line_number}: {reason}")


# ------------------------- Parsing ------------------------- #
def parse_int(text: str) -> int:
    """Strict integer parse: optional sign and ASCII digits only."""
    text = text.strip()
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"not an integer: {text!r}")
    return int(text)


def parse_float(text: str) -> float:
    text = text.strip()
    # float() tolerates digit separators; the file format does not
    if "_" in text:
        raise ValueError(f"not a number: {text!r}")
    return float(text)


def looks_like_header(line: str) -> bool:
    """A line is a header when its first delimited field is not an integer."""
    first = line.split(DELIMITER)[0]
    try:
        parse_int(first)
        return False
    except ValueError:
        return True


def _has_undecodable_bytes(line: str) -> bool:
    # surrogateescape maps each undecodable byte to U+DC80..U+DCFF
    return any("\udc80" <= ch <= "\udcff" for ch in line)


def parse_line(line: str) -> Tuple[int, str, str, float]:
    """Split a data line into (patron_id, name, address, fine).

    Raises ValueError when the field count is wrong or a numeric field does
    not parse. Range checks are left to the caller.
    """
    parts = line.split(DELIMITER)
    if len(parts) != len(FIELD_NAMES):
        raise ValueError(f"expected {len(FIELD_NAMES)} fields, found {len(parts)}")

    id_text, name, address, fine_text = (p.strip() for p in parts)
    return parse_int(id_text), name, address, parse_float(fine_text)


# ------------------------- Serialization ------------------------- #
def safe_field(value: Optional[str]) -> str:
    """Replace characters that would break the line format with a space."""
    if value is None:
        return ""
    return sanitize_text(value)


def to_file_line(patron: Patron) -> str:
    return DELIMITER.join([
        str(patron.patron_id),
        safe_field(patron.name),
        safe_field(patron.address),
        repr(patron.overdue_fine),
    ])


# ------------------------- File operations ------------------------- #
def load_patrons(path: str, manager: PatronManager) -> LoadResult:
    """Read ``path`` into ``manager``, skipping and counting every bad line.

    Only a file that cannot be opened or read is reported as an error;
    undecodable or malformed lines, out-of-range values and ids already in
    ``manager`` are skipped.
    """
    result = LoadResult()
    try:
        with open(path, "r", encoding=READ_ENCODING, errors="surrogateescape") as f:
            for line_number, raw in enumerate(f, 1):
                line = raw.strip()
                if not line:
                    continue

                if line_number == 1 and looks_like_header(line):
                    continue

                if _has_undecodable_bytes(line):
                    result.skip(line_number, "line is not valid UTF-8")
                    continue

                try:
                    patron_id, name, address, fine = parse_line(line)
                except ValueError as e:
                    result.skip(line_number, str(e))
                    continue

                if not PatronValidator.is_valid_patron_id(patron_id):
                    result.skip(line_number, f"patron id out of range: {patron_id}")
                    continue
                if not PatronValidator.is_valid_fine(fine):
                    result.skip(line_number, f"overdue fine out of range: {fine}")
                    continue
                if manager.is_duplicate_id(patron_id):
                    result.skip(line_number, f"duplicate patron id: {patron_id}")
                    continue

                try:
                    patron = Patron(patron_id, name, address, fine)
                except PatronValidationError as e:
                    result.skip(line_number, str(e))
                    continue

                manager.add_patron(patron)
                result.loaded_count += 1
    except OSError as e:
        logger.error(f"Error loading file {path}: {e}")
        result.error = str(e)
        return result

    logger.info(f"Loaded {result.loaded_count} patrons from {path}, skipped {result.skipped_count} rows")
    return result


def append_patron(path: str, patron: Optional[Patron]) -> bool:
    """Append one patron line, writing the header first if the file is missing or empty."""
    if not path or not path.strip() or patron is None:
        return False

    try:
        write_header = not os.path.exists(path) or os.path.getsize(path) == 0
        with open(path, "a", encoding=ENCODING) as f:
            if write_header:
                f.write(HEADER_LINE + "\n")
            f.write(to_file_line(patron) + "\n")
        return True
    except OSError as e:
        logger.error(f"Error saving patron to file {path}: {e}")
        return False


def save_all_patrons(path: str, patrons: Iterable[Patron]) -> bool:
    """Overwrite ``path`` with a header and one line per patron, in the given order."""
    if not path or not path.strip():
        return False

    try:
        with open(path, "w", encoding=ENCODING) as f:
            f.write(HEADER_LINE + "\n")
            for patron in patrons:
                f.write(to_file_line(patron) + "\n")
        return True
    except OSError as e:
        logger.error(f"Error writing patrons to file {path}: {e}")
        return False
