# pokernow_hh/upload/ingest.py
import csv
import io
import logging
from pathlib import Path
from typing import List, Union

from dateutil import parser as date_parser

from ..errors import InputFormatError
from ..parse.schemas import LogEntry

logger = logging.getLogger(__name__)

ENCODINGS = ["utf-8-sig", "cp1252", "latin-1"]

EXPECTED_HEADER = ["entry", "at", "order"]


def smart_decode(data: Union[bytes, str]) -> str:
    """Decode raw bytes trying the usual export encodings and normalize newlines."""
    if isinstance(data, str):
        text = data
    else:
        text = None
        for enc in ENCODINGS:
            try:
                text = data.decode(enc)
                break
            except UnicodeDecodeError:
                continue
        if text is None:
            text = data.decode("latin-1", errors="ignore")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def smart_read_text(path: Path) -> str:
    return smart_decode(Path(path).read_bytes())


def read_log_entries(text: str) -> List[LogEntry]:
    """
    Parse a PokerNow CSV export into chronologically ordered entries.

    The export lists the newest entry first, so rows are reversed after
    parsing. Order keys are assumed to increase after reversal.

    Args:
        text: CSV text with an ``entry,at,order`` header

    Returns:
        List of LogEntry, oldest first

    Raises:
        InputFormatError: on a bad header, row, timestamp or order key
    """
    reader = csv.reader(io.StringIO(text))

    try:
        header = next(reader)
    except StopIteration:
        raise InputFormatError("failed to read CSV header: input is empty")
    except csv.Error as e:
        raise InputFormatError(f"failed to read CSV header: {e}")

    if header != EXPECTED_HEADER:
        raise InputFormatError(
            f"invalid CSV header: expected {','.join(EXPECTED_HEADER)}, got {','.join(header)}"
        )

    entries = []
    try:
        for row in reader:
            line_no = reader.line_num
            if not row:
                continue  # blank line
            if len(row) != 3:
                raise InputFormatError(f"invalid CSV row at line {line_no}: expected 3 columns, got {len(row)}")

            entry, at_text, order_text = row

            try:
                at = date_parser.isoparse(at_text)
            except ValueError as e:
                raise InputFormatError(f"invalid timestamp at line {line_no}: {at_text!r} ({e})")
            if at.tzinfo is None:
                raise InputFormatError(f"invalid timestamp at line {line_no}: {at_text!r} has no UTC offset")

            try:
                order = int(order_text, 10)
            except ValueError:
                raise InputFormatError(f"invalid order at line {line_no}: {order_text!r}")

            entries.append(LogEntry(entry=entry, at=at, order=order))
    except csv.Error as e:
        raise InputFormatError(f"failed to read CSV at line {reader.line_num}: {e}")

    entries.reverse()
    logger.debug(f"Read {len(entries)} log entries")
    return entries
