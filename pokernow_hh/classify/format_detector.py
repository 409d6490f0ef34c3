"""
Input format detection for PokerNow exports (CSV log, JSON, JSON Lines)
"""
import json
import logging

logger = logging.getLogger(__name__)

FORMAT_CSV = "csv"
FORMAT_JSON = "json"
FORMAT_JSONL = "jsonl"


def detect_input_format(content: str) -> str:
    """
    Decide how a raw export should be read.

    Anything that does not start with "{" is treated as a CSV log, including
    an empty buffer and a top-level JSON array; the CSV reader then rejects
    it with a header error. A single complete object is JSON. A broken
    object, or an object followed by more data, is read as JSON Lines.

    Returns: 'csv', 'json' or 'jsonl'
    """
    trimmed = content.strip()
    if not trimmed or not trimmed.startswith("{"):
        return FORMAT_CSV

    decoder = json.JSONDecoder()
    try:
        _, end = decoder.raw_decode(trimmed)
    except json.JSONDecodeError:
        logger.debug("Leading object does not decode on its own, reading as JSON Lines")
        return FORMAT_JSONL

    if trimmed[end:].strip():
        return FORMAT_JSONL

    return FORMAT_JSON
