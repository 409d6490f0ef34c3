"""
Reading raw PokerNow log exports.
"""

from .ingest import read_log_entries, smart_decode

__all__ = ['read_log_entries', 'smart_decode']
