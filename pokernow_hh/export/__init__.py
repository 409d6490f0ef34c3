"""
Writers for converted hand histories.
"""

from .pokerstars import PokerStarsFormatter, format_number, calculate_rake, calculate_total_pot

__all__ = ['PokerStarsFormatter', 'format_number', 'calculate_rake', 'calculate_total_pot']
