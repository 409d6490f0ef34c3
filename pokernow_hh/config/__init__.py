"""
Conversion options and their YAML loader.
"""

from .options import ConvertOptions
from .loader import load_options

__all__ = ['ConvertOptions', 'load_options']
