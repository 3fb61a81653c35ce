"""Reading scene directories and writing results."""

from .output_writer import OutputWriter, format_metadata
from .scene_loader import load_config, parse_key_value

__all__ = ['OutputWriter', 'format_metadata', 'load_config', 'parse_key_value']
