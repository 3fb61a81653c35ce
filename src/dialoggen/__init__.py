"""
Dialoggen - two-character dialog generator driven by a local LLM.
"""

__version__ = "0.1.0"

from . import models
from . import services

__all__ = ["models", "services"]
