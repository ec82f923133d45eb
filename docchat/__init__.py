"""Guided .docx template filling."""

# logging must be configured before anything else loads
from docchat.utils.logger import setup_logger

setup_logger()

__version__ = "0.1.0"
