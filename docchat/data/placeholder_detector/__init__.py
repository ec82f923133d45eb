"""Placeholder detectors."""

from docchat.data.placeholder_detector.base_detector import PlaceholderDetector
from docchat.data.placeholder_detector.token_detector import (
    BracketDetector,
    CurlyBraceDetector,
    DollarBracketDetector,
    TokenDetector,
    is_valid_name,
)

__all__ = [
    'PlaceholderDetector',
    'TokenDetector',
    'CurlyBraceDetector',
    'DollarBracketDetector',
    'BracketDetector',
    'is_valid_name',
]
