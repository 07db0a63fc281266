"""
Extraction module - Group classification from article text.
"""
from .text_classifier import (
    GroupNameFrequencyStrategy,
    InfoboxLabelStrategy,
    TextClassifier,
    WordFrequency,
    most_frequent_word,
)

__all__ = [
    "GroupNameFrequencyStrategy",
    "InfoboxLabelStrategy",
    "TextClassifier",
    "WordFrequency",
    "most_frequent_word",
]
