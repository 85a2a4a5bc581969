"""
Technology signal extraction from developer activity.
"""

from src.signals.extractor import (
    SignalKind,
    SignalWeights,
    TechnologySignal,
    TechnologySignalExtractor,
)

__all__ = [
    "SignalKind",
    "SignalWeights",
    "TechnologySignal",
    "TechnologySignalExtractor",
]
