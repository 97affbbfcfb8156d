"""
Term scoring features.
"""

from .engine import (
    DOMAIN_FEATURES,
    FEATURE_REQUIREMENTS,
    FeatureContext,
    FeatureEngine,
    Requirement,
    calculate_feature,
)

__all__ = [
    "DOMAIN_FEATURES",
    "FEATURE_REQUIREMENTS",
    "FeatureContext",
    "FeatureEngine",
    "Requirement",
    "calculate_feature",
]
