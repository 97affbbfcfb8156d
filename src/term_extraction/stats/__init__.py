"""
Corpus statistics: frequencies, inclusion, domain, temporal and reference data.
"""

from .domain import DomainStats, select_domain_terms
from .frequency import FrequencyAggregator, FrequencyStats
from .inclusion import InclusionStats
from .lazy import Lazy
from .reference import load_reference_stats, save_frequency_stats
from .temporal import MIN_PREDICTED_FREQUENCY, TemporalStats

__all__ = [
    "DomainStats",
    "select_domain_terms",
    "FrequencyAggregator",
    "FrequencyStats",
    "InclusionStats",
    "Lazy",
    "load_reference_stats",
    "save_frequency_stats",
    "MIN_PREDICTED_FREQUENCY",
    "TemporalStats",
]
