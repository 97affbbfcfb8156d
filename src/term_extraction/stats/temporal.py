"""
Temporal occurrence statistics and frequency extrapolation.

Dated documents are grouped into fixed-width buckets of ``interval_days``
days. For each term the per-bucket counts form a series running from the
corpus' first dated bucket to its last, and a straight-line fit over that
series predicts the term's frequency in the following bucket.
"""

from typing import Dict, Mapping, Optional

import numpy as np

# Predicted frequencies are floored here so that ln() stays finite
MIN_PREDICTED_FREQUENCY = 0.1


class TemporalStats:
    """
    Per-term occurrence counts bucketed by document date.

    Args:
        interval_days: Bucket width in days (<= 0 disables prediction)
        counts: term -> bucket index -> occurrences
        first_bucket: First bucket holding any dated document
        last_bucket: Last bucket holding any dated document

    Examples:
        >>> stats = TemporalStats(365, {"graph": {10: 1, 11: 2, 12: 3}}, 10, 12)
        >>> stats.series("graph").tolist()
        [1.0, 2.0, 3.0]
        >>> round(stats.predict("graph"), 6)
        4.0
    """

    def __init__(
        self,
        interval_days: int,
        counts: Mapping[str, Mapping[int, int]],
        first_bucket: Optional[int] = None,
        last_bucket: Optional[int] = None,
    ):
        self.interval_days = interval_days
        self._counts: Dict[str, Dict[int, int]] = {t: dict(b) for t, b in counts.items()}
        self.first_bucket = first_bucket
        self.last_bucket = last_bucket

    @property
    def enabled(self) -> bool:
        """True if the corpus has dated documents and bucketing is on."""
        return self.interval_days > 0 and self.first_bucket is not None

    @property
    def bucket_count(self) -> int:
        if not self.enabled:
            return 0
        return self.last_bucket - self.first_bucket + 1

    def series(self, term: str) -> np.ndarray:
        """
        Occurrences of a term in every bucket from first to last (zeros included).
        """
        values = np.zeros(self.bucket_count, dtype=float)
        for bucket, count in self._counts.get(term, {}).items():
            values[bucket - self.first_bucket] = count
        return values

    def predict(self, term: str) -> float:
        """
        Extrapolate a term's frequency into the bucket after the last one.

        Uses a least-squares straight line over the series, clamped at zero.
        A single-bucket series predicts its own value. The result is floored
        at MIN_PREDICTED_FREQUENCY.

        Raises:
            ValueError: If temporal statistics are disabled
        """
        if not self.enabled:
            raise ValueError("No dated documents or temporal bucketing disabled")

        values = self.series(term)
        if len(values) == 1:
            predicted = float(values[0])
        else:
            x = np.arange(len(values), dtype=float)
            slope, intercept = np.polyfit(x, values, 1)
            predicted = max(0.0, float(slope * len(values) + intercept))

        return max(predicted, MIN_PREDICTED_FREQUENCY)
