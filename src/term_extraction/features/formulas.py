"""
Term scoring formulas.

Plain numeric functions with no knowledge of where their inputs come from.
Notation used in the docstrings: tf and df are the term and document
frequency of the term, N the number of documents, T the number of tokens,
|t| the term length in tokens, sup(t) and sub(t) its super- and subterms.
"""

import math
from typing import Sequence

# Reference frequency used for terms absent from the reference corpus
REFERENCE_FREQUENCY_FLOOR = 0.1

BASIC_SUPERTERM_WEIGHT = 3.5
COMBO_SUPERTERM_WEIGHT = 0.75
COMBO_SUBTERM_WEIGHT = 0.1


def avg_term_freq(tf: int, df: int) -> float:
    """tf / df"""
    return tf / df


def residual_idf(tf: int, df: int, documents: int) -> float:
    """
    Observed IDF minus the IDF predicted by a Poisson model.

    log2(N/df) + log2(1 - e^(-tf/N))
    """
    return math.log2(documents / df) + math.log2(1.0 - math.exp(-tf / documents))


def total_tf_idf(tf: int, df: int, documents: int) -> float:
    """tf * ln(N/df)"""
    return tf * math.log(documents / df)


def c_value(length: int, tf: int, superterm_frequencies: Sequence[int]) -> float:
    """
    C-value: frequency corrected for occurrences inside longer terms.

    log2(|t|+1) * tf without superterms, otherwise
    log2(|t|+1) * (tf - mean tf of the superterms).
    """
    weight = math.log2(length + 1)
    if not superterm_frequencies:
        return weight * tf
    return weight * (tf - sum(superterm_frequencies) / len(superterm_frequencies))


def basic(length: int, frequency: float, superterms: int) -> float:
    """|t| * ln(tf) + 3.5 * |sup(t)|"""
    return length * math.log(frequency) + BASIC_SUPERTERM_WEIGHT * superterms


def combo_basic(length: int, frequency: float, superterms: int, subterms: int) -> float:
    """|t| * ln(tf) + 0.75 * |sup(t)| + 0.1 * |sub(t)|"""
    return (
        length * math.log(frequency)
        + COMBO_SUPERTERM_WEIGHT * superterms
        + COMBO_SUBTERM_WEIGHT * subterms
    )


def weirdness(tf: int, tokens: int, reference_tf: int, reference_tokens: int) -> float:
    """
    Relative frequency in the corpus over relative frequency in the reference.

    (tf/T) / (max(tf_ref, 0.1) / T_ref). The floor keeps the score finite for
    terms the reference corpus never saw.
    """
    reference = max(reference_tf, REFERENCE_FREQUENCY_FLOOR) / reference_tokens
    return (tf / tokens) / reference


def relevance(tf: int, df: int, documents: int, reference_tf: int) -> float:
    """1 - 1 / log2(2 + tf * df / (N * max(tf_ref, 0.1)))"""
    ratio = tf * df / (documents * max(reference_tf, REFERENCE_FREQUENCY_FLOOR))
    return 1.0 - 1.0 / math.log2(2.0 + ratio)
