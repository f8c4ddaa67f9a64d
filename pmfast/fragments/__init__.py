"""Peptide mass fingerprint prediction.

This module cuts sequences after cleavage characters (e.g. trypsin: after
K/R, not before P) and reports every fragment with up to N missed
cleavages. Segmentation and miscleavage expansion run as Numba JIT kernels.
"""

from .peaks import (
    FragmentPeak,
    FragmentArrays,
)

from .pmf import (
    PMFFragmenter,
    CleavageConfig,
    Subfragments,
    split_subfragments_numba,
    expand_miscleavages_numba,
    predict_spectra,
)

from .modifiers import (
    SortModifier,
    UnificationModifier,
    FilterModifier,
    ChainModifier,
)

__all__ = [
    # Peaks
    'FragmentPeak',
    'FragmentArrays',

    # Fragmenter
    'PMFFragmenter',
    'CleavageConfig',
    'Subfragments',
    'split_subfragments_numba',
    'expand_miscleavages_numba',
    'predict_spectra',

    # Modifiers
    'SortModifier',
    'UnificationModifier',
    'FilterModifier',
    'ChainModifier',
]
