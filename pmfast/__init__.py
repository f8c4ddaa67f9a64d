"""pmfast - Fast peptide mass fingerprint prediction.

Predicts the fragments (mass, start, length, missed cleavages) produced when
a protein or RNA sequence is digested after a set of cleavage characters,
with an optional prohibition rule (e.g. trypsin: after K/R, not before P).

Hot loops are Numba-compiled over ord()-encoded sequences.
"""

__version__ = "0.1.0"

from pmfast import constants
from pmfast import alphabet
from pmfast import fragments
from pmfast import digestion

from pmfast.alphabet import Alphabet, MassLookupError
from pmfast.fragments import FragmentPeak, PMFFragmenter

__all__ = [
    "constants",
    "alphabet",
    "fragments",
    "digestion",
    "Alphabet",
    "MassLookupError",
    "FragmentPeak",
    "PMFFragmenter",
]
