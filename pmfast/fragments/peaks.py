"""Fragment peak records produced by sequence digestion."""

from dataclasses import dataclass
from typing import NamedTuple, Union

import numpy as np


@dataclass
class FragmentPeak:
    """One predicted fragment of a digested sequence.

    Attributes
    ----------
    mass : int or float
        Summed mass of the fragment (type follows the alphabet dtype)
    start : int
        0-based start offset in the parent sequence
    length : int
        Number of characters covered (always > 0)
    miscleavage_count : int
        Number of uncut cleavage sites inside the fragment
    """

    mass: Union[int, float]
    start: int
    length: int
    miscleavage_count: int = 0

    @property
    def end(self) -> int:
        """Exclusive end offset (Python slice convention)."""
        return self.start + self.length

    def subsequence(self, sequence: str) -> str:
        """Slice this fragment out of its parent sequence."""
        return sequence[self.start:self.end]


class FragmentArrays(NamedTuple):
    """Array form of a fragment list, in emission order."""

    masses: np.ndarray
    starts: np.ndarray
    lengths: np.ndarray
    miscleavages: np.ndarray

    def to_peaks(self) -> list:
        return [
            FragmentPeak(mass, start, length, miscleavage_count)
            for mass, start, length, miscleavage_count in zip(
                self.masses.tolist(),
                self.starts.tolist(),
                self.lengths.tolist(),
                self.miscleavages.tolist(),
            )
        ]
