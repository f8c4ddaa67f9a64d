"""Peptide mass fingerprint prediction with Numba JIT compilation.

This module computes the fragments produced when a sequence is cut after a
set of cleavage characters (e.g. K/R for trypsin), optionally blocked by a
following prohibition character (e.g. P), with up to N missed cleavages.

Two-phase design:
1. Segmentation: one left-to-right scan splits the sequence into
   subfragments at every actual cleavage site (O(n)).
2. Miscleavage expansion: every run of 1..N+1 consecutive subfragments
   becomes one fragment (O(n * (N+1))).

The cleavage character at the end of a fragment is either kept in the
fragment (tryptic setting, with_cleave=True) or discarded. Fragments are
emitted in order of occurrence, duplicates included; use a modifier from
`pmfast.fragments.modifiers` to sort, deduplicate or filter.

Key optimizations:
1. ord()-indexed boolean tables for cleavage/prohibition membership
2. Per-residue masses looked up once, as an array, by the alphabet
3. Pre-allocated output arrays (no dynamic allocation inside kernels)
"""

import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, NamedTuple, Optional, Sequence

import numba
import numpy as np

from ..alphabet import Alphabet, build_char_mask, encode_sequence_to_ord, validate_char
from ..constants import ENZYME_RULES
from .peaks import FragmentArrays, FragmentPeak

logger = logging.getLogger(__name__)

Modifier = Callable[[List[FragmentPeak]], None]


# =============================================================================
# Configuration
# =============================================================================

@dataclass(frozen=True)
class CleavageConfig:
    """Cleavage rule of a fragmenter.

    Attributes
    ----------
    cleavage_characters : frozenset of str
        Characters after which the sequence is cut
    prohibition_characters : frozenset of str
        Characters that block a cut when they follow a cleavage character
    with_cleave : bool
        Keep the cleavage character at the end of its fragment
    """

    cleavage_characters: FrozenSet[str]
    prohibition_characters: FrozenSet[str] = frozenset()
    with_cleave: bool = True

    def __post_init__(self):
        for name in ('cleavage_characters', 'prohibition_characters'):
            characters = frozenset(getattr(self, name))
            for c in characters:
                validate_char(c)
            object.__setattr__(self, name, characters)

    @classmethod
    def for_enzyme(cls, enzyme: str) -> 'CleavageConfig':
        """Create the cleavage rule of a named enzyme.

        Args:
            enzyme: Enzyme name (see `pmfast.constants.ENZYME_RULES`),
                case-insensitive

        Returns:
            CleavageConfig for this enzyme
        """
        try:
            cleavage, prohibition, with_cleave = ENZYME_RULES[enzyme.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown enzyme: {enzyme}. "
                f"Known enzymes: {', '.join(sorted(ENZYME_RULES))}"
            ) from None
        return cls(frozenset(cleavage), frozenset(prohibition), with_cleave)


class Subfragments(NamedTuple):
    """Segments between consecutive cleavage sites (parallel arrays)."""

    masses: np.ndarray
    cleavage_masses: np.ndarray
    lengths: np.ndarray
    cleavage_lengths: np.ndarray
    starts: np.ndarray


# =============================================================================
# Core Kernels (Numba-Compiled)
# =============================================================================

@numba.jit(nopython=True, cache=True)
def split_subfragments_numba(
    residue_masses: np.ndarray,
    is_cleavage: np.ndarray,
    is_prohibition: np.ndarray,
    sub_mass: np.ndarray,
    sub_cleavage_mass: np.ndarray,
    sub_length: np.ndarray,
    sub_cleavage_length: np.ndarray,
    sub_start: np.ndarray,
) -> int:
    """Split a sequence into subfragments at every actual cleavage site.

    Parameters
    ----------
    residue_masses : np.ndarray
        Mass of each character of the sequence
    is_cleavage, is_prohibition : np.ndarray (bool)
        Per-position membership in the cleavage / prohibition sets
    sub_mass, sub_cleavage_mass, sub_length, sub_cleavage_length, sub_start : np.ndarray
        Zero-initialised output arrays of size len(sequence) + 1

    Returns
    -------
    n_sub : int
        Number of subfragments written to the output arrays

    Notes
    -----
    - A cleavage at the last character is always honored (nothing follows
      that could prohibit it)
    - The trailing remainder without cleavage character is kept only if it
      is non-empty; its cleavage mass and length stay 0
    """
    n = len(residue_masses)
    n_sub = 0
    sub_start[0] = 0

    for i in range(n):
        cleave_here = is_cleavage[i]
        if cleave_here and i + 1 < n:
            cleave_here = not is_prohibition[i + 1]

        if cleave_here:
            # close current subfragment
            sub_cleavage_length[n_sub] = 1
            sub_cleavage_mass[n_sub] = residue_masses[i]
            n_sub += 1
            sub_start[n_sub] = i + 1
        else:
            sub_mass[n_sub] += residue_masses[i]
            sub_length[n_sub] += 1

    if sub_length[n_sub] > 0:
        n_sub += 1

    return n_sub


@numba.jit(nopython=True, cache=True)
def expand_miscleavages_numba(
    sub_mass: np.ndarray,
    sub_cleavage_mass: np.ndarray,
    sub_length: np.ndarray,
    sub_cleavage_length: np.ndarray,
    sub_start: np.ndarray,
    n_sub: int,
    max_miscleaves: int,
    with_cleave: bool,
    out_mass: np.ndarray,
    out_start: np.ndarray,
    out_length: np.ndarray,
    out_miscleavages: np.ndarray,
) -> int:
    """Join runs of consecutive subfragments into fragments.

    For each subfragment j, emits fragments covering subfragments
    j..j+k for k = 0..max_miscleaves (fewer near the end of the sequence).

    Parameters
    ----------
    sub_* : np.ndarray
        Subfragment arrays from split_subfragments_numba()
    n_sub : int
        Number of valid subfragments
    max_miscleaves : int
        Maximum number of missed cleavages per fragment
    with_cleave : bool
        Include the terminating cleavage character in each fragment
    out_mass, out_start, out_length, out_miscleavages : np.ndarray
        Output arrays, at least n_sub * (max_miscleaves + 1) long

    Returns
    -------
    n_fragments : int
        Number of fragments written to the output arrays
    """
    idx = 0
    for j in range(n_sub):
        length = 0
        mass = sub_mass[j] - sub_mass[j]  # zero of the mass dtype

        for k in range(max_miscleaves + 1):
            s = j + k
            if s >= n_sub:
                break

            length += sub_length[s]
            mass += sub_mass[s]

            if with_cleave:
                peak_mass = mass + sub_cleavage_mass[s]
                peak_length = length + sub_cleavage_length[s]
            else:
                peak_mass = mass
                peak_length = length

            # omit empty fragments
            if peak_length > 0:
                out_mass[idx] = peak_mass
                out_start[idx] = sub_start[j]
                out_length[idx] = peak_length
                out_miscleavages[idx] = k
                idx += 1

            # the cleavage character is inside every longer fragment
            length += sub_cleavage_length[s]
            mass += sub_cleavage_mass[s]

    return idx


# =============================================================================
# Fragmenter
# =============================================================================

class PMFFragmenter:
    """Peptide mass fingerprint fragmenter.

    Cuts sequences after every cleavage character that is not followed by a
    prohibition character, and reports all fragments with up to
    `max_miscleaves` missed cleavages.

    Parameters
    ----------
    alphabet : Alphabet or Mapping[str, number]
        Character masses. An Alphabet is referenced, not copied.
    cleavage_characters : str or iterable of str
        Characters that mark the end of a fragment
    prohibition_characters : str or iterable of str, optional
        A cleavage character followed by one of these is not cut
    with_cleave : bool, optional
        If True (default) the cleavage character is included in the
        fragment, otherwise it is discarded
    modifier : callable, optional
        Post-processing step applied in place to each predicted peak list

    Examples
    --------
    >>> fragmenter = PMFFragmenter.from_enzyme("trypsin", max_miscleaves=1)
    >>> peaks = fragmenter.predict_spectrum("PEPTIDEKAAR")
    >>> [p.subsequence("PEPTIDEKAAR") for p in peaks]
    ['PEPTIDEK', 'PEPTIDEKAAR', 'AAR']
    """

    def __init__(
        self,
        alphabet,
        cleavage_characters,
        prohibition_characters='',
        with_cleave: bool = True,
        modifier: Optional[Modifier] = None,
    ):
        if not isinstance(alphabet, Alphabet):
            alphabet = Alphabet(alphabet)
        self.alphabet = alphabet
        self.config = CleavageConfig(
            frozenset(cleavage_characters),
            frozenset(prohibition_characters),
            bool(with_cleave),
        )
        self.modifier = modifier
        self._max_miscleaves = 0

        # ord()-indexed membership tables
        self._cleavage_mask = build_char_mask(self.config.cleavage_characters)
        self._prohibition_mask = build_char_mask(self.config.prohibition_characters)

    @classmethod
    def from_enzyme(
        cls,
        enzyme: str,
        alphabet=None,
        max_miscleaves: int = 0,
        modifier: Optional[Modifier] = None,
    ) -> 'PMFFragmenter':
        """Create a fragmenter for a named enzyme.

        Parameters
        ----------
        enzyme : str
            Enzyme name, e.g. 'trypsin' (see ENZYME_RULES)
        alphabet : Alphabet, optional
            Defaults to the 20 standard amino acids plus X, Z, B, J, U, O
        max_miscleaves : int
            Maximum number of missed cleavages (default: 0)
        modifier : callable, optional
            Post-processing step
        """
        config = CleavageConfig.for_enzyme(enzyme)
        if alphabet is None:
            alphabet = Alphabet.from_name('amino_acids_extended')
        fragmenter = cls(
            alphabet,
            config.cleavage_characters,
            config.prohibition_characters,
            config.with_cleave,
            modifier=modifier,
        )
        fragmenter.max_miscleaves = max_miscleaves
        return fragmenter

    @property
    def max_miscleaves(self) -> int:
        """Maximum number of missed cleavages per fragment."""
        return self._max_miscleaves

    @max_miscleaves.setter
    def max_miscleaves(self, value: int):
        self._max_miscleaves = value

    @property
    def cleavage_characters(self) -> FrozenSet[str]:
        return self.config.cleavage_characters

    @property
    def prohibition_characters(self) -> FrozenSet[str]:
        return self.config.prohibition_characters

    @property
    def with_cleave(self) -> bool:
        return self.config.with_cleave

    def copy(self) -> 'PMFFragmenter':
        """Copy alphabet, cleavage rule and modifier.

        Note: max_miscleaves is NOT carried over, the copy starts at 0.
        """
        return type(self)(
            self.alphabet,
            self.config.cleavage_characters,
            self.config.prohibition_characters,
            self.config.with_cleave,
            modifier=self.modifier,
        )

    __copy__ = copy

    def split_subfragments(self, sequence: str) -> Subfragments:
        """Split a sequence at every actual cleavage site.

        Raises
        ------
        MassLookupError
            If the sequence contains a character unknown to the alphabet
        """
        residue_masses = self.alphabet.masses_of(sequence)
        sequence_ord = encode_sequence_to_ord(sequence)

        n = len(residue_masses)
        sub_mass = np.zeros(n + 1, dtype=residue_masses.dtype)
        sub_cleavage_mass = np.zeros(n + 1, dtype=residue_masses.dtype)
        sub_length = np.zeros(n + 1, dtype=np.int64)
        sub_cleavage_length = np.zeros(n + 1, dtype=np.int64)
        sub_start = np.zeros(n + 1, dtype=np.int64)

        n_sub = split_subfragments_numba(
            residue_masses,
            self._cleavage_mask[sequence_ord],
            self._prohibition_mask[sequence_ord],
            sub_mass,
            sub_cleavage_mass,
            sub_length,
            sub_cleavage_length,
            sub_start,
        )

        return Subfragments(
            sub_mass[:n_sub],
            sub_cleavage_mass[:n_sub],
            sub_length[:n_sub],
            sub_cleavage_length[:n_sub],
            sub_start[:n_sub],
        )

    def predict_spectrum_arrays(self, sequence: str) -> FragmentArrays:
        """Predict fragments as parallel arrays (no modifier applied).

        Parameters
        ----------
        sequence : str
            Sequence to digest

        Returns
        -------
        FragmentArrays
            masses, starts, lengths and miscleavage counts in order of
            occurrence
        """
        subfragments = self.split_subfragments(sequence)
        n_sub = len(subfragments.masses)

        # more miscleavages than subfragment boundaries cannot be realised
        max_miscleaves = min(self._max_miscleaves, max(n_sub - 1, 0))
        capacity = n_sub * max(max_miscleaves + 1, 0)

        out_mass = np.empty(capacity, dtype=subfragments.masses.dtype)
        out_start = np.empty(capacity, dtype=np.int64)
        out_length = np.empty(capacity, dtype=np.int64)
        out_miscleavages = np.empty(capacity, dtype=np.int64)

        n_fragments = expand_miscleavages_numba(
            subfragments.masses,
            subfragments.cleavage_masses,
            subfragments.lengths,
            subfragments.cleavage_lengths,
            subfragments.starts,
            n_sub,
            max_miscleaves,
            self.config.with_cleave,
            out_mass,
            out_start,
            out_length,
            out_miscleavages,
        )

        return FragmentArrays(
            out_mass[:n_fragments],
            out_start[:n_fragments],
            out_length[:n_fragments],
            out_miscleavages[:n_fragments],
        )

    def predict_spectrum(
        self,
        sequence: str,
        peaklist: Optional[List[FragmentPeak]] = None,
    ) -> List[FragmentPeak]:
        """Predict the peptide mass fingerprint of a sequence.

        Fragments are stored in order of occurrence in the sequence, even
        duplicates. If this is not desired, set a modifier (for example
        SortModifier or UnificationModifier).

        Parameters
        ----------
        sequence : str
            Sequence to digest
        peaklist : list, optional
            List to store the fragment peaks in. It is cleared before new
            fragments are added.

        Returns
        -------
        peaklist : List[FragmentPeak]
            The filled peak list (the one passed in, if any)

        Raises
        ------
        MassLookupError
            If the sequence contains a character unknown to the alphabet
        """
        if peaklist is None:
            peaklist = []
        peaklist.clear()

        arrays = self.predict_spectrum_arrays(sequence)
        peaklist.extend(arrays.to_peaks())

        if self.modifier is not None:
            self.modifier(peaklist)

        logger.debug(
            f"Predicted {len(peaklist)} fragments for sequence of length "
            f"{len(sequence)} (max_miscleaves={self._max_miscleaves})"
        )
        return peaklist

    def __repr__(self) -> str:
        return (
            f"PMFFragmenter(cleavage={''.join(sorted(self.cleavage_characters))!r}, "
            f"prohibition={''.join(sorted(self.prohibition_characters))!r}, "
            f"with_cleave={self.with_cleave}, max_miscleaves={self._max_miscleaves})"
        )


# =============================================================================
# Batch Processing
# =============================================================================

def predict_spectra(
    fragmenter: PMFFragmenter,
    sequences: Sequence[str],
) -> List[List[FragmentPeak]]:
    """Predict fingerprints for many sequences (batch processing).

    Parameters
    ----------
    fragmenter : PMFFragmenter
        Configured fragmenter
    sequences : sequence of str
        Sequences to digest

    Returns
    -------
    results : list of list of FragmentPeak
        One peak list per sequence, same order as the input

    Notes
    -----
    This is a simple loop wrapper. Lookup errors propagate; use
    `pmfast.digestion.digest_protein_list` to skip invalid sequences.
    """
    logger.info(f"Predicting fingerprints for {len(sequences):,} sequences...")

    results = []
    total_fragments = 0
    for idx, sequence in enumerate(sequences):
        peaks = fragmenter.predict_spectrum(sequence)
        total_fragments += len(peaks)
        results.append(peaks)

        if (idx + 1) % 5000 == 0:
            logger.info(f"  Processed {idx + 1:,} sequences: {total_fragments:,} fragments")

    logger.info(f"✓ Predicted {total_fragments:,} fragments")

    return results
