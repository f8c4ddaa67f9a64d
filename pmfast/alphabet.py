"""Weighted alphabets: character → mass lookup for sequence digestion.

An `Alphabet` maps single ASCII characters to masses. Besides the plain
dictionary lookup it keeps an ord()-indexed mass table (256 entries) and a
matching "known" mask, so whole sequences can be converted to per-residue
mass arrays without a Python loop, ready for the Numba kernels in
`pmfast.fragments.pmf`.

The mass type is a NumPy dtype. float64 is the default; integer dtypes
allow scaled (integer) masses with exact arithmetic.

Examples
--------
>>> alphabet = Alphabet.from_name("amino_acids")
>>> alphabet.mass("K")
128.094963
>>> alphabet.masses_of("PEPTIDE")
array([ 97.052764, 129.042593, ...])
"""

from typing import Dict, Mapping, Union

import numpy as np

from .constants import (
    AA_MASSES_DICT,
    AA_MASSES_NONSTANDARD,
    RNA_MASSES_DICT,
)


class MassLookupError(KeyError):
    """Raised when a character has no mass in the alphabet.

    Attributes
    ----------
    character : str
        The character that could not be looked up
    position : int or None
        0-based position of the character in the sequence, if known
    """

    def __init__(self, character: str, position: int = None):
        self.character = character
        self.position = position
        super().__init__(character)

    def __str__(self):
        if self.position is None:
            return f"No mass for character {self.character!r}"
        return f"No mass for character {self.character!r} at position {self.position}"


def encode_sequence_to_ord(sequence: str) -> np.ndarray:
    """Encode sequence string to ord() array for Numba processing.

    Parameters
    ----------
    sequence : str
        Sequence of ASCII characters

    Returns
    -------
    sequence_ord : np.ndarray (uint8)
        Array of ord() values for each character

    Raises
    ------
    MassLookupError
        If the sequence contains a non-ASCII character (never in an alphabet)

    Examples
    --------
    >>> encode_sequence_to_ord("PEPTIDE")
    array([80, 69, 80, 84, 73, 68, 69], dtype=uint8)
    """
    try:
        encoded = sequence.encode('ascii')
    except UnicodeEncodeError as e:
        raise MassLookupError(sequence[e.start], e.start) from None
    if not encoded:
        return np.empty(0, dtype=np.uint8)
    return np.frombuffer(encoded, dtype=np.uint8)


def build_char_mask(characters) -> np.ndarray:
    """Build a 256-entry boolean membership table indexed by ord().

    Parameters
    ----------
    characters : str or iterable of str
        Single ASCII characters to mark

    Returns
    -------
    mask : np.ndarray (bool)
        mask[ord(c)] is True for every c in characters

    Raises
    ------
    ValueError
        If an entry is not a single ASCII character
    """
    mask = np.zeros(256, dtype=np.bool_)
    for c in characters:
        validate_char(c)
        mask[ord(c)] = True
    return mask


def validate_char(c) -> None:
    """Raise ValueError unless c is a single ASCII character."""
    if not isinstance(c, str) or len(c) != 1 or ord(c) > 127:
        raise ValueError(f"Expected a single ASCII character, got {c!r}")


class Alphabet:
    """Character → mass table with vectorised lookup.

    Parameters
    ----------
    masses : Mapping[str, number]
        Mass per character (single ASCII characters)
    dtype : numpy dtype, optional
        Numeric mass type (default: float64)

    Attributes
    ----------
    dtype : np.dtype
        Mass type of every value returned by this alphabet
    mass_table : np.ndarray
        ord()-indexed masses (0 for unknown characters)
    known_mask : np.ndarray (bool)
        ord()-indexed membership table
    """

    def __init__(self, masses: Mapping[str, Union[int, float]], dtype=np.float64):
        self.dtype = np.dtype(dtype)
        self._masses: Dict[str, Union[int, float]] = {}
        self.mass_table = np.zeros(256, dtype=self.dtype)
        self.known_mask = np.zeros(256, dtype=np.bool_)

        for c, mass in masses.items():
            validate_char(c)
            value = self.dtype.type(mass)
            self._masses[c] = value.item()
            self.mass_table[ord(c)] = value
            self.known_mask[ord(c)] = True

    @classmethod
    def from_name(cls, name: str, dtype=np.float64) -> 'Alphabet':
        """Create one of the built-in alphabets.

        Parameters
        ----------
        name : str
            'amino_acids', 'amino_acids_extended' or 'ribonucleotides'
        dtype : numpy dtype, optional
            Numeric mass type

        Raises
        ------
        ValueError
            If name is not a built-in alphabet
        """
        if name == 'amino_acids':
            masses = AA_MASSES_DICT
        elif name == 'amino_acids_extended':
            masses = {**AA_MASSES_DICT, **AA_MASSES_NONSTANDARD}
        elif name == 'ribonucleotides':
            masses = RNA_MASSES_DICT
        else:
            raise ValueError(
                f"Unknown alphabet: {name}. "
                f"Must be 'amino_acids', 'amino_acids_extended', or 'ribonucleotides'"
            )
        return cls(masses, dtype=dtype)

    def mass(self, character: str):
        """Mass of a single character.

        Raises
        ------
        MassLookupError
            If the character is not part of the alphabet
        """
        try:
            return self._masses[character]
        except KeyError:
            raise MassLookupError(character) from None

    def masses_of(self, sequence: str) -> np.ndarray:
        """Per-residue masses of a whole sequence.

        Parameters
        ----------
        sequence : str
            Sequence to look up

        Returns
        -------
        masses : np.ndarray
            masses[i] == self.mass(sequence[i]), dtype self.dtype

        Raises
        ------
        MassLookupError
            For the first character not in the alphabet
        """
        sequence_ord = encode_sequence_to_ord(sequence)
        known = self.known_mask[sequence_ord]
        if not known.all():
            position = int(np.argmin(known))
            raise MassLookupError(sequence[position], position)
        return self.mass_table[sequence_ord]

    @property
    def characters(self) -> str:
        """All characters of the alphabet, in insertion order."""
        return ''.join(self._masses)

    def to_dict(self) -> Dict[str, Union[int, float]]:
        return dict(self._masses)

    def __contains__(self, character) -> bool:
        return character in self._masses

    def __len__(self) -> int:
        return len(self._masses)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self.dtype == other.dtype and self._masses == other._masses

    def __repr__(self) -> str:
        return f"Alphabet({self.characters!r}, dtype={self.dtype.name})"
