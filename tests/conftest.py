"""Pytest configuration for pmfast tests.

Common fixtures: a toy integer alphabet with easy-to-add masses, and the
real amino acid alphabet.
"""

import numpy as np
import pytest


@pytest.fixture
def toy_alphabet():
    """Integer masses so sums compare exactly."""
    from pmfast.alphabet import Alphabet
    return Alphabet({'A': 1, 'K': 2, 'P': 5, 'G': 10}, dtype=np.int64)


@pytest.fixture
def amino_acid_alphabet():
    """Standard 20 amino acids."""
    from pmfast.alphabet import Alphabet
    return Alphabet.from_name("amino_acids")


@pytest.fixture
def aa_masses_dict():
    """Amino acid masses dictionary."""
    from pmfast.constants import AA_MASSES_DICT
    return AA_MASSES_DICT


@pytest.fixture
def tryptic_protein():
    """Protein with K, R, and a blocked RP site."""
    return "MAGEKPTLLSRAVGDEKRPQLHWAGNK"


@pytest.fixture
def peak_tuples():
    """Helper turning peaks into comparable tuples."""
    def _convert(peaks):
        return [(p.mass, p.start, p.length, p.miscleavage_count) for p in peaks]
    return _convert
