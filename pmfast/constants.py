"""Residue masses and enzyme cleavage rules for peptide mass fingerprinting.

This module provides the residue mass tables and the named cleavage
configurations used throughout pmfast. Mass values are monoisotopic residue
masses (no terminal H2O) sourced from established proteomics standards.

Masses are provided as dictionaries; `pmfast.alphabet.Alphabet` turns them
into ord()-indexed arrays for Numba kernels.

Sources
-------
- IUPAC amino acid masses: https://www.unimod.org/masses.html
- Expasy PeptideCutter enzyme rules: https://web.expasy.org/peptide_cutter/
"""

# =============================================================================
# Amino Acid Monoisotopic Residue Masses (Da)
# =============================================================================

# Standard 20 amino acids (unmodified)
AA_MASSES_DICT = {
    'A': 71.037114,   # Alanine
    'R': 156.101111,  # Arginine
    'N': 114.042927,  # Asparagine
    'D': 115.026943,  # Aspartic acid
    'C': 103.009185,  # Cysteine (unmodified)
    'E': 129.042593,  # Glutamic acid
    'Q': 128.058578,  # Glutamine
    'G': 57.021464,   # Glycine
    'H': 137.058912,  # Histidine
    'I': 113.084064,  # Isoleucine
    'L': 113.084064,  # Leucine
    'K': 128.094963,  # Lysine
    'M': 131.040485,  # Methionine
    'F': 147.068414,  # Phenylalanine
    'P': 97.052764,   # Proline
    'S': 87.032028,   # Serine
    'T': 101.047679,  # Threonine
    'W': 186.079313,  # Tryptophan
    'Y': 163.063320,  # Tyrosine
    'V': 99.068414,   # Valine
}

# Non-standard amino acids mapped to the mass of their closest standard residue
AA_MASSES_NONSTANDARD = {
    'X': 113.084064,  # Unknown → Leu/Ile (most common)
    'Z': 128.058578,  # Glu/Gln → Gln
    'B': 114.042927,  # Asp/Asn → Asn
    'J': 113.084064,  # Leu/Ile → Leu
    'U': 103.009185,  # Selenocysteine → Cys (similar mass)
    'O': 131.040485,  # Pyrrolysine → Met (closest mass)
}

# =============================================================================
# Ribonucleotide Residue Masses (Da)
# =============================================================================

# Nucleoside monophosphate minus H2O (chain residue inside an RNA strand)
RNA_MASSES_DICT = {
    'A': 329.052520,  # AMP residue
    'C': 305.041287,  # CMP residue
    'G': 345.047435,  # GMP residue
    'U': 306.025302,  # UMP residue
}

# =============================================================================
# Enzyme Cleavage Rules
# =============================================================================

# name → (cleavage characters, prohibition characters, with_cleave)
# Enzymes cleave C-terminal to a cleavage character unless the next residue
# is a prohibition character. with_cleave=True keeps the cleavage character
# at the end of the fragment (tryptic setting).
ENZYME_RULES = {
    'trypsin': ('KR', 'P', True),
    'trypsin/p': ('KR', '', True),
    'lys-c': ('K', '', True),
    'arg-c': ('R', 'P', True),
    'glu-c': ('E', 'P', True),
    'chymotrypsin': ('FWY', 'P', True),
    'rnase_t1': ('G', '', True),
    'rnase_a': ('CU', '', True),
}

# =============================================================================
# Default Digestion Settings
# =============================================================================

DEFAULT_ENZYME = 'trypsin'
DEFAULT_MISSED_CLEAVAGES = 2
DEFAULT_MIN_PEPTIDE_LENGTH = 7
DEFAULT_MAX_PEPTIDE_LENGTH = 35
