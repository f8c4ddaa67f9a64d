"""Protein digestion into peptide sequences.

In silico digestion of protein sequences built on `PMFFragmenter`:
- Any enzyme from `pmfast.constants.ENZYME_RULES` (default: trypsin)
- Missed cleavages
- Peptide length filtering
- Peptide-to-protein mapping for protein lists

Performance
-----------
Segmentation and miscleavage expansion run in Numba; string slicing and
deduplication are plain Python.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Tuple

from .alphabet import Alphabet, MassLookupError
from .constants import (
    DEFAULT_ENZYME,
    DEFAULT_MAX_PEPTIDE_LENGTH,
    DEFAULT_MIN_PEPTIDE_LENGTH,
    DEFAULT_MISSED_CLEAVAGES,
)
from .fragments.modifiers import FilterModifier
from .fragments.pmf import PMFFragmenter

logger = logging.getLogger(__name__)


def make_digestion_fragmenter(
    enzyme: str = DEFAULT_ENZYME,
    min_length: int = DEFAULT_MIN_PEPTIDE_LENGTH,
    max_length: int = DEFAULT_MAX_PEPTIDE_LENGTH,
    missed_cleavages: int = DEFAULT_MISSED_CLEAVAGES,
    alphabet: Alphabet = None,
) -> PMFFragmenter:
    """Build a fragmenter whose modifier applies the peptide length filter."""
    return PMFFragmenter.from_enzyme(
        enzyme,
        alphabet=alphabet,
        max_miscleaves=missed_cleavages,
        modifier=FilterModifier(min_length=min_length, max_length=max_length),
    )


def digest_protein(
    sequence: str,
    protein_id: str,
    enzyme: str = DEFAULT_ENZYME,
    min_length: int = DEFAULT_MIN_PEPTIDE_LENGTH,
    max_length: int = DEFAULT_MAX_PEPTIDE_LENGTH,
    missed_cleavages: int = DEFAULT_MISSED_CLEAVAGES,
    alphabet: Alphabet = None,
    fragmenter: PMFFragmenter = None,
) -> List[str]:
    """Digest a single protein.

    Parameters
    ----------
    sequence : str
        Protein sequence
    protein_id : str
        Protein identifier (for logging only)
    enzyme : str
        Enzyme name (default: 'trypsin')
    min_length : int
        Minimum peptide length (default: 7)
    max_length : int
        Maximum peptide length (default: 35)
    missed_cleavages : int
        Number of missed cleavages allowed (default: 2)
    alphabet : Alphabet, optional
        Residue masses (default: extended amino acids)
    fragmenter : PMFFragmenter, optional
        Pre-built fragmenter; overrides enzyme, lengths, missed cleavages
        and alphabet

    Returns
    -------
    peptides : List[str]
        Peptides from this protein, deduplicated, in order of first
        occurrence

    Raises
    ------
    MassLookupError
        If the sequence contains a character unknown to the alphabet

    Examples
    --------
    >>> digest_protein("PEPTIDEKRPROTEINK", "P12345", min_length=1)
    ['PEPTIDEK', 'PEPTIDEKRPROTEINK', 'RPROTEINK']
    """
    if fragmenter is None:
        fragmenter = make_digestion_fragmenter(
            enzyme, min_length, max_length, missed_cleavages, alphabet
        )

    peaks = fragmenter.predict_spectrum(sequence)
    peptides = list(dict.fromkeys(peak.subsequence(sequence) for peak in peaks))

    logger.debug(f"{protein_id}: {len(peptides)} peptides")
    return peptides


def digest_protein_list(
    proteins: List[Tuple[str, str, str]],
    enzyme: str = DEFAULT_ENZYME,
    min_length: int = DEFAULT_MIN_PEPTIDE_LENGTH,
    max_length: int = DEFAULT_MAX_PEPTIDE_LENGTH,
    missed_cleavages: int = DEFAULT_MISSED_CLEAVAGES,
    alphabet: Alphabet = None,
) -> Tuple[List[str], Dict[str, List[str]]]:
    """Digest list of proteins and build peptide-to-protein mapping.

    Parameters
    ----------
    proteins : List[Tuple[str, str, str]]
        List of (protein_id, sequence, description) tuples
    enzyme : str
        Enzyme name
    min_length : int
        Minimum peptide length
    max_length : int
        Maximum peptide length
    missed_cleavages : int
        Number of missed cleavages
    alphabet : Alphabet, optional
        Residue masses (default: extended amino acids)

    Returns
    -------
    unique_peptides : List[str]
        Unique peptide sequences in order of first occurrence
    peptide_to_proteins : Dict[str, List[str]]
        peptide → list of protein IDs containing it

    Notes
    -----
    Proteins with characters unknown to the alphabet are skipped and
    logged as warnings.
    """
    logger.info(f"Digesting {len(proteins):,} proteins with {enzyme}...")

    fragmenter = make_digestion_fragmenter(
        enzyme, min_length, max_length, missed_cleavages, alphabet
    )

    peptide_to_proteins = defaultdict(list)
    total_peptides_generated = 0
    skipped = 0

    for idx, (protein_id, sequence, description) in enumerate(proteins):
        try:
            peptides = digest_protein(sequence, protein_id, fragmenter=fragmenter)
        except MassLookupError as e:
            logger.warning(f"Skipping {protein_id}: {e}")
            skipped += 1
            continue

        for peptide in peptides:
            peptide_to_proteins[peptide].append(protein_id)

        total_peptides_generated += len(peptides)

        # Progress logging
        if (idx + 1) % 5000 == 0:
            logger.info(
                f"  Processed {idx + 1:,} proteins: "
                f"{len(peptide_to_proteins):,} unique peptides"
            )

    unique_peptides = list(peptide_to_proteins.keys())

    logger.info("✓ Digestion complete:")
    logger.info(f"  Total proteins: {len(proteins) - skipped:,} ({skipped:,} skipped)")
    logger.info(f"  Total peptides generated: {total_peptides_generated:,}")
    logger.info(f"  Unique peptides: {len(unique_peptides):,}")

    shared_peptides = sum(1 for prots in peptide_to_proteins.values() if len(prots) > 1)
    if unique_peptides:
        logger.info(
            f"  Shared peptides: {shared_peptides} "
            f"({shared_peptides / len(unique_peptides) * 100:.1f}%)"
        )

    return unique_peptides, dict(peptide_to_proteins)
