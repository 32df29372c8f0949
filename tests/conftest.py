#!/usr/bin/env python

"""
Shared fixtures for the stx typing tests
"""

# Third party imports
import pytest

# Local imports
from stx_typer.config import TypingConfig
from stx_typer.hits import AlignmentHit

# Reference residues; W and * never occur so that mismatches and stops are
# unambiguous
REFERENCE_PATTERN = 'MKLVTAGSDEQRNHPFIY'


def hit_line(
        *,
        target: str = 'contig1',
        subunit: str = 'A',
        stx_type: str = '1a',
        accession: str = None,
        start: int = 101,
        end: int = 400,
        target_len: int = 10000,
        ref_start: int = 1,
        ref_end: int = None,
        ref_len: int = 100,
        mismatches: int = 0,
        stop_position: int = None,
        residues: dict = None,
        reverse: bool = False) -> str:
    """
    Build one tabular tblastn record. Coordinates are 1-based and inclusive,
    as written by BLAST; start and end are always given low to high, and
    reverse swaps them. The alignment is gapless
    :param mismatches: Number of trailing alignment columns to mutate
    :param stop_position: Alignment column to replace with a stop
    :param residues: Dictionary of 0-based reference position: residue set
    in both the reference and the target
    """
    if ref_end is None:
        ref_end = ref_len
    reference = (
        REFERENCE_PATTERN * (ref_len // len(REFERENCE_PATTERN) + 1)
    )[:ref_len]
    ref_seq = list(reference[ref_start - 1:ref_end])
    for position, residue in (residues or {}).items():
        ref_seq[position - (ref_start - 1)] = residue
    target_seq = list(ref_seq)
    for column in range(mismatches):
        target_seq[len(target_seq) - 1 - column] = 'W'
    if stop_position is not None:
        target_seq[stop_position] = '*'
    if accession is None:
        accession = f'REF_{subunit}{stx_type}'
    target_start, target_end = (end, start) if reverse else (start, end)
    return '\t'.join(str(field) for field in (
        target,
        f'{accession}|stx{subunit}{stx_type}',
        target_start,
        target_end,
        target_len,
        ref_start,
        ref_end,
        ref_len,
        ''.join(target_seq),
        ''.join(ref_seq)
    ))


@pytest.fixture(name='config')
def typing_config():
    """
    Default run configuration
    """
    return TypingConfig()


@pytest.fixture(name='make_hit')
def hit_factory(config):
    """
    Factory building a checked AlignmentHit from hit_line keyword arguments
    """
    def make_hit(index: int = -1, **kwargs) -> AlignmentHit:
        hit = AlignmentHit.from_line(hit_line(**kwargs), index=index)
        hit.qc(config)
        return hit
    return make_hit


@pytest.fixture(name='build_line')
def line_factory():
    """
    Factory building tabular tblastn records
    """
    return hit_line
