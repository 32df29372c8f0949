#!/usr/bin/env python

"""
Suppress hits that are fully covered by an equal or better hit of the same
stx class and subunit
"""

# Standard imports
import logging
from typing import List

# Local imports
from stx_typer.hits import AlignmentHit
from stx_typer.state import ResolutionState


def same_type_key(hit: AlignmentHit, consumed: bool = False) -> tuple:
    return (
        consumed,
        hit.target_name,
        hit.target_strand,
        hit.stx_class,
        hit.subunit,
        hit.target_start,
        hit.diff,
        hit.ref_accession
    )


def _same_group(window_hit: AlignmentHit, hit: AlignmentHit) -> bool:
    return (
        window_hit.target_name == hit.target_name
        and window_hit.target_strand == hit.target_strand
        and window_hit.stx_class == hit.stx_class
        and window_hit.subunit == hit.subunit
    )


def filter_redundant(
        state: ResolutionState,
        indices: List[int] = None) -> List[int]:
    """
    Find the working set of hits for operon pairing. A hit is suppressed
    when it lies within an earlier hit of the same target, strand, class and
    subunit whose diff is not worse. Suppressed hits are consumed, but still
    take part in the comparison with later hits
    :param state: ResolutionState after frameshift merging
    :param indices: Optional list of arena indices to consider. Defaults to
    every hit in the arena
    :return: List of surviving indices in same type order
    """
    if indices is None:
        indices = list(range(len(state)))
    order = sorted(
        indices,
        key=lambda i: same_type_key(state[i], state.is_consumed(i))
    )
    survivors = []
    suppressed = 0
    start = 0
    for position, index in enumerate(order):
        hit = state[index]
        # Window: same group, and not ending before the current hit starts
        while start < position and not (
            _same_group(state[order[start]], hit)
            and state[order[start]].target_end > hit.target_start
        ):
            start += 1
        # Consumed hits sort last
        if state.is_consumed(index):
            break
        redundant = any(
            hit.inside_eq(state[order[j]])
            and hit.diff >= state[order[j]].diff
            for j in range(start, position)
        )
        if redundant:
            state.consume(index)
            suppressed += 1
            logging.debug('Redundant hit suppressed: %s', hit.describe())
        else:
            survivors.append(index)
    logging.debug(
        'Suppressed %s redundant hit(s); %s hit(s) remain',
        suppressed, len(survivors)
    )
    return survivors
