#!/usr/bin/env python

"""
Report the hits left unpaired as single subunit operons
"""

# Standard imports
import logging
from typing import List

# Local imports
from stx_typer.hits import AlignmentHit
from stx_typer.operons import Operon
from stx_typer.state import ResolutionState


def singleton_key(hit: AlignmentHit, consumed: bool = False) -> tuple:
    return (
        consumed,
        hit.target_name,
        hit.target_strand,
        -hit.abs_coverage,
        hit.diff,
        hit.target_start,
        hit.ref_accession
    )


def covers(hit: AlignmentHit, other: AlignmentHit) -> bool:
    """
    Determine whether a reported hit makes a hit it contains redundant: the
    contained hit is dropped when it belongs to the same stx super class, or
    when it is not strictly better
    :param hit: AlignmentHit reported as a singleton
    :param other: AlignmentHit lying within hit
    :return: Boolean of whether other should be suppressed
    """
    return (
        other.inside_eq(hit)
        and (
            other.stx_type[0] == hit.stx_type[0]
            or other.diff >= hit.diff
        )
    )


def resolve_singletons(
        state: ResolutionState,
        hits: List[int]) -> List[Operon]:
    """
    Turn every unconsumed working set hit into a singleton operon, visiting
    the widest and best hits of each target and strand first
    :param state: ResolutionState after pairing
    :param hits: List of working set indices
    :return: List of singleton Operons
    """
    order = sorted(
        hits,
        key=lambda i: singleton_key(state[i], state.is_consumed(i))
    )
    singletons = []
    for position, index in enumerate(order):
        if state.is_consumed(index):
            continue
        hit = state[index]
        singletons.append(Operon(primary=hit))
        state.consume(index)
        for other_index in order[position + 1:]:
            other = state[other_index]
            if not (
                other.target_name == hit.target_name
                and other.target_strand == hit.target_strand
            ):
                break
            if not state.is_consumed(other_index) and covers(hit, other):
                state.consume(other_index)
                logging.debug(
                    'Covered hit suppressed: %s', other.describe()
                )
    logging.debug('Found %s single subunit hit(s)', len(singletons))
    return singletons
