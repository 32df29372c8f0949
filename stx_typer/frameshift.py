#!/usr/bin/env python

"""
Coalesce alignment fragments of one gene copy that were split by a
frameshift
"""

# Standard imports
import logging

# Local imports
from stx_typer.config import TypingConfig
from stx_typer.hits import AlignmentHit
from stx_typer.state import ResolutionState


def frameshift_key(hit: AlignmentHit) -> tuple:
    return (
        hit.target_name,
        hit.target_strand,
        hit.ref_accession,
        hit.target_start,
        hit.target_end
    )


def is_frameshift_fragment(
        prev: AlignmentHit,
        hit: AlignmentHit,
        config: TypingConfig) -> bool:
    """
    Determine whether hit continues prev in a different reading frame
    :param prev: AlignmentHit immediately preceding hit in frameshift order
    :param hit: AlignmentHit being considered for a merge
    :param config: TypingConfig with the maximum fragment gap
    :return: Boolean of whether the two fragments should be merged
    """
    return (
        hit.target_name == prev.target_name
        and hit.target_strand == prev.target_strand
        and hit.ref_accession == prev.ref_accession
        and hit.target_start > prev.target_start
        and hit.target_start - prev.target_end < config.frameshift_gap_max
        and hit.frame != prev.frame
    )


def merge_frameshifts(
        state: ResolutionState,
        config: TypingConfig) -> int:
    """
    Merge every hit into its predecessor when they look like two fragments
    of the same gene. The merged record replaces the downstream fragment,
    and the upstream fragment is consumed. As the merged record becomes the
    predecessor of the next hit, chains of fragments collapse into one
    :param state: ResolutionState holding every parsed hit
    :param config: TypingConfig of the run
    :return: Integer number of merges performed
    """
    order = sorted(range(len(state)), key=lambda i: frameshift_key(state[i]))
    merges = 0
    prev = None
    for index in order:
        hit = state[index]
        if prev is not None and is_frameshift_fragment(
                prev=prev,
                hit=hit,
                config=config):
            hit = hit.merge(prev)
            hit.qc(config)
            state.update_hit(index, hit)
            state.consume(prev.index)
            merges += 1
            logging.debug('Frameshift merge: %s', hit.describe())
        prev = hit
    logging.debug('Merged %s frameshifted fragment(s)', merges)
    return merges
