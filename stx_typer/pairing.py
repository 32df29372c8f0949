#!/usr/bin/env python

"""
Pair subunit A and subunit B hits into operons. Pairing runs in three
passes of decreasing strictness; each pass consumes the hits it pairs, and
the hits nested inside the operons formed so far
"""

# Standard imports
from dataclasses import dataclass
import logging
from typing import List

# Local imports
from stx_typer.config import TypingConfig
from stx_typer.hits import AlignmentHit
from stx_typer.operons import Operon
from stx_typer.state import ResolutionState


@dataclass(frozen=True)
class PairingPass:
    """
    Strictness of one pairing pass
    :param name: Label used in log messages
    :param same_type: Both subunits must belong to the same stx class
    :param strong: Require the operon identity to reach the class thresholds,
    and use the single intergenic distance
    """
    name: str
    same_type: bool
    strong: bool

    def max_gap(self, config: TypingConfig) -> int:
        return config.intergenic_max * (1 if self.strong else 2)


SAME_TYPE_PASS = PairingPass(name='same type', same_type=True, strong=True)
STRONG_PASS = PairingPass(name='strong', same_type=False, strong=True)
WEAK_PASS = PairingPass(name='weak', same_type=False, strong=False)


def pairing_key(hit: AlignmentHit) -> tuple:
    return (
        hit.target_name,
        hit.target_strand,
        hit.subunit,
        hit.target_start,
        hit.diff,
        hit.ref_accession
    )


def orient_pair(
        subunit_a: AlignmentHit,
        subunit_b: AlignmentHit) -> tuple:
    """
    Order the hits along the contig: A precedes B on the forward strand, and
    B precedes A on the reverse strand
    :return: Tuple of the upstream hit and the downstream hit
    """
    if subunit_a.target_strand:
        return subunit_a, subunit_b
    return subunit_b, subunit_a


def _in_window(
        window_hit: AlignmentHit,
        hit: AlignmentHit,
        same_type: bool) -> bool:
    return (
        window_hit.target_name == hit.target_name
        and window_hit.target_strand == hit.target_strand
        and (not same_type or window_hit.stx_class == hit.stx_class)
    )


def accept_operon(
        operon: Operon,
        pairing_pass: PairingPass,
        config: TypingConfig) -> bool:
    """
    Apply the identity rule of the pass to a spatially valid pair
    :param operon: Candidate Operon
    :param pairing_pass: PairingPass being run
    :param config: TypingConfig with the class thresholds
    :return: Boolean of whether the operon is accepted
    """
    if not pairing_pass.strong:
        return True
    identity = operon.identity
    return all(
        identity >= config.thresholds[hit.stx_class] for hit in operon.hits
    )


def pair_operons(
        state: ResolutionState,
        hits: List[int],
        operons: List[Operon],
        pairing_pass: PairingPass,
        config: TypingConfig) -> List[Operon]:
    """
    Run one pairing pass over the working set
    :param state: ResolutionState with the consumed flags
    :param hits: List of working set indices in pairing order (grouped by
    target, strand and, for a same type pass, class; A before B in a group)
    :param operons: List of Operons accepted by earlier passes
    :param pairing_pass: PairingPass with the strictness of this pass
    :param config: TypingConfig of the run
    :return: List of Operons accepted by this pass
    """
    max_gap = pairing_pass.max_gap(config)
    new_operons = []
    start = 0
    for position, index in enumerate(hits):
        hit_b = state[index]
        if state.is_consumed(index) or hit_b.subunit != 'B':
            continue
        while start < position and not _in_window(
                window_hit=state[hits[start]],
                hit=hit_b,
                same_type=pairing_pass.same_type):
            start += 1
        for candidate in hits[start:position]:
            hit_a = state[candidate]
            if state.is_consumed(candidate):
                continue
            # Subunit B hits follow all subunit A hits of the group
            if hit_a.subunit == hit_b.subunit:
                break
            upstream, downstream = orient_pair(hit_a, hit_b)
            gap = downstream.target_start - upstream.target_end
            if not 0 < gap <= max_gap:
                continue
            operon = Operon(primary=upstream, secondary=downstream)
            operon.qc()
            logging.debug(
                'Candidate %s operon (identity %.4f): %s / %s',
                pairing_pass.name, operon.identity,
                upstream.describe(), downstream.describe()
            )
            if accept_operon(
                    operon=operon,
                    pairing_pass=pairing_pass,
                    config=config):
                new_operons.append(operon)
                state.consume(upstream.index)
                state.consume(downstream.index)
    logging.debug(
        'Found %s operon(s) in the %s pass', len(new_operons),
        pairing_pass.name
    )
    suppress_nested_hits(
        state=state,
        hits=hits,
        operons=operons + new_operons,
        config=config
    )
    return new_operons


def suppress_nested_hits(
        state: ResolutionState,
        hits: List[int],
        operons: List[Operon],
        config: TypingConfig) -> int:
    """
    Consume the remaining hits that lie within an accepted operon (with
    slack at both ends) so that they cannot seed another call
    :param state: ResolutionState with the consumed flags
    :param hits: List of working set indices
    :param operons: List of every accepted Operon so far
    :param config: TypingConfig with the slack
    :return: Integer number of hits consumed
    """
    slack = config.slack
    suppressed = 0
    for index in hits:
        if state.is_consumed(index):
            continue
        hit = state[index]
        for operon in operons:
            if (
                hit.target_name == operon.target_name
                and hit.target_strand == operon.target_strand
                and hit.target_start + slack >= operon.target_start
                and hit.target_end <= operon.target_end + slack
            ):
                state.consume(index)
                suppressed += 1
                break
    return suppressed


def find_operons(
        state: ResolutionState,
        hits: List[int],
        config: TypingConfig) -> List[Operon]:
    """
    Run the same type, strong and weak pairing passes in order. The same type
    pass uses the redundancy filter order; the later passes ignore the class
    :param state: ResolutionState after redundancy filtering
    :param hits: List of working set indices in redundancy filter order
    :param config: TypingConfig of the run
    :return: List of every accepted Operon
    """
    operons = []
    operons += pair_operons(
        state=state,
        hits=hits,
        operons=operons,
        pairing_pass=SAME_TYPE_PASS,
        config=config
    )
    hits = sorted(hits, key=lambda i: pairing_key(state[i]))
    for pairing_pass in (STRONG_PASS, WEAK_PASS):
        operons += pair_operons(
            state=state,
            hits=hits,
            operons=operons,
            pairing_pass=pairing_pass,
            config=config
        )
    logging.info('Paired %s stx operon candidate(s)', len(operons))
    return operons
