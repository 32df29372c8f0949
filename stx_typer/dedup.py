#!/usr/bin/env python

"""
Keep one representative of each cluster of overlapping operon calls
"""

# Standard imports
import logging
from typing import List

# Local imports
from stx_typer.config import TypingConfig
from stx_typer.operons import Operon


def deduplicate_operons(
        operons: List[Operon],
        config: TypingConfig) -> List[Operon]:
    """
    Visit operons from the highest identity down (per target), and drop any
    operon contained, within slack, in an already kept operon of equal or
    higher identity
    :param operons: List of Operons accepted by the pairing passes
    :param config: TypingConfig with the slack
    :return: List of kept Operons in visiting order
    """
    kept = []
    for operon in sorted(operons, key=Operon.dedup_key):
        operon.qc()
        duplicate = any(
            operon.target_name == good.target_name
            and operon.inside_eq(good, config.slack)
            and good.identity >= operon.identity
            for good in kept
        )
        if duplicate:
            logging.debug(
                'Duplicate operon dropped: %s', operon.primary.describe()
            )
            continue
        kept.append(operon)
    logging.debug(
        'Kept %s of %s operon(s) after deduplication', len(kept),
        len(operons)
    )
    return kept
