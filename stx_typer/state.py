#!/usr/bin/env python

"""
Per-run resolution state shared by the frameshift, redundancy, pairing and
singleton stages
"""

# Standard imports
from dataclasses import replace
from typing import (
    Iterable,
    List
)

# Local imports
from stx_typer.errors import InternalConsistencyError
from stx_typer.hits import AlignmentHit


class ResolutionState:
    """
    Append-only arena of hits plus a consumed flag for each arena position.
    A hit is consumed once it has been attributed to an accepted operon, a
    frameshift merge, or a better covering hit
    """

    def __init__(self, hits: Iterable[AlignmentHit] = ()):
        self.hits: List[AlignmentHit] = []
        self.consumed: List[bool] = []
        for hit in hits:
            self.add(hit)

    def add(self, hit: AlignmentHit) -> int:
        """
        Append a hit to the arena, re-indexing it to its arena position
        :param hit: AlignmentHit to store
        :return: Integer index of the hit
        """
        index = len(self.hits)
        if hit.index != index:
            hit = replace(hit, index=index)
        self.hits.append(hit)
        self.consumed.append(False)
        return index

    def update_hit(self, index: int, hit: AlignmentHit):
        """
        Swap the record stored at index for an extended version of it, e.g.
        the result of a frameshift merge
        """
        if hit.index != index:
            raise InternalConsistencyError(
                f'Replacement hit carries index {hit.index}, expected {index}'
            )
        self.hits[index] = hit

    def consume(self, index: int):
        self.consumed[index] = True

    def is_consumed(self, index: int) -> bool:
        return self.consumed[index]

    def unconsumed(self) -> List[int]:
        return [
            index for index, consumed in enumerate(self.consumed)
            if not consumed
        ]

    def __getitem__(self, index: int) -> AlignmentHit:
        return self.hits[index]

    def __len__(self):
        return len(self.hits)
