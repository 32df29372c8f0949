#!/usr/bin/env python

"""
Run-level configuration: the per-class identity thresholds and the tuning
constants used by the operon resolution stages
"""

# Standard imports
from collections.abc import Mapping
from dataclasses import (
    dataclass,
    field
)
from types import MappingProxyType
from typing import Optional

# Local imports
from stx_typer.errors import (
    MissingThresholdError,
    StxTyperError
)

# Minimum operon identity for a call to be considered a known allele.
# Subtypes 2a, 2c and 2d share the collapsed class "2"
DEFAULT_THRESHOLDS = {
    '1a': 0.983,
    '1c': 0.983,
    '1d': 0.983,
    '1e': 0.983,
    '2': 0.98,
    '2b': 0.98,
    '2e': 0.98,
    '2f': 0.98,
    '2g': 0.98,
    '2h': 0.98,
    '2i': 0.98,
    '2j': 0.98,
    '2k': 0.985,
    '2l': 0.985,
    '2m': 0.98,
    '2n': 0.98,
    '2o': 0.98,
}


class ThresholdTable(Mapping):
    """
    Read-only mapping of stx class: minimum identity fraction
    """

    def __init__(self, thresholds: Optional[dict] = None):
        if thresholds is None:
            thresholds = DEFAULT_THRESHOLDS
        for stx_class, identity in thresholds.items():
            if not 0.0 < identity <= 1.0:
                raise StxTyperError(
                    f'Identity threshold for stx class {stx_class} must be a '
                    f'fraction in (0, 1], not {identity}'
                )
        self._thresholds = MappingProxyType(dict(thresholds))

    def __getitem__(self, stx_class: str) -> float:
        try:
            return self._thresholds[stx_class]
        except KeyError as exc:
            raise MissingThresholdError(
                f'No identity threshold is defined for stx class '
                f'"{stx_class}". The threshold table is incomplete'
            ) from exc

    def __iter__(self):
        return iter(self._thresholds)

    def __len__(self):
        return len(self._thresholds)

    def __repr__(self):
        return f'ThresholdTable({dict(self._thresholds)!r})'


@dataclass(frozen=True)
class TypingConfig:
    """
    Immutable settings threaded through every stage of a run.

    :param thresholds: ThresholdTable of stx class: minimum identity
    :param intergenic_max: Maximum gap (residues) between paired subunits in
    the strong passes. The weak pass allows twice this value
    :param slack: Residue tolerance when testing whether one span lies within
    another
    :param frameshift_gap_max: Fragments closer than this are merge candidates
    :param contig_end_delta: Distance from a contig edge within which a hit
    counts as touching the edge
    :param min_domain_length: Minimum length (codons) of a partner subunit
    :param name: Optional label added as the first column of every report row
    :param verbose: Report full subunit types and unresolved subtype residues
    """
    thresholds: ThresholdTable = field(default_factory=ThresholdTable)
    intergenic_max: int = 36
    slack: int = 30
    frameshift_gap_max: int = 10
    contig_end_delta: int = 3
    min_domain_length: int = 20
    name: str = ''
    verbose: bool = False

    def __post_init__(self):
        if '\t' in self.name:
            raise StxTyperError(
                'The run name cannot contain a tab character'
            )

    @property
    def missed_max(self) -> int:
        """
        Flanking sequence shorter than this cannot hold the partner subunit
        """
        return self.intergenic_max + 3 * self.min_domain_length
