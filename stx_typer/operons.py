#!/usr/bin/env python

"""
Operon calls built from one or two stx subunit hits, with subtype
refinement and label assignment
"""

# Standard imports
from dataclasses import dataclass
from typing import Optional

# Local imports
from stx_typer.config import TypingConfig
from stx_typer.errors import InternalConsistencyError
from stx_typer.hits import (
    AlignmentHit,
    STX_PREFIX
)

# Reference frame lengths and the residue columns that separate 2a/2c/2d
SUBUNIT_A_WINDOW = 320
SUBUNIT_B_WINDOW = 90
A_COLUMNS = (312, 318)
B_COLUMN = 34

COMPLETE = 'COMPLETE'
COMPLETE_NOVEL = 'COMPLETE_NOVEL'
COMPLETE_SUBUNIT = 'COMPLETE_SUBUNIT'
EXTENDED = 'EXTENDED'
FRAMESHIFT = 'FRAMESHIFT'
INTERNAL_STOP = 'INTERNAL_STOP'
PARTIAL = 'PARTIAL'
PARTIAL_CONTIG_END = 'PARTIAL_CONTIG_END'


def resolve_class_2_subtype(
        subunit_a: AlignmentHit,
        subunit_b: AlignmentHit,
        verbose: bool = False) -> str:
    """
    Distinguish stx2a, stx2c and stx2d using fixed reference columns of the
    A (312, 318) and B (34) subunits
    :param subunit_a: AlignmentHit of the A subunit
    :param subunit_b: AlignmentHit of the B subunit
    :param verbose: Append the observed residues to an unresolved type
    :return: String of the subtype: 2a, 2c, 2d, or 2
    """
    # Merged fragments do not carry an alignment covering their full span
    if subunit_a.frameshift or subunit_b.frameshift:
        return '2'
    a_map = subunit_a.ref_map(SUBUNIT_A_WINDOW)
    b_map = subunit_b.ref_map(SUBUNIT_B_WINDOW)
    a_312, a_318 = (a_map[column] for column in A_COLUMNS)
    b_34 = b_map[B_COLUMN]
    if a_312 in 'FS' and a_318 in 'KE' and b_34 == 'D':
        return '2a'
    if a_312 == 'F' and a_318 in 'KE' and b_34 == 'N':
        return '2c'
    if a_312 == 'S' and a_318 == 'E' and b_34 == 'N':
        return '2d'
    if verbose:
        return f'2 {a_312}{a_318}{b_34}'
    return '2'


@dataclass(frozen=True)
class Operon:
    """
    An stx operon call. A pair has the upstream hit as primary and the
    downstream hit as secondary; a singleton has no secondary hit
    """
    primary: AlignmentHit
    secondary: Optional[AlignmentHit] = None

    def qc(self):
        if self.secondary is None:
            return
        primary, secondary = self.primary, self.secondary
        if not (
            primary.target_name == secondary.target_name
            and primary.target_strand == secondary.target_strand
            and primary.target_end < secondary.target_start
            and primary.subunit != secondary.subunit
        ):
            raise InternalConsistencyError(
                f'Invalid operon: {primary.describe()} / '
                f'{secondary.describe()}'
            )

    @property
    def is_pair(self) -> bool:
        return self.secondary is not None

    @property
    def target_name(self) -> str:
        return self.primary.target_name

    @property
    def target_strand(self) -> bool:
        return self.primary.target_strand

    @property
    def target_start(self) -> int:
        return self.primary.target_start

    @property
    def target_end(self) -> int:
        if self.secondary is None:
            return self.primary.target_end
        return self.secondary.target_end

    @property
    def subunit_a(self) -> Optional[AlignmentHit]:
        if self.secondary is None:
            return self.primary if self.primary.subunit == 'A' else None
        return self.primary if self.primary.target_strand else self.secondary

    @property
    def subunit_b(self) -> Optional[AlignmentHit]:
        if self.secondary is None:
            return self.primary if self.primary.subunit == 'B' else None
        return self.secondary if self.primary.target_strand else self.primary

    @property
    def hits(self) -> tuple:
        if self.secondary is None:
            return (self.primary,)
        return self.primary, self.secondary

    @property
    def identity(self) -> float:
        nident = sum(hit.nident for hit in self.hits)
        length = sum(hit.length for hit in self.hits)
        return nident / length

    @property
    def secondary_accession(self) -> str:
        return self.secondary.ref_accession if self.secondary else ''

    def inside_eq(self, other: 'Operon', slack: int) -> bool:
        """
        Determine whether this operon lies within other, allowing slack
        residues at both ends
        """
        return (
            self.target_strand == other.target_strand
            and self.target_start + slack >= other.target_start
            and self.target_end <= other.target_end + slack
        )

    def dedup_key(self) -> tuple:
        return (
            self.target_name,
            -self.identity,
            self.is_pair,
            self.primary.ref_accession,
            self.secondary_accession
        )

    def report_key(self) -> tuple:
        return (
            self.target_name,
            self.primary.target_start,
            self.primary.target_end,
            not self.primary.target_strand,
            self.primary.ref_accession,
            self.is_pair,
            self.secondary_accession
        )

    def stx_type(self, verbose: bool = False) -> str:
        """
        Determine the stx type of the operon (without the stx prefix)
        :param verbose: Report unresolved subtype residues
        :return: String of the type. Empty when the subunits belong to
        different super classes
        """
        if self.secondary is None:
            return self.primary.stx_type
        primary, secondary = self.primary, self.secondary
        if primary.stx_class != secondary.stx_class:
            if primary.stx_super_class == secondary.stx_super_class:
                return primary.stx_super_class
            return ''
        if primary.stx_class != '2':
            return primary.stx_type
        return resolve_class_2_subtype(
            subunit_a=self.subunit_a,
            subunit_b=self.subunit_b,
            verbose=verbose
        )

    def partial(self) -> bool:
        return any(
            hit.coverage < 1.0 and not hit.extended for hit in self.hits
        )

    def novel(self, stx_type: str, config: TypingConfig) -> bool:
        primary, secondary = self.primary, self.secondary
        return (
            primary.stx_class != secondary.stx_class
            or self.identity < config.thresholds[primary.stx_class]
            or len(stx_type) <= 1
        )

    def label(self, config: TypingConfig, stx_type: str = None) -> str:
        """
        Assign the operon classification label
        :param config: TypingConfig with thresholds and edge distances
        :param stx_type: Previously resolved type, to avoid recomputing it
        :return: String of the label
        """
        if self.secondary is None:
            return self._singleton_label(config)
        if stx_type is None:
            stx_type = self.stx_type()
        hits = self.hits
        if any(hit.frameshift for hit in hits):
            return FRAMESHIFT
        if any(hit.stop_codon for hit in hits):
            return INTERNAL_STOP
        if any(hit.truncated(config) for hit in hits):
            return PARTIAL_CONTIG_END
        if self.partial():
            return PARTIAL
        if any(hit.extended for hit in hits):
            return EXTENDED
        if self.novel(stx_type, config):
            return COMPLETE_NOVEL
        return COMPLETE

    def _singleton_label(self, config: TypingConfig) -> str:
        hit = self.primary
        if hit.frameshift:
            return FRAMESHIFT
        if hit.stop_codon:
            return INTERNAL_STOP
        if hit.truncated(config) or hit.other_truncated(config):
            return PARTIAL_CONTIG_END
        if hit.coverage == 1.0:
            return COMPLETE_SUBUNIT
        if hit.extended:
            return EXTENDED
        return PARTIAL

    def reported_type(self, config: TypingConfig) -> tuple:
        """
        Find the stx type as printed in the report, and the label
        :param config: TypingConfig of the run
        :return: Tuple of the prefixed stx type and the label
        """
        if self.secondary is None:
            hit = self.primary
            if config.verbose:
                return f'{STX_PREFIX}{hit.subunit}{hit.stx_type}', \
                    self.label(config)
            return f'{STX_PREFIX}{hit.stx_type[0]}', self.label(config)
        stx_type = self.stx_type()
        label = self.label(config, stx_type=stx_type)
        # Only complete operons keep the subtype
        if label != COMPLETE and len(stx_type) >= 2:
            stx_type = stx_type[0]
        elif config.verbose:
            stx_type = self.stx_type(verbose=True)
        return f'{STX_PREFIX}{stx_type}', label
