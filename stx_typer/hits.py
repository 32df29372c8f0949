#!/usr/bin/env python

"""
Alignment hits of stx subunit reference proteins on a nucleotide assembly
"""

# Standard imports
from dataclasses import (
    dataclass,
    replace
)

# Local imports
from stx_typer.config import TypingConfig
from stx_typer.errors import (
    InternalConsistencyError,
    MalformedHitError,
    MissingThresholdError
)

STX_PREFIX = 'stx'

# Subtypes that can only be told apart once both subunits are paired
COLLAPSED_TYPES = ('2a', '2c', '2d')

# Number of whitespace-separated fields in an aligner record
RECORD_FIELDS = 10


def stx_class_of(stx_type: str) -> str:
    """
    Collapse the 2a, 2c and 2d subtypes into class "2"
    :param stx_type: Two character stx type e.g. 2a or 1c
    :return: stx class
    """
    if stx_type in COLLAPSED_TYPES:
        return '2'
    return stx_type


def _is_family_code(token: str) -> bool:
    return (
        len(token) == 6
        and token.startswith(STX_PREFIX)
        and token[3] in ('A', 'B')
    )


def split_subject_id(subject_id: str, line: str = '') -> tuple:
    """
    Extract the family code and the reference accession from a subject id.
    The reference database uses <accession>|stx<subunit><type>, but the
    family code is also found when it leads
    :param subject_id: String of the aligner subject identifier
    :param line: The full aligner record, quoted in error messages
    :return: family code, reference accession
    """
    if '|' not in subject_id:
        raise MalformedHitError(
            f'Bad stx database: subject identifier {subject_id} has no "|" '
            f'separating the reference accession from the stx family code',
            line
        )
    prefix, suffix = subject_id.rsplit('|', 1)
    if _is_family_code(suffix):
        family, accession = suffix, prefix.rsplit('|', 1)[-1]
    elif _is_family_code(prefix):
        family, accession = prefix, suffix
    else:
        raise MalformedHitError(
            f'Bad stx database: subject identifier {subject_id} does not '
            f'contain a 6 character stx family code (stx, subunit A or B, '
            f'two character type)',
            line
        )
    if not accession:
        raise MalformedHitError(
            f'Bad stx database: subject identifier {subject_id} has an empty '
            f'reference accession',
            line
        )
    return family, accession


@dataclass(frozen=True)
class AlignmentHit:
    """
    A single protein-vs-nucleotide alignment. Positions are 0-based and
    half-open; target_start < target_end regardless of the strand
    """
    target_name: str
    target_strand: bool
    target_start: int
    target_end: int
    target_len: int
    ref_accession: str
    ref_start: int
    ref_end: int
    ref_len: int
    length: int
    nident: int
    subunit: str
    stx_type: str
    target_seq: str = ''
    ref_seq: str = ''
    stop_codon: bool = False
    frameshift: bool = False
    index: int = -1

    @classmethod
    def from_line(cls, line: str, index: int = -1) -> 'AlignmentHit':
        """
        Parse one aligner record:
        target_id subject_id target_start target_end target_len ref_start
        ref_end ref_len aligned_target_seq aligned_ref_seq
        Coordinates are 1-based and inclusive; a reverse strand hit has
        target_start > target_end
        :param line: String of the record
        :param index: Position of the hit in the run's hit arena
        :return: AlignmentHit
        """
        fields = line.split()
        if len(fields) < RECORD_FIELDS:
            raise MalformedHitError(
                f'Expected {RECORD_FIELDS} fields in the aligner record, '
                f'found {len(fields)}',
                line
            )
        target_name, subject_id = fields[0], fields[1]
        try:
            target_start, target_end, target_len, ref_start, ref_end, \
                ref_len = (int(value) for value in fields[2:8])
        except ValueError as exc:
            raise MalformedHitError(
                'Non-integer coordinate in the aligner record', line
            ) from exc
        target_seq, ref_seq = fields[8], fields[9]
        family, ref_accession = split_subject_id(subject_id, line)
        if len(target_seq) != len(ref_seq):
            raise MalformedHitError(
                'Aligned target and reference sequences differ in length',
                line
            )
        if target_start == target_end:
            raise MalformedHitError(
                'Degenerate target coordinates: start equals end', line
            )
        if not 1 <= ref_start < ref_end:
            raise MalformedHitError(
                'Reference coordinates must satisfy 1 <= start < end', line
            )
        target_strand = target_start < target_end
        if not target_strand:
            target_start, target_end = target_end, target_start
        if target_start < 1:
            raise MalformedHitError(
                'Target coordinates must be 1-based', line
            )
        if target_end > target_len:
            raise MalformedHitError(
                f'Target coordinates beyond the contig length {target_len}',
                line
            )
        if ref_end > ref_len:
            raise MalformedHitError(
                f'Reference coordinates beyond the reference length '
                f'{ref_len}',
                line
            )
        nident = sum(
            1 for target_aa, ref_aa in zip(target_seq, ref_seq)
            if target_aa == ref_aa
        )
        if not nident:
            raise MalformedHitError(
                'No identical residues in the alignment', line
            )
        stop_position = target_seq.find('*')
        return cls(
            target_name=target_name,
            target_strand=target_strand,
            target_start=target_start - 1,
            target_end=target_end,
            target_len=target_len,
            ref_accession=ref_accession,
            ref_start=ref_start - 1,
            ref_end=ref_end,
            ref_len=ref_len,
            length=len(target_seq),
            nident=nident,
            subunit=family[3],
            stx_type=family[4:],
            target_seq=target_seq,
            ref_seq=ref_seq,
            stop_codon=0 <= stop_position < len(target_seq) - 1,
            index=index
        )

    def qc(self, config: TypingConfig):
        """
        Check the data model invariants
        :param config: TypingConfig with the threshold table
        """
        checks = (
            (self.length > 0, 'alignment length is zero'),
            (0 < self.nident <= self.length,
             'identical residues must be in (0, length]'),
            (0 <= self.target_start < self.target_end <= self.target_len,
             'target coordinates out of order or beyond the contig'),
            (0 <= self.ref_start < self.ref_end <= self.ref_len,
             'reference coordinates out of order or beyond the reference'),
            (self.subunit in ('A', 'B'), 'subunit must be A or B'),
            (len(self.stx_type) == 2, 'stx type must have two characters'),
            (self.stx_type.startswith(self.stx_class),
             'stx type does not belong to its class'),
            (bool(self.target_name), 'target name is empty'),
            (bool(self.ref_accession), 'reference accession is empty'),
            (len(self.target_seq) == len(self.ref_seq),
             'aligned sequences differ in length'),
        )
        if not self.frameshift:
            checks += (
                (self.nident <= self.abs_coverage <= self.length,
                 'reference span inconsistent with the alignment'),
                (self.length == len(self.target_seq),
                 'alignment length differs from the aligned sequence'),
            )
        for passed, message in checks:
            if not passed:
                raise InternalConsistencyError(
                    f'Alignment hit {self.ref_accession} on '
                    f'{self.target_name}:{self.target_start}-'
                    f'{self.target_end}: {message}'
                )
        if self.stx_class not in config.thresholds:
            raise MissingThresholdError(
                f'No identity threshold is defined for stx class '
                f'"{self.stx_class}" of {self.ref_accession}'
            )

    @property
    def stx_class(self) -> str:
        return stx_class_of(self.stx_type)

    @property
    def stx_super_class(self) -> str:
        return self.stx_class[0]

    @property
    def identity(self) -> float:
        return self.nident / self.length

    @property
    def abs_coverage(self) -> int:
        return self.ref_end - self.ref_start

    @property
    def coverage(self) -> float:
        return self.abs_coverage / self.ref_len

    @property
    def diff(self) -> int:
        """
        Missing reference residues plus mismatches; lower is better
        """
        return (
            self.ref_start + (self.ref_len - self.ref_end)
            + (self.length - self.nident)
        )

    @property
    def frame(self) -> int:
        return (self.target_start % 3) + 1

    @property
    def extended(self) -> bool:
        """
        The alignment runs over the whole reference except its final stop
        """
        return self.ref_start == 0 and self.ref_end + 1 == self.ref_len

    def truncated(self, config: TypingConfig) -> bool:
        """
        Determine whether the hit touches a contig edge while the matching
        end of the reference is missing
        :param config: TypingConfig with the contig end delta
        :return: Boolean of whether the hit is truncated by the assembly
        """
        ref_start_missing = self.ref_start > 0
        ref_end_missing = self.ref_end + 1 < self.ref_len
        delta = config.contig_end_delta
        at_contig_start = self.target_start <= delta
        at_contig_end = self.target_len - self.target_end <= delta
        if self.target_strand:
            return (
                (at_contig_start and ref_start_missing)
                or (at_contig_end and ref_end_missing)
            )
        return (
            (at_contig_start and ref_end_missing)
            or (at_contig_end and ref_start_missing)
        )

    def other_truncated(self, config: TypingConfig) -> bool:
        """
        Determine whether the partner subunit could not fit in the flanking
        sequence on the side where it is expected
        :param config: TypingConfig with the missed_max distance
        :return: Boolean of whether the partner subunit may be cut off
        """
        missed_max = config.missed_max
        partner_upstream = self.target_strand == (self.subunit == 'B')
        if partner_upstream and self.target_start <= missed_max:
            return True
        partner_downstream = self.target_strand == (self.subunit == 'A')
        return (
            partner_downstream
            and self.target_len - self.target_end <= missed_max
        )

    def inside_eq(self, other: 'AlignmentHit') -> bool:
        return (
            self.target_start >= other.target_start
            and self.target_end <= other.target_end
        )

    def merge(self, prev: 'AlignmentHit') -> 'AlignmentHit':
        """
        Combine this hit with the upstream fragment of the same gene copy
        :param prev: AlignmentHit of the preceding fragment
        :return: New AlignmentHit spanning both fragments
        """
        if not (
            self.target_name == prev.target_name
            and self.ref_accession == prev.ref_accession
            and self.target_strand == prev.target_strand
            and self.target_len == prev.target_len
            and self.ref_len == prev.ref_len
            and self.target_start > prev.target_start
        ):
            raise InternalConsistencyError(
                f'Cannot merge {prev.ref_accession} at '
                f'{prev.target_name}:{prev.target_start} into '
                f'{self.ref_accession} at '
                f'{self.target_name}:{self.target_start}'
            )
        ref_start, ref_end = self.ref_start, self.ref_end
        if self.target_strand:
            ref_start = prev.ref_start
        else:
            ref_end = prev.ref_end
        # length and nident are approximate across the frameshift
        return replace(
            self,
            target_start=prev.target_start,
            ref_start=ref_start,
            ref_end=ref_end,
            length=self.length + prev.length,
            nident=self.nident + prev.nident,
            stop_codon=self.stop_codon or prev.stop_codon,
            frameshift=True
        )

    def ref_map(self, window: int) -> str:
        """
        Project the aligned target residues onto reference coordinates
        :param window: Length of the reference frame
        :return: String of length window with '-' where nothing aligned
        """
        if self.ref_len > window:
            raise InternalConsistencyError(
                f'Reference {self.ref_accession} is {self.ref_len} residues, '
                f'longer than the {window} residue subtyping window'
            )
        mapped = ''.join(
            target_aa for target_aa, ref_aa in
            zip(self.target_seq, self.ref_seq) if ref_aa != '-'
        )
        return (
            '-' * self.ref_start + mapped + '-' * (window - self.ref_end)
        )

    @property
    def strand_symbol(self) -> str:
        return '+' if self.target_strand else '-'

    def describe(self) -> str:
        return (
            f'{self.target_name}:{self.target_start + 1}-{self.target_end}'
            f'{self.strand_symbol} stx{self.subunit}{self.stx_type} '
            f'{self.ref_accession} identity={self.identity:.4f} '
            f'coverage={self.coverage:.4f} diff={self.diff}'
        )
