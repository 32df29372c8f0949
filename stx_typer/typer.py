#!/usr/bin/env python

"""
Determine the stx operons of an assembly from tblastn hits of the stx
subunit reference proteins
"""

# Standard imports
import logging
import os
import shutil
import tempfile
from typing import (
    Iterable,
    List,
    Optional,
    Union
)

# Local imports
from stx_typer.blast import (
    make_blast_db,
    prepare_nucleotide_fasta,
    run_tblastn
)
from stx_typer.config import TypingConfig
from stx_typer.dedup import deduplicate_operons
from stx_typer.errors import MalformedHitError
from stx_typer.frameshift import merge_frameshifts
from stx_typer.hits import AlignmentHit
from stx_typer.operons import Operon
from stx_typer.pairing import find_operons
from stx_typer.redundancy import filter_redundant
from stx_typer.report import write_report
from stx_typer.singletons import resolve_singletons
from stx_typer.state import ResolutionState


def read_hits(
        source: Union[str, Iterable[str]],
        config: TypingConfig) -> List[AlignmentHit]:
    """
    Parse and check every aligner record
    :param source: Path of the tabular aligner output, or an iterable of
    record lines
    :param config: TypingConfig with the threshold table
    :return: List of AlignmentHits in input order
    """
    if isinstance(source, str):
        try:
            with open(source, 'r', encoding='utf-8') as hits_file:
                lines = hits_file.readlines()
        except (OSError, UnicodeDecodeError) as exc:
            raise MalformedHitError(
                f'Could not read the hits file {source}: {exc}'
            ) from exc
        return read_hits(lines, config)
    hits = []
    for line in source:
        if not line.strip():
            continue
        hit = AlignmentHit.from_line(line, index=len(hits))
        hit.qc(config)
        hits.append(hit)
    logging.debug('Parsed %s stx alignment hit(s)', len(hits))
    return hits


def type_operons(
        hits: Iterable[AlignmentHit],
        config: TypingConfig) -> List[Operon]:
    """
    Resolve alignment hits into the final operon calls
    :param hits: Iterable of parsed AlignmentHits
    :param config: TypingConfig of the run
    :return: List of Operons in report order
    """
    state = ResolutionState(hits)
    merge_frameshifts(state=state, config=config)
    good_hits = filter_redundant(state=state)
    operons = find_operons(state=state, hits=good_hits, config=config)
    final = deduplicate_operons(operons=operons, config=config)
    final += resolve_singletons(state=state, hits=good_hits)
    final.sort(key=Operon.report_key)
    logging.info(
        'Found %s stx operon(s) and single subunit(s)', len(final)
    )
    return final


class StxTyper:
    """
    Type the stx operons of one nucleotide assembly
    """

    def main(self):
        """
        Run the appropriate methods in the correct order
        """
        if self.hits_file:
            self.operons = self.type_hits(self.hits_file)
        else:
            work_dir = tempfile.mkdtemp(prefix='stxtyper_')
            try:
                self.operons = self.type_hits(self.blast(work_dir))
            finally:
                shutil.rmtree(work_dir, ignore_errors=True)
        write_report(
            operons=self.operons,
            config=self.config,
            output=self.output
        )

    def blast(self, work_dir: str) -> str:
        """
        Search the stx reference proteins against the assembly
        :param work_dir: Temporary folder for the flattened FASTA, the BLAST
        database and the BLAST output
        :return: String of the path of the tabular BLAST output
        """
        logging.info('Preparing nucleotide sequences in %s', self.nucleotide)
        flat_fasta = prepare_nucleotide_fasta(
            fasta=self.nucleotide,
            work_dir=work_dir
        )
        nucleotide_db = make_blast_db(
            fasta=flat_fasta,
            work_dir=work_dir,
            blast_bin=self.blast_bin
        )
        blast_output = os.path.join(work_dir, 'blast.tsv')
        run_tblastn(
            protein_db=self.database,
            nucleotide_db=nucleotide_db,
            output=blast_output,
            blast_bin=self.blast_bin,
            threads=self.threads
        )
        return blast_output

    def type_hits(self, hits_file: str) -> List[Operon]:
        logging.info('Typing stx operons from %s', hits_file)
        hits = read_hits(hits_file, self.config)
        return type_operons(hits=hits, config=self.config)

    def __init__(
            self,
            config: TypingConfig,
            nucleotide: Optional[str] = None,
            database: Optional[str] = None,
            hits_file: Optional[str] = None,
            output: Optional[str] = None,
            blast_bin: Optional[str] = None,
            threads: int = 1):
        """
        :param config: TypingConfig of the run
        :param nucleotide: Path of the (optionally gzipped) assembly FASTA
        :param database: Path of the stx reference protein FASTA
        :param hits_file: Path of precomputed tabular tblastn output. When
        supplied, BLAST is not run
        :param output: Path of the report. Defaults to stdout
        :param blast_bin: Folder containing the BLAST+ executables
        :param threads: Number of BLAST threads
        """
        self.config = config
        self.nucleotide = nucleotide
        self.database = database
        self.hits_file = hits_file
        self.output = output
        self.blast_bin = blast_bin
        self.threads = threads
        self.operons = []
