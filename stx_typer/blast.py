#!/usr/bin/env python

"""
Prepare the assembly and run the BLAST+ programs that produce the stx
subunit alignment hits
"""

# Standard imports
import gzip
import logging
import os
import shutil
import subprocess
from typing import (
    List,
    Optional
)

# Third party inputs
from Bio import SeqIO

# Local imports
from stx_typer.errors import (
    BlastError,
    InputSequenceError
)

# Bacterial, archaeal and plant plastid code
GENETIC_CODE = 11

# Column layout expected by AlignmentHit.from_line
TBLASTN_OUTFMT = (
    '6 sseqid qseqid sstart send slen qstart qend qlen sseq qseq'
)


def _open_fasta(fasta: str):
    if fasta.endswith('.gz'):
        return gzip.open(fasta, 'rt', encoding='utf-8')
    return open(fasta, 'r', encoding='utf-8')


def prepare_nucleotide_fasta(
        fasta: str,
        work_dir: str) -> str:
    """
    Read the (optionally gzipped) assembly, check it, and write a flat,
    uncompressed copy for makeblastdb
    :param fasta: Path of the nucleotide FASTA file
    :param work_dir: Folder in which the copy is written
    :return: String of the path of the flat copy
    """
    if not os.path.isfile(fasta):
        raise InputSequenceError(
            f'Could not locate the nucleotide FASTA file: {fasta}'
        )
    os.makedirs(work_dir, exist_ok=True)
    flat_fasta = os.path.join(work_dir, 'nucleotide.fasta')
    seen = set()
    total_length = 0
    try:
        with _open_fasta(fasta) as handle, \
                open(flat_fasta, 'w', encoding='utf-8') as flat:
            for record in SeqIO.parse(handle, 'fasta'):
                if record.id in seen:
                    raise InputSequenceError(
                        f'Duplicate sequence identifier {record.id} in '
                        f'{fasta}'
                    )
                if not len(record.seq):
                    raise InputSequenceError(
                        f'Sequence {record.id} in {fasta} is empty'
                    )
                seen.add(record.id)
                total_length += len(record.seq)
                SeqIO.write(record, flat, 'fasta')
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise InputSequenceError(
            f'Could not read nucleotide FASTA file {fasta}: {exc}'
        ) from exc
    if not seen:
        raise InputSequenceError(
            f'No sequences found in nucleotide FASTA file {fasta}'
        )
    logging.debug(
        'Read %s sequence(s), %s bp, from %s', len(seen), total_length, fasta
    )
    return flat_fasta


def find_program(
        name: str,
        blast_bin: Optional[str] = None) -> str:
    """
    Locate a BLAST+ executable in blast_bin, then in $BLAST_BIN, then on the
    PATH
    :param name: Name of the program e.g. tblastn
    :param blast_bin: Optional folder containing the BLAST+ executables
    :return: String of the path of the executable
    """
    for folder in (blast_bin, os.environ.get('BLAST_BIN')):
        if not folder:
            continue
        program = os.path.join(os.path.expanduser(folder), name)
        if os.path.isfile(program) and os.access(program, os.X_OK):
            return program
    program = shutil.which(name)
    if program is None:
        raise BlastError(
            f'Could not find the BLAST+ program {name}. Supply its folder '
            f'with --blast_bin or the BLAST_BIN environment variable'
        )
    return program


def _run(command: List[str]):
    logging.debug('Running: %s', ' '.join(command))
    try:
        subprocess.run(command, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as exc:
        raise BlastError(
            f'{os.path.basename(command[0])} failed with exit status '
            f'{exc.returncode}: {exc.stderr.strip() if exc.stderr else ""}'
        ) from exc
    except OSError as exc:
        raise BlastError(
            f'Could not run {command[0]}: {exc}'
        ) from exc


def make_blast_db(
        fasta: str,
        work_dir: str,
        blast_bin: Optional[str] = None) -> str:
    """
    Create a nucleotide BLAST database of the assembly
    :param fasta: Path of the flat nucleotide FASTA file
    :param work_dir: Folder in which the database is created
    :param blast_bin: Optional folder containing the BLAST+ executables
    :return: String of the database name
    """
    database = os.path.join(work_dir, 'db')
    _run([
        find_program('makeblastdb', blast_bin),
        '-in', fasta,
        '-dbtype', 'nucl',
        '-out', database,
        '-logfile', os.path.join(work_dir, 'db.log')
    ])
    return database


def run_tblastn(
        protein_db: str,
        nucleotide_db: str,
        output: str,
        blast_bin: Optional[str] = None,
        threads: int = 1) -> str:
    """
    Search the stx reference proteins against the assembly database
    :param protein_db: Path of the stx reference protein FASTA file
    :param nucleotide_db: Name of the assembly BLAST database
    :param output: Path of the tabular output
    :param blast_bin: Optional folder containing the BLAST+ executables
    :param threads: Number of BLAST threads
    :return: String of the path of the tabular output
    """
    if not os.path.isfile(protein_db):
        raise BlastError(
            f'Could not locate the stx protein database: {protein_db}'
        )
    command = [
        find_program('tblastn', blast_bin),
        '-query', protein_db,
        '-db', nucleotide_db,
        '-comp_based_stats', '0',
        '-evalue', '1e-10',
        '-seg', 'no',
        '-max_target_seqs', '10000',
        '-word_size', '5',
        '-db_gencode', str(GENETIC_CODE),
        '-outfmt', TBLASTN_OUTFMT,
        '-out', output
    ]
    if threads > 1:
        command += ['-num_threads', str(threads)]
    logging.info('Running tblastn of %s against the assembly', protein_db)
    _run(command)
    return output
