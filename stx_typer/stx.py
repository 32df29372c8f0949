#!/usr/bin/env python

"""
Determine the stx operon type(s) of a genome assembly, and print a
tab-separated report
"""

# Standard imports
from argparse import (
    ArgumentParser,
    RawTextHelpFormatter
)
import logging
import os
import time

# Local imports
from stx_typer.config import TypingConfig
from stx_typer.errors import StxTyperError
from stx_typer.methods import (
    VERBOSITY_CHOICES,
    error_print,
    fatal_error,
    pathfinder,
    setup_logging
)
from stx_typer.typer import StxTyper
from stx_typer.version import __version__


def argument_errors(args) -> list:
    """
    Check the supplied arguments before any work is done
    :param args: type ArgumentParser arguments
    :return: List of errors with the supplied arguments
    """
    errors = []
    if args.hits:
        if not os.path.isfile(args.hits):
            errors.append(f'Could not locate supplied hits file: {args.hits}')
        if args.nucleotide:
            errors.append(
                'Supply either a nucleotide FASTA file or a hits file, '
                'not both'
            )
    else:
        if not args.nucleotide:
            errors.append(
                'A nucleotide FASTA file (-n) or a precomputed hits file '
                '(--hits) is required'
            )
        elif not os.path.isfile(args.nucleotide):
            errors.append(
                f'Could not locate supplied nucleotide FASTA file: '
                f'{args.nucleotide}'
            )
        if not args.database:
            errors.append(
                'The stx reference protein database (-d) is required to run '
                'tblastn'
            )
        elif not os.path.isfile(args.database):
            errors.append(
                f'Could not locate supplied stx protein database: '
                f'{args.database}'
            )
    if args.name and '\t' in args.name:
        errors.append('NAME cannot contain a tab character')
    if args.threads < 1:
        errors.append(
            f'The number of threads must be at least 1, not {args.threads}'
        )
    return errors


def stx_type(args):
    """
    Type the stx operons of one assembly
    :param args: type ArgumentParser arguments
    """
    errors = argument_errors(args)
    if errors:
        error_print(errors=errors)
    start_time = time.time()
    try:
        config = TypingConfig(
            name=args.name or '',
            verbose=args.verbose_report
        )
        typer = StxTyper(
            config=config,
            nucleotide=pathfinder(args.nucleotide) if args.nucleotide
            else None,
            database=pathfinder(args.database) if args.database else None,
            hits_file=pathfinder(args.hits) if args.hits else None,
            output=pathfinder(args.output) if args.output else None,
            blast_bin=args.blast_bin,
            threads=args.threads
        )
        typer.main()
    except StxTyperError as exc:
        fatal_error(exc)
    logging.info(
        'stx typing completed in %.2f seconds', time.time() - start_time
    )


def cli():
    """
    Collect the arguments, create an object, and run the script
    """
    parser = ArgumentParser(
        description='Determine stx type(s) of a genome, print a .tsv report',
        formatter_class=RawTextHelpFormatter
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    parser.add_argument(
        '-n', '--nucleotide',
        metavar='nucleotide',
        help='Input nucleotide FASTA file (can be gzipped)'
    )
    parser.add_argument(
        '-d', '--database',
        metavar='database',
        help='FASTA file of the stx subunit reference proteins. Identifiers '
        'are <accession>|stx<subunit><type>, e.g. WP_000000001.1|stxA2a'
    )
    parser.add_argument(
        '--hits',
        metavar='hits',
        help='Precomputed tabular tblastn output (outfmt "6 sseqid qseqid '
        'sstart send slen qstart qend qlen sseq qseq"). BLAST is not run '
        'when this is supplied'
    )
    parser.add_argument(
        '--name',
        metavar='name',
        help='Text to be added as the first column "name" to all rows of the '
        'report, for example an assembly name'
    )
    parser.add_argument(
        '-o', '--output',
        metavar='output',
        help='Write the report to this file instead of stdout'
    )
    parser.add_argument(
        '--blast_bin',
        metavar='blast_bin',
        help='Directory containing the BLAST+ programs. Default: $BLAST_BIN, '
        'then the PATH'
    )
    parser.add_argument(
        '-t', '--threads',
        metavar='threads',
        type=int,
        default=1,
        help='Number of threads used by tblastn. Default is 1'
    )
    parser.add_argument(
        '--verbose_report',
        action='store_true',
        help='Report full subunit types of single subunit hits, and the '
        'residues of unresolved stx2 subtypes'
    )
    parser.add_argument(
        '-v', '--verbosity',
        choices=VERBOSITY_CHOICES,
        metavar='verbosity',
        default='info',
        help='Set the logging level. Options are debug, info, warning, error, '
        'and critical. Default is info.'
    )
    arguments = parser.parse_args()
    setup_logging(verbosity=arguments.verbosity)
    stx_type(arguments)
    return arguments


if __name__ == '__main__':
    cli()
