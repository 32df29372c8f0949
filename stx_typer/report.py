#!/usr/bin/env python

"""
Tab-separated stx operon report
"""

# Standard imports
import logging
import os
import shutil
import sys
import tempfile
from typing import (
    List,
    Optional
)

# Local imports
from stx_typer.config import TypingConfig
from stx_typer.operons import Operon

REPORT_HEADER = [
    'target_contig',
    'stx_type',
    'operon',
    'identity',
    'target_start',
    'target_stop',
    'target_strand',
    'A_reference',
    'A_identity',
    'A_coverage',
    'B_reference',
    'B_identity',
    'B_coverage'
]


def percent(value: float) -> str:
    return f'{value * 100:.2f}'


def _subunit_columns(hit) -> List[str]:
    if hit is None:
        return ['', '', '']
    return [hit.ref_accession, percent(hit.identity), percent(hit.coverage)]


def operon_row(operon: Operon, config: TypingConfig) -> List[str]:
    """
    Create the report columns of one operon
    :param operon: Operon to report
    :param config: TypingConfig with the run name and verbosity
    :return: List of column strings
    """
    stx_type, label = operon.reported_type(config)
    row = [config.name] if config.name else []
    row += [
        operon.target_name,
        stx_type,
        label,
        percent(operon.identity) if operon.is_pair else '',
        str(operon.target_start + 1),
        str(operon.target_end),
        operon.primary.strand_symbol
    ]
    row += _subunit_columns(operon.subunit_a)
    row += _subunit_columns(operon.subunit_b)
    return row


def report_header(config: TypingConfig) -> List[str]:
    if config.name:
        return ['name'] + REPORT_HEADER
    return list(REPORT_HEADER)


def format_report(operons: List[Operon], config: TypingConfig) -> str:
    """
    Create the full report, header included
    :param operons: List of Operons in report order
    :param config: TypingConfig of the run
    :return: String of the report
    """
    header = '\t'.join(report_header(config)) + '\n'
    body = str()
    for operon in operons:
        body += '\t'.join(operon_row(operon, config)) + '\n'
    return header + body


def write_report(
        operons: List[Operon],
        config: TypingConfig,
        output: Optional[str] = None):
    """
    Write the report to a file, or to stdout when no file is supplied. A
    file is written in full to a temporary location first, so that a failed
    run never leaves a partial report behind
    :param operons: List of Operons in report order
    :param config: TypingConfig of the run
    :param output: Optional path of the report file
    """
    report = format_report(operons, config)
    if not output:
        sys.stdout.write(report)
        return
    output_dir = os.path.dirname(os.path.abspath(output))
    os.makedirs(output_dir, exist_ok=True)
    with tempfile.NamedTemporaryFile(
            'w', encoding='utf-8', dir=output_dir, delete=False) as tmp:
        tmp.write(report)
    try:
        shutil.move(tmp.name, output)
    except OSError:
        os.remove(tmp.name)
        raise
    logging.info('Report written to %s', output)
