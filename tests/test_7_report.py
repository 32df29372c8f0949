#!/usr/bin/env python

"""
Unit tests for stx_typer/report.py
"""

# Standard imports
import os
from unittest.mock import patch

# Third party imports
import pytest

# Local imports
from stx_typer.config import TypingConfig
from stx_typer.operons import Operon
from stx_typer.report import (
    REPORT_HEADER,
    format_report,
    operon_row,
    percent,
    report_header,
    write_report
)


def make_pair(make_hit):
    subunit_a = make_hit(start=101, end=400, mismatches=1)
    subunit_b = make_hit(subunit='B', start=431, end=520, ref_len=90)
    return Operon(primary=subunit_a, secondary=subunit_b)


def test_percent():
    """
    Test that fractions are printed as percentages with two decimals
    """
    assert percent(1.0) == '100.00'
    assert percent(0.98947) == '98.95'
    assert percent(0.5) == '50.00'


def test_header_with_name():
    """
    Test that a run name adds a leading name column
    """
    assert report_header(TypingConfig()) == REPORT_HEADER
    assert report_header(TypingConfig(name='sample1')) == \
        ['name'] + REPORT_HEADER


def test_pair_row(make_hit, config):
    """
    Test the columns of a paired operon
    """
    row = operon_row(make_pair(make_hit), config)
    assert row == [
        'contig1', 'stx1a', 'COMPLETE', '99.47', '101', '520', '+',
        'REF_A1a', '99.00', '100.00',
        'REF_B1a', '100.00', '100.00'
    ]
    assert len(row) == len(REPORT_HEADER)


def test_reverse_pair_row(make_hit, config):
    """
    Test that a reverse strand operon spans both subunits, A columns first
    """
    subunit_b = make_hit(
        subunit='B', start=101, end=190, ref_len=90, reverse=True
    )
    subunit_a = make_hit(start=221, end=520, reverse=True)
    row = operon_row(Operon(primary=subunit_b, secondary=subunit_a), config)
    assert row[4:8] == ['101', '520', '-', 'REF_A1a']
    assert row[10] == 'REF_B1a'


def test_singleton_row(make_hit, config):
    """
    Test that a single subunit has no operon identity and empty partner
    columns
    """
    row = operon_row(
        Operon(primary=make_hit(subunit='B', start=431, end=520, ref_len=90)),
        config
    )
    assert row == [
        'contig1', 'stx1', 'COMPLETE_SUBUNIT', '', '431', '520', '+',
        '', '', '',
        'REF_B1a', '100.00', '100.00'
    ]


def test_named_row(make_hit):
    """
    Test that the run name leads every row
    """
    row = operon_row(make_pair(make_hit), TypingConfig(name='sample1'))
    assert row[0] == 'sample1'
    assert len(row) == len(REPORT_HEADER) + 1


def test_format_report(make_hit, config):
    """
    Test that the report has a header line and one line per operon
    """
    report = format_report([make_pair(make_hit)], config)
    lines = report.splitlines()
    assert lines[0] == '\t'.join(REPORT_HEADER)
    assert len(lines) == 2
    assert lines[1].startswith('contig1\tstx1a\tCOMPLETE\t')
    assert format_report([], config) == '\t'.join(REPORT_HEADER) + '\n'


def test_write_report_file(make_hit, config, tmp_path):
    """
    Test that the report is written to the requested file, creating its
    folder
    """
    output = os.path.join(str(tmp_path), 'reports', 'stx.tsv')
    write_report(
        operons=[make_pair(make_hit)],
        config=config,
        output=output
    )
    with open(output, 'r', encoding='utf-8') as report:
        assert report.read() == format_report([make_pair(make_hit)], config)
    assert os.listdir(os.path.dirname(output)) == ['stx.tsv']


def test_write_report_stdout(config, capsys):
    """
    Test that the report goes to stdout without an output file
    """
    write_report(operons=[], config=config)
    assert capsys.readouterr().out == '\t'.join(REPORT_HEADER) + '\n'


def test_write_report_failed_move(make_hit, config, tmp_path):
    """
    Test that the temporary report is removed when it cannot be moved into
    place
    """
    output = os.path.join(str(tmp_path), 'reports', 'stx.tsv')
    with patch('shutil.move', side_effect=OSError('disk full')):
        with pytest.raises(OSError):
            write_report(
                operons=[make_pair(make_hit)],
                config=config,
                output=output
            )
    assert os.listdir(os.path.dirname(output)) == []
