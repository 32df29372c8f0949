#!/usr/bin/env python

"""
Exceptions raised while typing stx operons. Every error is fatal: the
command line layer logs the message and exits without writing a report
"""


class StxTyperError(Exception):
    """
    Base class for all stx typing errors
    """


class MalformedHitError(StxTyperError, ValueError):
    """
    An aligner record could not be parsed. The message quotes the line
    """

    def __init__(self, message: str, line: str = ''):
        self.line = line.rstrip('\n')
        if self.line:
            message = f'{message}\n{self.line}'
        super().__init__(message)


class InternalConsistencyError(StxTyperError, AssertionError):
    """
    A data model invariant was broken by the code rather than by the data
    """


class MissingThresholdError(StxTyperError, KeyError):
    """
    An stx class has no entry in the identity threshold table
    """

    def __str__(self):
        # KeyError would otherwise wrap the message in quotes
        return str(self.args[0]) if self.args else ''


class BlastError(StxTyperError):
    """
    A BLAST+ program is missing or exited with an error
    """


class InputSequenceError(StxTyperError):
    """
    The nucleotide FASTA file is missing, empty, or unusable
    """
