#!/usr/bin/env python

"""
Collection of command line helpers for the stx typing scripts
"""

# Standard imports
import logging
import os

# Third party inputs
import coloredlogs

# Local imports
from stx_typer.errors import StxTyperError

VERBOSITY_CHOICES = ['debug', 'info', 'warning', 'error', 'critical']


def setup_logging(verbosity: str = 'info'):
    """
    Install coloredlogs with the level colours and time-prefixed format used
    by all the stx scripts
    :param verbosity: String of the logging level name
    """
    coloredlogs.DEFAULT_LEVEL_STYLES = {
        'debug': {
            'bold': True, 'color': 'green'},
        'info': {
            'bold': True, 'color': 'blue'},
        'warning': {
            'bold': True, 'color': 'yellow'},
        'error': {
            'bold': True, 'color': 'red'},
        'critical': {
            'bold': True, 'background': 'red'}
    }
    coloredlogs.DEFAULT_LOG_FORMAT = '%(asctime)s %(message)s'
    coloredlogs.install(level=verbosity.upper())


def error_print(
        errors: list):
    """
    Log grammatically correct error messages about the supplied arguments,
    and exit
    :param errors: List of errors with supplied arguments
    """
    error_string = '\n'.join(errors)
    was_were = 'was' if len(errors) == 1 else 'were'
    correct = 'error' if len(errors) == 1 else 'errors'
    logging.error(
        'There %s %s %s when attempting to run your command: \n%s', was_were,
        len(errors), correct, error_string
    )
    raise SystemExit(1)


def fatal_error(exc: StxTyperError):
    """
    Log an error raised while typing, naming its kind, and exit with a
    non-zero status. No report is written
    :param exc: StxTyperError raised by the typing pipeline
    """
    logging.error('%s: %s', type(exc).__name__, exc)
    raise SystemExit(1) from exc


def pathfinder(path: str):
    """
    Create an absolute path from a user-supplied path, with tilde expansion
    :param path: String of path supplied by user. Could be relative, tilde
    expansion, or absolute
    :return: String of absolute path
    """
    return os.path.abspath(os.path.expanduser(path))
