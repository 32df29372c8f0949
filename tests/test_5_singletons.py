#!/usr/bin/env python

"""
Unit tests for stx_typer/singletons.py
"""

# Local imports
from stx_typer.singletons import (
    covers,
    resolve_singletons
)
from stx_typer.state import ResolutionState


def test_unpaired_hits_reported(make_hit):
    """
    Test that every unconsumed hit becomes a singleton operon
    """
    state = ResolutionState([
        make_hit(start=101, end=400),
        make_hit(subunit='B', start=5001, end=5090, ref_len=90),
    ])
    singletons = resolve_singletons(state=state, hits=[0, 1])
    assert [operon.primary.index for operon in singletons] == [0, 1]
    assert not any(operon.is_pair for operon in singletons)
    assert state.unconsumed() == []


def test_consumed_hits_skipped(make_hit):
    """
    Test that consumed hits are not reported
    """
    state = ResolutionState([
        make_hit(start=101, end=400),
        make_hit(start=5001, end=5300),
    ])
    state.consume(0)
    singletons = resolve_singletons(state=state, hits=[0, 1])
    assert [operon.primary.index for operon in singletons] == [1]


def test_widest_hit_first(make_hit):
    """
    Test that hits are visited by decreasing reference coverage
    """
    state = ResolutionState([
        make_hit(start=101, end=220, ref_len=40),
        make_hit(start=1001, end=1300),
    ])
    singletons = resolve_singletons(state=state, hits=[0, 1])
    assert [operon.primary.index for operon in singletons] == [1, 0]


def test_same_super_class_covered(make_hit):
    """
    Test that a hit within a reported hit of the same super class is
    suppressed even when it is better
    """
    big = make_hit(start=101, end=400, mismatches=10)
    small = make_hit(stx_type='1c', start=151, end=330, ref_len=60)
    assert covers(big, small)
    state = ResolutionState([big, small])
    singletons = resolve_singletons(state=state, hits=[0, 1])
    assert len(singletons) == 1
    assert singletons[0].primary.index == 0
    assert state.is_consumed(1)


def test_better_other_super_class_kept(make_hit):
    """
    Test that a strictly better hit of another super class is reported even
    when it lies within a reported hit
    """
    big = make_hit(start=101, end=400, mismatches=10)
    small = make_hit(stx_type='2e', start=151, end=330, ref_len=60)
    assert not covers(big, small)
    state = ResolutionState([big, small])
    singletons = resolve_singletons(state=state, hits=[0, 1])
    assert len(singletons) == 2


def test_worse_other_super_class_covered(make_hit):
    """
    Test that a contained hit of another super class that is not better is
    suppressed
    """
    big = make_hit(start=101, end=400)
    small = make_hit(
        stx_type='2e', start=151, end=330, ref_start=11, ref_end=70
    )
    assert covers(big, small)


def test_other_strand_not_covered(make_hit):
    """
    Test that hits on the other strand are never suppressed
    """
    state = ResolutionState([
        make_hit(start=101, end=400),
        make_hit(start=151, end=330, ref_len=60, reverse=True),
    ])
    singletons = resolve_singletons(state=state, hits=[0, 1])
    assert len(singletons) == 2
