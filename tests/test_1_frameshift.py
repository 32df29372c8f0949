#!/usr/bin/env python

"""
Unit tests for stx_typer/frameshift.py
"""

# Local imports
from stx_typer.frameshift import (
    is_frameshift_fragment,
    merge_frameshifts
)
from stx_typer.state import ResolutionState


def fragments(make_hit):
    """
    Three fragments of one A subunit, each in a different reading frame
    """
    return [
        make_hit(start=101, end=200, ref_start=1, ref_end=33),
        make_hit(start=202, end=300, ref_start=34, ref_end=66),
        make_hit(start=303, end=400, ref_start=67, ref_end=100),
    ]


def test_fragment_detection(make_hit, config):
    """
    Test that a close downstream hit in another frame continues its
    predecessor
    """
    first, second, _ = fragments(make_hit)
    assert (first.frame, second.frame) == (2, 1)
    assert is_frameshift_fragment(prev=first, hit=second, config=config)
    assert not is_frameshift_fragment(prev=second, hit=first, config=config)


def test_same_frame_not_merged(make_hit, config):
    """
    Test that fragments in the same frame are not merged
    """
    first = make_hit(start=101, end=200, ref_start=1, ref_end=33)
    second = make_hit(start=203, end=300, ref_start=34, ref_end=66)
    assert first.frame == second.frame
    assert not is_frameshift_fragment(prev=first, hit=second, config=config)


def test_distant_fragment_not_merged(make_hit, config):
    """
    Test that fragments separated by the maximum gap or more are not merged
    """
    first = make_hit(start=101, end=200, ref_start=1, ref_end=33)
    second = make_hit(start=213, end=300, ref_start=34, ref_end=66)
    assert first.frame != second.frame
    assert second.target_start - first.target_end == 12
    assert not is_frameshift_fragment(prev=first, hit=second, config=config)


def test_other_reference_not_merged(make_hit, config):
    """
    Test that fragments of different references are not merged
    """
    first = make_hit(start=101, end=200, ref_start=1, ref_end=33)
    second = make_hit(
        start=202, end=300, ref_start=34, ref_end=66, accession='OTHER'
    )
    assert not is_frameshift_fragment(prev=first, hit=second, config=config)


def test_merge_chain(make_hit, config):
    """
    Test that a chain of three fragments collapses into one frameshifted hit
    whatever the input order
    """
    first, second, third = fragments(make_hit)
    state = ResolutionState([third, first, second])
    assert merge_frameshifts(state=state, config=config) == 2
    assert state.unconsumed() == [0]
    merged = state[0]
    assert merged.frameshift
    assert (merged.target_start, merged.target_end) == (100, 400)
    assert (merged.ref_start, merged.ref_end) == (0, 100)
    assert merged.length == 100
    assert merged.nident == 100
    assert merged.coverage == 1.0


def test_merge_reverse_strand(make_hit, config):
    """
    Test that on the reverse strand the reference end comes from the
    upstream fragment
    """
    upstream = make_hit(
        start=101, end=200, ref_start=51, ref_end=100, reverse=True
    )
    downstream = make_hit(
        start=202, end=300, ref_start=1, ref_end=50, reverse=True
    )
    state = ResolutionState([upstream, downstream])
    assert merge_frameshifts(state=state, config=config) == 1
    merged = state[1]
    assert state.is_consumed(0)
    assert not merged.target_strand
    assert (merged.target_start, merged.target_end) == (100, 300)
    assert (merged.ref_start, merged.ref_end) == (0, 100)


def test_no_merge(make_hit, config):
    """
    Test that unrelated hits are left untouched
    """
    hits = [
        make_hit(start=101, end=400),
        make_hit(subunit='B', start=431, end=520, ref_len=90),
    ]
    state = ResolutionState(hits)
    assert merge_frameshifts(state=state, config=config) == 0
    assert state.unconsumed() == [0, 1]
    assert not any(hit.frameshift for hit in state.hits)
