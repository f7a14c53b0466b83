"""
Test fixtures package for receipt codec tests.

Organized into layers:
- vectors.py: Known-good signed tokens and their raw parameters
- common.py: Record factories shared by all test modules

Usage:
    from fixtures import make_leave
    from fixtures.vectors import PRIV, LEAVE_TOKEN

    def test_something():
        assert make_leave().sign(PRIV) == LEAVE_TOKEN
"""

from .common import (
    make_builder,
    make_leave,
    make_bet,
    make_fold,
    make_dist,
    make_settle,
    make_create_conf,
    make_forward,
    make_message,
    make_recovery,
    make_unlock,
    resign_segments,
)

__all__ = [
    "make_builder",
    "make_leave",
    "make_bet",
    "make_fold",
    "make_dist",
    "make_settle",
    "make_create_conf",
    "make_forward",
    "make_message",
    "make_recovery",
    "make_unlock",
    "resign_segments",
]
