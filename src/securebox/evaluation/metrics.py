from __future__ import annotations


def solved(report) -> int:
    return int(not report.locked)


def presses_used(report) -> int:
    # toggles actually sent to the box (0 when inconsistent)
    return len(report.toggles)


def inconsistent_broken(consistent: int, solved: int):
    # returns (inconsistent, broken)
    if consistent == 0:
        return 1, 0
    if solved == 0:
        return 0, 1
    return 0, 0
