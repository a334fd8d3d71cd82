"""
Score & accuracy rules for matching sessions.
Pure logic, no state.
"""


def accuracy_percent(correct: int, attempts: int) -> int:
    """
    Rounded percentage of correct attempts; 0 when nothing was attempted.

    Halves round up (12.5 -> 13), unlike the built-in ``round``.
    """
    if attempts <= 0:
        return 0
    return int(correct * 100 / attempts + 0.5)


def is_completed(correct_count: int, active_count: int) -> bool:
    """An empty active set is never complete."""
    return active_count > 0 and correct_count == active_count
