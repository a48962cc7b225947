"""
Process lifecycle flags shared by the app lifespan and background writers.
"""

_shutting_down = False


def is_shutting_down() -> bool:
    return _shutting_down


def set_shutting_down(state: bool) -> None:
    global _shutting_down
    _shutting_down = state
