from __future__ import annotations
import logging
from typing import Callable

log = logging.getLogger(__name__)


class ScrollTrigger:
    """
    Edge detector for the sentinel below the last loaded result.

    observe() is the visibility-observer callback. It reports "advance"
    on a hidden → visible edge, and only when can_advance() agrees at that
    moment. Staying visible does not fire again until either the sentinel
    goes out of view or rearm() is called after a status change.
    """

    def __init__(self, can_advance: Callable[[], bool]) -> None:
        self._can_advance = can_advance
        self._visible     = False
        self.fired        = 0

    @property
    def visible(self) -> bool:
        return self._visible

    def observe(self, visible: bool) -> bool:
        was_visible, self._visible = self._visible, visible
        if not visible or was_visible:
            return False
        if not self._can_advance():
            log.debug("Sentinel visible but advancing is blocked")
            return False
        self.fired += 1
        return True

    def rearm(self) -> None:
        """Treat the next visible report as a fresh edge."""
        self._visible = False
