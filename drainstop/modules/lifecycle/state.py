"""Lifecycle states of a serving process and the guarded cell that holds them."""

import threading
from enum import Enum
from typing import Dict, FrozenSet


class LifecycleState(str, Enum):
    ACCEPTING = "accepting"
    DRAINING = "draining"
    TERMINATED = "terminated"


_ALLOWED_TRANSITIONS: Dict[LifecycleState, FrozenSet[LifecycleState]] = {
    LifecycleState.ACCEPTING: frozenset({LifecycleState.DRAINING}),
    LifecycleState.DRAINING: frozenset({LifecycleState.TERMINATED}),
    LifecycleState.TERMINATED: frozenset(),
}


class LifecycleStateCell:
    """Holds the current lifecycle state behind a lock.

    Signals, loop callbacks and worker threads can all race to start a
    shutdown, so every transition is a compare-and-set: exactly one caller
    gets ``True`` for a given transition.
    """

    def __init__(self):
        self._state = LifecycleState.ACCEPTING
        self._lock = threading.Lock()

    @property
    def current(self) -> LifecycleState:
        with self._lock:
            return self._state

    def transition(self, expected: LifecycleState, target: LifecycleState) -> bool:
        """
        Move from ``expected`` to ``target`` if the cell is still in ``expected``.

        Args:
            expected: State the caller believes the cell is in
            target: State to move to

        Returns:
            True if this call performed the transition, False otherwise
        """
        if target not in _ALLOWED_TRANSITIONS[expected]:
            return False
        with self._lock:
            if self._state is not expected:
                return False
            self._state = target
            return True

    def begin_draining(self) -> bool:
        return self.transition(LifecycleState.ACCEPTING, LifecycleState.DRAINING)

    def terminate(self) -> bool:
        return self.transition(LifecycleState.DRAINING, LifecycleState.TERMINATED)
