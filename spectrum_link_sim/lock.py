from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional
import logging

from .config import LinkConfig
from .entities import LockState

logger = logging.getLogger(__name__)

TransitionCallback = Callable[["LockStateMachine"], None]

_DEFAULTS = LinkConfig()


@dataclass
class LockStateMachine:
    """
    Two-state link lock driven by the per-tick link metric.

    Locks when the metric reaches lock_threshold and unlocks when it falls
    below unlock_threshold. With equal thresholds (the default) there is no
    hysteresis; setting unlock_threshold lower opens a dead-band in which
    the current state is held.

    Callbacks fire on transitions only, so re-evaluating with an unchanged
    outcome has no side effects.
    """
    lock_threshold: float = _DEFAULTS.LOCK_THRESHOLD
    unlock_threshold: Optional[float] = None
    payload: str = _DEFAULTS.SUCCESS_PAYLOAD
    on_lock: Optional[TransitionCallback] = None
    on_unlock: Optional[TransitionCallback] = None
    state: LockState = field(default=LockState.UNLOCKED, init=False)
    last_metric: Optional[float] = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.unlock_threshold is None:
            self.unlock_threshold = self.lock_threshold
        # The unlock level never exceeds the lock level.
        self.unlock_threshold = min(self.unlock_threshold, self.lock_threshold)

    @classmethod
    def from_config(cls, config: LinkConfig, **kwargs) -> "LockStateMachine":
        kwargs.setdefault("lock_threshold", config.LOCK_THRESHOLD)
        kwargs.setdefault("unlock_threshold", config.UNLOCK_THRESHOLD)
        kwargs.setdefault("payload", config.SUCCESS_PAYLOAD)
        return cls(**kwargs)

    @property
    def locked(self) -> bool:
        return self.state is LockState.LOCKED

    @property
    def indicator(self) -> Optional[str]:
        """Success payload surfaced to the renderer while locked."""
        return self.payload if self.locked else None

    def update(self, metric: float) -> LockState:
        self.last_metric = metric
        if not self.locked and metric >= self.lock_threshold:
            self._enter(LockState.LOCKED)
        elif self.locked and metric < self.unlock_threshold:
            self._enter(LockState.UNLOCKED)
        return self.state

    def reset(self) -> LockState:
        """Force Unlocked regardless of the last metric."""
        self.last_metric = None
        if self.locked:
            self._enter(LockState.UNLOCKED)
        return self.state

    def _enter(self, new_state: LockState) -> None:
        self.state = new_state
        if new_state is LockState.LOCKED:
            logger.info("Link locked at %.2f (threshold %.2f)", self.last_metric, self.lock_threshold)
            if self.on_lock is not None:
                self.on_lock(self)
        else:
            logger.info("Link unlocked (last metric %s)", self.last_metric)
            if self.on_unlock is not None:
                self.on_unlock(self)
