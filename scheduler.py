from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from spectrum_link_sim import LinkSimulation, TickSnapshot

FrameCallback = Callable[[TickSnapshot], None]


### Frame Driver ###


@dataclass
class FrameScheduler:
    """
    Headless stand-in for the browser's animation loop.

    Each frame at wall-clock time now_s:
        - emit every packet the fixed-rate emitter says is due,
        - tick the simulation once with dt measured in nominal frames.

    Packet density therefore depends on wall-clock time only, while packet
    motion scales with the real frame interval. The core never calls back
    into the scheduler.
    """
    simulation: LinkSimulation
    nominal_fps: float = 60.0
    last_frame_s: Optional[float] = None
    frames: int = 0
    on_frame: Optional[FrameCallback] = None
    emitted: int = field(default=0, init=False)

    def advance(self, now_s: float) -> TickSnapshot:
        """Run one frame at now_s (seconds, monotonically non-decreasing)."""
        self.emitted += len(self.simulation.emit_due(now_s))

        if self.last_frame_s is None:
            dt = 1.0
        else:
            dt = max(0.0, (now_s - self.last_frame_s) * self.nominal_fps)
        self.last_frame_s = now_s

        snapshot = self.simulation.tick(dt)
        self.frames += 1
        if self.on_frame is not None:
            self.on_frame(snapshot)
        return snapshot

    def run_frames(self, frame_times_s: Iterable[float]) -> List[TickSnapshot]:
        return [self.advance(t) for t in frame_times_s]

    def run(
        self,
        duration_s: float,
        fps: Optional[float] = None,
        start_s: float = 0.0,
    ) -> List[TickSnapshot]:
        """
        Drive the simulation at a constant frame rate for duration_s seconds
        of simulated time.
        """
        fps = fps or self.nominal_fps
        num_frames = int(round(duration_s * fps))
        return self.run_frames(start_s + i / fps for i in range(num_frames))

    def reset(self) -> None:
        self.simulation.reset()
        self.last_frame_s = None
        self.frames = 0
        self.emitted = 0
