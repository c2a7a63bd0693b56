from .config import FieldConfig, LinkConfig
from .entities import (
    LinkMetric,
    LockState,
    Obstacle,
    ObstacleBounds,
    Packet,
    Regime,
    SimulationParameters,
)
from .lock import LockStateMachine
from .physics import FriisLinkBudget, InfraredLinkBudget, build_link_model
from .propagation import Emitter, PacketPropagationSimulator
from .regime import (
    HUD_NARRATION_BANDS,
    PACKET_INTERACTION_BANDS,
    BandTable,
    classify_regime,
    get_band_table,
)
from .simulation import LinkSimulation, TickSnapshot, build_link_simulation

__all__ = [
    "FieldConfig",
    "LinkConfig",
    "LinkMetric",
    "LockState",
    "Obstacle",
    "ObstacleBounds",
    "Packet",
    "Regime",
    "SimulationParameters",
    "LockStateMachine",
    "FriisLinkBudget",
    "InfraredLinkBudget",
    "build_link_model",
    "Emitter",
    "PacketPropagationSimulator",
    "HUD_NARRATION_BANDS",
    "PACKET_INTERACTION_BANDS",
    "BandTable",
    "classify_regime",
    "get_band_table",
    "LinkSimulation",
    "TickSnapshot",
    "build_link_simulation",
]
