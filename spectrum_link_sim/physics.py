from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union
import math

from .config import LinkConfig
from .entities import LinkMetric, SimulationParameters


def coerce_float(value: Any, default: float) -> float:
    """
    Best-effort float conversion. Anything that is not a finite number
    (None, unparsable strings, NaN, inf) becomes `default`.
    """
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(result):
        return default
    return result


def coerce_positive(value: Any, default: float) -> float:
    """Like coerce_float, but non-positive values also fall back to `default`."""
    result = coerce_float(value, default)
    return result if result > 0.0 else default


@dataclass
class InfraredLinkBudget:
    """
    Carrier/duty-match SNR model for a consumer IR link.

    The receiver is tuned to a 38 kHz carrier at ~33% duty; the further the
    transmitter is from that operating point, the less signal survives the
    receiver's band-pass and AGC. All functions here are total.
    """
    config: LinkConfig = field(default_factory=LinkConfig)

    name: ClassVar[str] = "infrared"
    unit: ClassVar[str] = "dB"

    def frequency_match(self, carrier_khz: float) -> float:
        target = self.config.IR_TARGET_CARRIER_KHZ
        carrier = coerce_positive(carrier_khz, self.config.FREQUENCY_FLOOR)
        return 1.0 - abs(carrier - target) / target

    def duty_match(self, duty: float) -> float:
        return 1.0 - abs(duty - self.config.IR_TARGET_DUTY) / self.config.IR_DUTY_SPAN

    @staticmethod
    def duty_fraction(duty_percent: float) -> float:
        percent = min(100.0, max(0.0, coerce_float(duty_percent, 0.0)))
        return percent / 100.0

    def signal_power(self, carrier_khz: float, duty_percent: float) -> float:
        """
        signalPower = P_peak * duty * max(0, freqMatch) * max(0, dutyMatch)
        """
        duty = self.duty_fraction(duty_percent)
        return (
            self.config.IR_PEAK_SIGNAL_POWER
            * duty
            * max(0.0, self.frequency_match(carrier_khz))
            * max(0.0, self.duty_match(duty))
        )

    def snr_db(self, carrier_khz: float, duty_percent: float) -> float:
        ratio = self.signal_power(carrier_khz, duty_percent) / self.config.IR_NOISE_LEVEL
        return 10.0 * math.log10(max(self.config.LOG_FLOOR, ratio))

    def evaluate(self, params: SimulationParameters) -> LinkMetric:
        carrier_khz = coerce_float(params.carrier_frequency_hz, 0.0) / 1e3
        duty = self.duty_fraction(params.duty_cycle_percent)
        signal = self.signal_power(carrier_khz, params.duty_cycle_percent)
        return LinkMetric(
            value=self.snr_db(carrier_khz, params.duty_cycle_percent),
            unit=self.unit,
            model=self.name,
            breakdown={
                "frequency_match": self.frequency_match(carrier_khz),
                "duty_match": self.duty_match(duty),
                "signal_power": signal,
            },
        )


@dataclass
class FriisLinkBudget:
    """
    Simplified Friis transmission model for a microwave hop.

        Pr = Pt + Gt + Gr - FSPL - AtmosphericLoss
        FSPL = 32.44 + 20 log10(d[km]) + 20 log10(f[MHz])
        AtmosphericLoss = alpha * d / 4
    """
    config: LinkConfig = field(default_factory=LinkConfig)

    name: ClassVar[str] = "friis"
    unit: ClassVar[str] = "dBm"

    def _log10(self, value: float) -> float:
        return math.log10(max(self.config.LOG_FLOOR, value))

    def free_space_path_loss_db(self, distance_km: float, freq_ghz: float) -> float:
        freq = coerce_positive(freq_ghz, self.config.FREQUENCY_FLOOR)
        return (
            self.config.FSPL_CONSTANT_DB
            + 20.0 * self._log10(distance_km)
            + 20.0 * self._log10(freq * 1000.0)
        )

    def atmospheric_loss_db(
        self,
        distance_km: float,
        coefficient: Optional[float] = None,
    ) -> float:
        if coefficient is None:
            coefficient = self.config.ATMOSPHERIC_COEFFICIENT
        return coefficient * (max(0.0, distance_km) / self.config.ATMOSPHERIC_DISTANCE_DIVISOR)

    def received_power_dbm(
        self,
        freq_ghz: Union[float, str, None],
        tx_power_dbm: float,
        tx_gain_dbi: float,
        distance_km: Optional[float] = None,
        atmospheric_coefficient: Optional[float] = None,
    ) -> float:
        if distance_km is None:
            distance_km = self.config.DISTANCE_KM
        freq = coerce_positive(freq_ghz, self.config.FREQUENCY_FLOOR)
        fspl = self.free_space_path_loss_db(distance_km, freq)
        atmos = self.atmospheric_loss_db(distance_km, atmospheric_coefficient)
        return (
            coerce_float(tx_power_dbm, 0.0)
            + coerce_float(tx_gain_dbi, 0.0)
            + self.config.RX_GAIN_DBI
            - fspl
            - atmos
        )

    def evaluate(self, params: SimulationParameters) -> LinkMetric:
        freq_ghz = coerce_float(params.carrier_frequency_hz, 0.0) / 1e9
        freq_ghz = coerce_positive(freq_ghz, self.config.FREQUENCY_FLOOR)
        distance = coerce_float(params.distance_km, self.config.DISTANCE_KM)
        coefficient = coerce_float(
            params.atmospheric_coefficient, self.config.ATMOSPHERIC_COEFFICIENT
        )
        return LinkMetric(
            value=self.received_power_dbm(
                freq_ghz,
                params.tx_power_dbm,
                params.tx_gain_dbi,
                distance_km=distance,
                atmospheric_coefficient=coefficient,
            ),
            unit=self.unit,
            model=self.name,
            breakdown={
                "frequency_ghz": freq_ghz,
                "fspl_db": self.free_space_path_loss_db(distance, freq_ghz),
                "atmospheric_loss_db": self.atmospheric_loss_db(distance, coefficient),
            },
        )


LinkBudgetModel = Union[InfraredLinkBudget, FriisLinkBudget]

_MODEL_ALIASES = {
    "infrared": InfraredLinkBudget,
    "ir": InfraredLinkBudget,
    "friis": FriisLinkBudget,
    "rf": FriisLinkBudget,
    "microwave": FriisLinkBudget,
}


def build_link_model(name: str, config: Optional[LinkConfig] = None) -> LinkBudgetModel:
    """Construct a link-budget model by name ("infrared" or "friis")."""
    try:
        model_cls = _MODEL_ALIASES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown link model {name!r}; expected one of {sorted(_MODEL_ALIASES)}"
        ) from None
    return model_cls(config=config or LinkConfig())
