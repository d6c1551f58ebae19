import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Mapping, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


# ---------- categorical fields ----------
class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class SmokingStatus(str, Enum):
    NEVER = "never"
    CURRENT = "current"


class VapingStatus(str, Enum):
    NEVER = "never"
    CURRENT = "current"


class Condition(str, Enum):
    ASTHMA = "asthma"
    TB = "tb"
    COPD = "copd"


class AsthmaOnset(str, Enum):
    CHILDHOOD = "childhood"
    LATE = "late"


class AirQuality(str, Enum):
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"


class ExerciseFrequency(str, Enum):
    NONE = "none"
    OCCASIONAL = "occasional"  # 1-2x / week
    FREQUENT = "frequent"      # 3-5x / week
    DAILY = "daily"


class ExerciseLocation(str, Enum):
    OUTDOOR = "outdoor"
    INDOOR_GYM = "indoor-gym"


class Intensity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    VIGOROUS = "vigorous"


class Ventilation(str, Enum):
    GOOD = "good"
    POOR = "poor"


class MaskType(str, Enum):
    NONE = "none"
    CLOTH = "cloth"
    SURGICAL = "surgical"
    N95 = "n95"


class Exposure(str, Enum):
    NONE = "none"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True)
class QuestionnaireInput:
    """Normalized questionnaire. Every numeric field is already inside its clamp range."""

    # demographics
    sex: Sex = Sex.MALE
    age: float = 10.0
    height_cm: float = 0.0
    weight_kg: float = 0.0
    # smoking / vaping
    smoking: SmokingStatus = SmokingStatus.NEVER
    cigarettes_per_day: float = 0.0
    years_smoked: float = 0.0
    vaping: VapingStatus = VapingStatus.NEVER
    secondhand_smoke: bool = False
    # medical
    conditions: FrozenSet[Condition] = frozenset()
    family_history: bool = False
    asthma_onset: Optional[AsthmaOnset] = None
    # environment
    indoor_air: AirQuality = AirQuality.GOOD
    aqi: float = 0.0
    outdoor_hours: float = 0.0
    sleep_hours: float = 7.0
    breath_hold_seconds: float = 0.0
    # exercise
    exercise_frequency: ExerciseFrequency = ExerciseFrequency.NONE
    exercise_location: ExerciseLocation = ExerciseLocation.OUTDOOR
    exercise_intensity: Intensity = Intensity.MODERATE
    gym_ventilation: Ventilation = Ventilation.GOOD
    # protection / exposure
    mask: MaskType = MaskType.NONE
    occupational: Exposure = Exposure.NONE
    # symptoms
    shortness_of_breath: bool = False
    chronic_cough: bool = False
    wheezing: bool = False
    chest_tightness: bool = False
    recent_infection: bool = False

    @property
    def has_copd(self) -> bool:
        return Condition.COPD in self.conditions

    @property
    def has_asthma(self) -> bool:
        return Condition.ASTHMA in self.conditions

    @property
    def has_tb(self) -> bool:
        return Condition.TB in self.conditions

    @property
    def is_smoker(self) -> bool:
        return self.smoking is SmokingStatus.CURRENT

    @property
    def is_vaper(self) -> bool:
        return self.vaping is VapingStatus.CURRENT

    @property
    def bmi(self) -> float:
        height_m = self.height_cm / 100
        if height_m <= 0:
            return 22.0
        return self.weight_kg / (height_m * height_m)


# ---------- coercion helpers ----------
def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def _text(v: Any) -> str:
    return v.strip().lower() if isinstance(v, str) else ""


def _num(v: Any, missing: float = 0.0) -> float:
    if v is None or (isinstance(v, str) and not v.strip()):
        return missing
    try:
        x = float(v)
    except (TypeError, ValueError):
        logger.debug("non-numeric value %r coerced to 0", v)
        return 0.0
    return x if math.isfinite(x) else 0.0


def _enum(cls: Type[E], v: Any, default: E) -> E:
    try:
        return cls(_text(v))
    except ValueError:
        return default


def _yes(v: Any) -> bool:
    return v is True or _text(v) == "yes"


def _conditions(v: Any) -> FrozenSet[Condition]:
    if isinstance(v, str):
        v = [v]
    if not isinstance(v, (list, tuple, set, frozenset)):
        return frozenset()
    found = set()
    for item in v:
        try:
            found.add(Condition(_text(item)))
        except ValueError:
            continue
    return frozenset(found)


def _frequency(v: Any) -> ExerciseFrequency:
    s = _text(v)
    if not s or s == "none":
        return ExerciseFrequency.NONE
    if "daily" in s:
        return ExerciseFrequency.DAILY
    if "3-5" in s or s == ExerciseFrequency.FREQUENT.value:
        return ExerciseFrequency.FREQUENT
    return ExerciseFrequency.OCCASIONAL


def _location(v: Any) -> ExerciseLocation:
    s = _text(v)
    if "indoor" in s or "gym" in s:
        return ExerciseLocation.INDOOR_GYM
    return ExerciseLocation.OUTDOOR


def _intensity(v: Any) -> Intensity:
    s = _text(v)
    if "vigorous" in s:
        return Intensity.VIGOROUS
    if "light" in s:
        return Intensity.LIGHT
    return Intensity.MODERATE


def _mask(v: Any) -> MaskType:
    s = _text(v)
    if "n95" in s:
        return MaskType.N95
    if "surgical" in s:
        return MaskType.SURGICAL
    if "cloth" in s:
        return MaskType.CLOTH
    return MaskType.NONE


def _exposure(v: Any) -> Exposure:
    s = _text(v)
    if "high" in s:
        return Exposure.HIGH
    if "moderate" in s:
        return Exposure.MODERATE
    return Exposure.NONE


def _smoking(v: Any) -> SmokingStatus:
    if v is True or _text(v) in ("yes", "current"):
        return SmokingStatus.CURRENT
    return SmokingStatus.NEVER


def _family_history(v: Any) -> bool:
    s = _text(v)
    return s == "yes" or "lung" in s


# ---------- normalizer ----------
def normalize(raw: Optional[Mapping[str, Any]]) -> QuestionnaireInput:
    """Coerce a loosely-typed questionnaire (camelCase keys, as the form posts it)
    into a ``QuestionnaireInput``. Never raises: bad values fall back to defaults."""
    if isinstance(raw, QuestionnaireInput):
        return raw
    d: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    age = _clamp(_num(d.get("age")), 10, 120)
    onset = _text(d.get("asthmaOnset"))

    return QuestionnaireInput(
        sex=_enum(Sex, d.get("sex"), Sex.MALE),
        age=age,
        height_cm=_num(d.get("height")),
        weight_kg=_num(d.get("weight")),
        smoking=_smoking(d.get("smoking")),
        cigarettes_per_day=_clamp(_num(d.get("cigarettesPerDay")), 0, 100),
        years_smoked=_clamp(_num(d.get("yearsSmoked")), 0, age),
        vaping=_enum(VapingStatus, d.get("vapingStatus"), VapingStatus.NEVER),
        secondhand_smoke=_yes(d.get("secondhandSmoke")),
        conditions=_conditions(d.get("medicalHistory")),
        family_history=_family_history(d.get("familyHistory")),
        asthma_onset=_enum(AsthmaOnset, onset, None) if onset else None,
        indoor_air=_enum(AirQuality, d.get("indoorAirQuality"), AirQuality.GOOD),
        aqi=_clamp(_num(d.get("aqi")), 0, 500),
        outdoor_hours=_clamp(_num(d.get("outdoorDuration")), 0, 24),
        sleep_hours=_clamp(_num(d.get("sleepHours"), missing=7.0), 0, 24),
        breath_hold_seconds=max(_num(d.get("breathHoldSeconds")), 0.0),
        exercise_frequency=_frequency(d.get("exerciseFrequency")),
        exercise_location=_location(d.get("exerciseLocation")),
        exercise_intensity=_intensity(d.get("exerciseIntensity")),
        gym_ventilation=Ventilation.POOR if _text(d.get("gymVentilation")) == "poor" else Ventilation.GOOD,
        mask=_mask(d.get("maskType")),
        occupational=_exposure(d.get("occupationalExposure")),
        shortness_of_breath=_yes(d.get("shortnessOfBreath")),
        chronic_cough=_yes(d.get("chronicCough")),
        wheezing=_yes(d.get("wheezing")),
        chest_tightness=_yes(d.get("chestTightness")),
        recent_infection=_yes(d.get("recentInfection")),
    )
