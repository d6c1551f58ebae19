"""Lung health risk engine.

Five independent domain calculators turn a normalized questionnaire into
"damage" points; the aggregator subtracts their sum from 100.

    Biological 15 | Behavioral 25 | Environmental 35 | Sleep 10 | Disease 15

Everything here is pure: no I/O, no shared state, no exceptions.
"""
import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Union

from .questionnaire import (
    AirQuality,
    Exposure,
    ExerciseFrequency,
    ExerciseLocation,
    Intensity,
    MaskType,
    QuestionnaireInput,
    Sex,
    Ventilation,
    normalize,
)

logger = logging.getLogger(__name__)

BIOLOGICAL_MAX = 15.0
BEHAVIORAL_MAX = 25.0
ENVIRONMENTAL_MAX = 35.0
SLEEP_MAX = 10.0
DISEASE_MAX = 15.0
DAMAGE_MAX = 100.0

DOMAIN_MAX: Dict[str, float] = {
    "biological": BIOLOGICAL_MAX,
    "behavioral": BEHAVIORAL_MAX,
    "environmental": ENVIRONMENTAL_MAX,
    "sleep": SLEEP_MAX,
    "disease": DISEASE_MAX,
}

# environmental constants
OCCUPATIONAL_MULT = {Exposure.HIGH: 1.6, Exposure.MODERATE: 1.3, Exposure.NONE: 1.0}
MASK_MULT = {MaskType.N95: 0.5, MaskType.SURGICAL: 0.8, MaskType.CLOTH: 0.9, MaskType.NONE: 1.0}
EXERCISE_HOURS = {
    ExerciseFrequency.DAILY: 1.0,
    ExerciseFrequency.FREQUENT: 0.7,
    ExerciseFrequency.OCCASIONAL: 0.5,
}
VENTILATION_MULT = {Intensity.LIGHT: 2, Intensity.MODERATE: 4, Intensity.VIGOROUS: 8}
AEROBIC_OFFSET = {Intensity.LIGHT: 1, Intensity.MODERATE: 3, Intensity.VIGOROUS: 5}
FILTERED_GYM_CONCENTRATION = 20
STALE_GYM_FLOOR = 50
ENV_DIVISOR = 2.2
INDOOR_AIR_POINTS = {AirQuality.POOR: 12, AirQuality.MODERATE: 6, AirQuality.GOOD: 0}

# breath-hold failure thresholds (seconds)
BREATH_HOLD_THRESHOLD = {Sex.FEMALE: 20, Sex.MALE: 25, Sex.OTHER: 25}


class RiskLabel(str, Enum):
    OPTIMAL = "Optimal"
    GOOD = "Good"
    MODERATE = "Moderate"
    HIGH_RISK = "High Risk"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class DomainScores:
    """Per-domain damage after each domain's own clamp, unrounded."""

    biological: float
    behavioral: float
    environmental: float
    sleep: float
    disease: float

    @property
    def total(self) -> float:
        return self.biological + self.behavioral + self.environmental + self.sleep + self.disease


@dataclass(frozen=True)
class Breakdown:
    biological: float
    behavioral: float
    environmental: float
    sleep: float
    disease: float
    total_damage: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "biological": self.biological,
            "behavioral": self.behavioral,
            "environmental": self.environmental,
            "sleep": self.sleep,
            "disease": self.disease,
            "totalDamage": self.total_damage,
        }


@dataclass(frozen=True)
class RiskResult:
    score: int
    label: RiskLabel
    breakdown: Breakdown

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "label": self.label.value, "breakdown": self.breakdown.to_dict()}


# ---------- helpers ----------
def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def round_half_up(x: float, places: int = 0) -> float:
    # Decimal(x) is the exact binary value, so ties are real ties.
    q = Decimal(1).scaleb(-places)
    return float(Decimal(x).quantize(q, rounding=ROUND_HALF_UP))


def risk_label(score: float) -> RiskLabel:
    if score >= 90:
        return RiskLabel.OPTIMAL
    if score >= 75:
        return RiskLabel.GOOD
    if score >= 50:
        return RiskLabel.MODERATE
    if score >= 25:
        return RiskLabel.HIGH_RISK
    return RiskLabel.CRITICAL


# ---------- domain 1: biological vulnerability ----------
def biological(q: QuestionnaireInput) -> float:
    raw = 0.0
    if q.age > 40:
        raw += min(9, (q.age - 40) * 0.19)

    # U-shaped BMI; 25-30 is mildly protective
    bmi = q.bmi
    if bmi < 18.5:
        raw += 4
    elif bmi > 35:
        raw += 4
    elif 25 <= bmi <= 30:
        raw -= 1

    if q.family_history:
        raw += 2
    return _clamp(raw, 0, BIOLOGICAL_MAX)


# ---------- domain 2: behavioral ----------
def pack_years(q: QuestionnaireInput) -> float:
    return (q.cigarettes_per_day / 20) * q.years_smoked


def behavioral(q: QuestionnaireInput) -> float:
    raw = 0.0
    py = pack_years(q)
    if py > 0:
        raw += 6.5 * math.log(py + 1)
    if q.is_vaper:
        raw += 4
    if q.is_smoker and q.is_vaper:
        raw *= 1.5
    # active smokers already carry the exposure
    if q.secondhand_smoke and not q.is_smoker:
        raw += 4
    return _clamp(raw, 0, BEHAVIORAL_MAX)


# ---------- domain 3: environmental ----------
def exercise_concentration(q: QuestionnaireInput) -> float:
    if q.exercise_location is ExerciseLocation.INDOOR_GYM:
        if q.gym_ventilation is Ventilation.GOOD:
            return FILTERED_GYM_CONCENTRATION
        return max(q.aqi * 0.9, STALE_GYM_FLOOR)
    return q.aqi


def active_net(q: QuestionnaireInput) -> float:
    """Inhaled exercise dose minus aerobic benefit; negative means net benefit."""
    if q.exercise_frequency is ExerciseFrequency.NONE:
        return 0.0
    duration = EXERCISE_HOURS[q.exercise_frequency]
    inhaled = duration * VENTILATION_MULT[q.exercise_intensity] * (exercise_concentration(q) / 50)
    return inhaled - AEROBIC_OFFSET[q.exercise_intensity]


def passive_dose(q: QuestionnaireInput) -> float:
    passive = q.outdoor_hours * (q.aqi / 50)
    passive *= OCCUPATIONAL_MULT[q.occupational]
    passive *= MASK_MULT[q.mask]
    return passive


def environmental(q: QuestionnaireInput) -> float:
    raw = (passive_dose(q) + active_net(q)) / ENV_DIVISOR
    raw += INDOOR_AIR_POINTS[q.indoor_air]
    # upper bound only: exercise benefit may push this domain below zero
    return min(raw, ENVIRONMENTAL_MAX)


# ---------- domain 4: sleep ----------
def sleep(q: QuestionnaireInput) -> float:
    t = q.sleep_hours
    if t < 5:
        raw = 10.0
    elif t < 6:
        raw = 7.0
    elif t < 7:
        raw = 3.0
    elif t > 9:
        raw = 3.0
    else:
        raw = 0.0
    if (q.has_copd or q.has_asthma) and raw > 0:
        raw *= 1.3
    return _clamp(raw, 0, SLEEP_MAX)


# ---------- domain 5: disease & symptoms (DSSL) ----------
def disease(q: QuestionnaireInput) -> float:
    raw = 0.0
    if q.has_copd:
        raw += 10
    elif q.has_asthma:
        raw += 7
    elif q.has_tb:
        raw += 8

    # symptoms implied by a diagnosis are not counted twice
    suppress_dyspnea = q.has_copd or q.has_asthma
    suppress_cough = q.has_copd or q.has_tb
    suppress_wheeze = q.has_asthma
    suppress_tightness = q.has_asthma

    if q.shortness_of_breath and not suppress_dyspnea:
        raw += 4
    if q.chronic_cough and not suppress_cough:
        raw += 3
    if q.wheezing and not suppress_wheeze:
        raw += 3
    if q.chest_tightness and not suppress_tightness:
        raw += 3
    if q.recent_infection:
        raw += 5

    threshold = BREATH_HOLD_THRESHOLD[q.sex]
    if 0 < q.breath_hold_seconds < threshold:
        raw += 3
    return _clamp(raw, 0, DISEASE_MAX)


# ---------- aggregator ----------
def evaluate_domains(q: QuestionnaireInput) -> DomainScores:
    return DomainScores(
        biological=biological(q),
        behavioral=behavioral(q),
        environmental=environmental(q),
        sleep=sleep(q),
        disease=disease(q),
    )


def compute_risk(data: Union[QuestionnaireInput, Mapping[str, Any], None]) -> RiskResult:
    """Score a questionnaire. Accepts raw form data or a normalized record; never raises."""
    q = normalize(data)
    domains = evaluate_domains(q)

    total_damage = min(domains.total, DAMAGE_MAX)
    score = int(_clamp(round_half_up(100 - total_damage), 0, 100))

    result = RiskResult(
        score=score,
        label=risk_label(score),
        breakdown=Breakdown(
            biological=round_half_up(domains.biological, 1),
            behavioral=round_half_up(domains.behavioral, 1),
            environmental=round_half_up(domains.environmental, 1),
            sleep=round_half_up(domains.sleep, 1),
            disease=round_half_up(domains.disease, 1),
            total_damage=round_half_up(total_damage, 1),
        ),
    )
    logger.debug("lung score %s (%s), damage %.2f", result.score, result.label.value, total_damage)
    return result
