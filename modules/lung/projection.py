"""10-year FEV1 projection: current habits vs. corrected habits.

A simple linear-decline model seeded from the lung score; it is a report
visual, not part of the score.
"""
from dataclasses import dataclass
from typing import List

from .engine import round_half_up
from .questionnaire import QuestionnaireInput

YEARS = 10
AGING_DECLINE_ML = 30.0
SMOKING_ML_PER_10_CIGS = 15.0
SHORT_SLEEP_ML = 5.0
HIGH_AQI_ML = 12.0
EXERCISE_BONUS_ML = 8.0
FEV1_FLOOR_L = 0.3


@dataclass(frozen=True)
class Interventions:
    quit_smoking: bool = True
    wear_n95: bool = True
    optimize_sleep: bool = True
    exercise: bool = True


@dataclass(frozen=True)
class Correction:
    key: str
    label: str
    description: str
    applicable: bool


@dataclass(frozen=True)
class ProjectionPoint:
    year: int
    baseline: float
    optimized: float


@dataclass(frozen=True)
class Projection:
    baseline_fev1: float
    points: List[ProjectionPoint]

    @property
    def saved_ml(self) -> float:
        last = self.points[-1]
        return max((last.optimized - last.baseline) * 1000, 0.0)

    @property
    def preserved_pct(self) -> float:
        if self.baseline_fev1 <= 0:
            return 0.0
        return self.saved_ml / (self.baseline_fev1 * 1000) * 100


def normal_fev1(age: float) -> float:
    # ~4.0 L at 25, minus 30 mL/year afterwards
    return max(4.0 - max(age - 25, 0) * 0.030, 1.5)


def decline_penalties(q: QuestionnaireInput):
    smoking = (q.cigarettes_per_day / 10) * SMOKING_ML_PER_10_CIGS if q.cigarettes_per_day > 0 else 0.0
    sleep = SHORT_SLEEP_ML if q.sleep_hours < 7 else 0.0
    aqi = HIGH_AQI_ML if q.aqi > 100 else 0.0
    return smoking, sleep, aqi


def project(q: QuestionnaireInput, score: int, fixes: Interventions = Interventions()) -> Projection:
    baseline_fev1 = normal_fev1(q.age) * (score / 100)
    smoking, sleep, aqi = decline_penalties(q)

    optimized_rate = AGING_DECLINE_ML
    if not fixes.quit_smoking:
        optimized_rate += smoking
    if not fixes.wear_n95:
        optimized_rate += aqi
    if not fixes.optimize_sleep:
        optimized_rate += sleep
    if fixes.exercise:
        optimized_rate = max(optimized_rate - EXERCISE_BONUS_ML, 0)
    baseline_rate = AGING_DECLINE_ML + smoking + sleep + aqi

    points = []
    for year in range(YEARS + 1):
        base = max(baseline_fev1 - baseline_rate * year / 1000, FEV1_FLOOR_L)
        opt = max(baseline_fev1 - optimized_rate * year / 1000, FEV1_FLOOR_L)
        points.append(ProjectionPoint(year, round_half_up(base, 3), round_half_up(opt, 3)))
    return Projection(baseline_fev1=baseline_fev1, points=points)


def corrections(q: QuestionnaireInput) -> List[Correction]:
    return [
        Correction("quit_smoking", "Quit Smoking", "Removes smoking-related FEV1 decline", q.cigarettes_per_day > 0),
        Correction("wear_n95", "Wear N95 Mask", "Reduces particulate exposure by ~95%", q.aqi > 100),
        Correction("optimize_sleep", "Optimize Sleep (7-8 hrs)", "Reduces inflammatory markers", q.sleep_hours < 7),
        Correction("exercise", "Aerobic Exercise", "Recovers ~8 mL/year lung capacity", True),
    ]
