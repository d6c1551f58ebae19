from dataclasses import dataclass
from typing import List

from .engine import Breakdown
from .questionnaire import (
    AirQuality,
    Exposure,
    ExerciseFrequency,
    MaskType,
    QuestionnaireInput,
)


@dataclass(frozen=True)
class Recommendation:
    text: str
    category: str  # Status | Urgent | Protection | Environment | Lifestyle | Medical


def _fmt(x: float) -> str:
    return f"{x:g}"


def recommendations(score: int, breakdown: Breakdown, q: QuestionnaireInput) -> List[Recommendation]:
    recs: List[Recommendation] = []

    def add(text: str, category: str) -> None:
        recs.append(Recommendation(text, category))

    # status first
    if score >= 75:
        add("Great work! Your lungs are in healthy condition - maintain your current habits", "Status")
    elif score >= 50:
        add("Your lung health needs attention - monitor regularly and address key risk factors below", "Status")
    else:
        add("Consult a pulmonologist for a detailed checkup - your risk level is significant", "Urgent")

    # behavioral
    if q.is_smoker:
        add(f"Quit smoking - at {_fmt(q.cigarettes_per_day)} cigs/day, this is your most impactful reversible factor", "Urgent")
    if q.is_vaper:
        add("Stop vaping - e-cigarette aerosols cause airway inflammation and EVALI risk", "Urgent")
    if q.secondhand_smoke and not q.is_smoker:
        add("Avoid secondhand smoke exposure - it contributes to passive lung damage", "Protection")

    # environmental
    aqi = _fmt(q.aqi)
    if q.aqi > 150:
        add(f"Your area AQI is {aqi} (hazardous) - always wear an N95 mask outdoors", "Protection")
    elif q.aqi > 100 and q.mask is MaskType.NONE:
        add(f"AQI {aqi} is unhealthy - consider wearing a mask on high pollution days", "Protection")
    if q.outdoor_hours > 6 and q.aqi > 100:
        add(f"{_fmt(q.outdoor_hours)}h outdoors at AQI {aqi} is very high exposure - reduce outdoor time during peak hours", "Protection")
    if q.indoor_air is AirQuality.POOR:
        add("Install an air purifier at home - poor indoor air causes 3.8M deaths/year (WHO)", "Environment")
    if q.occupational is Exposure.HIGH:
        add("Use respiratory PPE at work - high occupational dust/fume exposure adds significant risk", "Protection")

    # sleep
    if q.sleep_hours < 6:
        add(f"You sleep {_fmt(q.sleep_hours)}h - aim for 7-8h. Short sleep increases respiratory infection risk by 4.2x", "Lifestyle")
    elif q.sleep_hours > 9:
        add(f"{_fmt(q.sleep_hours)}h sleep is elevated - long sleep is linked to restrictive lung defects (OR 1.8)", "Lifestyle")

    # conditions
    if q.has_copd:
        add("Schedule regular pulmonologist visits for COPD management and spirometry monitoring", "Medical")
    if q.has_asthma:
        add("Keep rescue inhaler accessible and track your asthma triggers consistently", "Medical")
    if q.has_tb:
        add("Complete TB treatment protocol fully - watch for night sweats or weight loss (reactivation signs)", "Medical")

    # exercise
    if q.exercise_frequency is ExerciseFrequency.NONE:
        add("Start light cardiovascular exercise - even 20 min of walking improves lung capacity", "Lifestyle")
    elif q.aqi <= 80:
        add("Your air quality supports outdoor exercise - keep up your routine for aerobic benefit", "Lifestyle")

    # domain-driven
    if breakdown.environmental > 15:
        add("Environmental exposure is your top risk driver - prioritize air quality improvements", "Environment")
    if breakdown.behavioral > 10 and not q.is_smoker and not q.is_vaper:
        add("Behavioral factors are impacting your score - review secondhand smoke and lifestyle habits", "Lifestyle")

    if len(recs) < 2:
        add("Continue your healthy habits and reassess periodically", "Lifestyle")
    return recs
