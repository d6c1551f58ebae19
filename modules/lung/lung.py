import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional
import streamlit as st
from core.types import PatientData, ResultItem
from core.utils import color_box, severity_for_label
from .advice import recommendations
from .aqi import AQIClient, AQILookupError, DEFAULT_BASE_URL, aqi_category
from .engine import DOMAIN_MAX, compute_risk
from .leaderboard import Submission, cooldown_remaining, leaderboard, member_stats
from .projection import corrections, project
from .questionnaire import normalize

logger = logging.getLogger(__name__)

id = "lung"
title = "Lung: Lung Health Score (0–100)"

DOMAIN_TITLES = {
    "biological": "Biological vulnerability",
    "behavioral": "Behavioral risk",
    "environmental": "Environmental load",
    "sleep": "Sleep recovery",
    "disease": "Disease & symptoms",
}

YES_NO = ["No", "Yes"]
SUBMISSIONS_KEY = "lung_submissions"

# [aqi] table of config.toml, set once by the registry
AQI_SETTINGS: Dict[str, Any] = {}


def configure(cfg: Dict[str, Any]) -> None:
    AQI_SETTINGS.clear()
    AQI_SETTINGS.update(cfg.get("aqi", {}))


# ---------- helpers ----------
def _num(label: str, key: str, default: float, lo: float, hi: float, step: float = 1.0, help: Optional[str] = None):
    return st.number_input(label, min_value=lo, max_value=hi, value=float(default), step=step, key=key, help=help)

def _pick(label: str, options: list[str], key: str, current: Optional[str] = None, help: Optional[str] = None) -> str:
    index = options.index(current) if current in options else 0
    return st.selectbox(label, options, index=index, key=key, help=help)

def _domain_severity(points: float, max_points: float) -> str:
    share = points / max_points if max_points else 0
    if share < 1 / 3:
        return "low"
    if share < 2 / 3:
        return "moderate"
    return "high"

def _member(name: Optional[str]) -> str:
    return (name or "").strip() or "me"

def _fetch_aqi(city: str) -> None:
    cfg = AQI_SETTINGS
    api_key = os.environ.get(cfg.get("api_key_env", "OPENWEATHER_API_KEY"))
    try:
        with AQIClient(api_key, base_url=cfg.get("base_url", DEFAULT_BASE_URL), timeout=cfg.get("timeout", 10.0)) as client:
            aqi = client.lookup(city)
    except AQILookupError as e:
        logger.warning("AQI lookup for %r failed: %s", city, e)
        st.error("Failed to fetch AQI.")
        return
    if aqi is None:
        st.warning(f"No air-quality data found for '{city}'.")
        return
    st.session_state["lung_aqi"] = float(aqi)
    st.success(f"AQI for {city}: {aqi} ({aqi_category(aqi)})")

# ---------- UI inputs ----------
def inputs(data: PatientData) -> PatientData:
    a = data.answers

    st.markdown("**Personal & medical**")
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        name = st.text_input("Name", value=data.name or "", key="lung_name")
        sex = _pick("Biological sex", ["Male", "Female", "Other"], "lung_sex", data.sex)
    with c2:
        age = _num("Age (years)", "lung_age", data.age or 30, 10.0, 120.0)
        height = _num("Height (cm)", "lung_height", a.get("height", 170), 50.0, 250.0, help="Used to calculate BMI")
    with c3:
        weight = _num("Weight (kg)", "lung_weight", a.get("weight", 70), 20.0, 300.0)
        family = _pick("Family history of lung disease?", YES_NO, "lung_family")
    with c4:
        history = st.multiselect("Diagnosed conditions", ["Asthma", "TB", "COPD"], key="lung_history")
        onset = None
        if "Asthma" in history:
            onset = _pick("Asthma onset", ["childhood", "late"], "lung_onset", help="Childhood (<10 yrs) or late onset")

    st.markdown("**Environment**")
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        city = st.text_input("City (optional, fills AQI)", key="lung_city")
        if st.button("Fetch AQI", key="lung_fetch_aqi") and city.strip():
            _fetch_aqi(city.strip())
        st.session_state.setdefault("lung_aqi", 50.0)
        aqi = st.number_input("AQI level", min_value=0.0, max_value=500.0, step=1.0, key="lung_aqi", help="0-500 scale")
        st.caption(aqi_category(aqi))
    with c2:
        outdoor = _num("Outdoor exposure (h/day)", "lung_outdoor", 2, 0.0, 24.0, 0.5)
        occupational = _pick("Occupational exposure", ["None", "Moderate", "High"], "lung_occ", help="Dust, fumes, or chemicals")
    with c3:
        indoor = _pick("Indoor air quality", ["Good", "Moderate", "Poor"], "lung_indoor")
        mask = _pick("Mask usage", ["None", "Cloth", "Surgical", "N95"], "lung_mask")
    with c4:
        sleep_h = _num("Average sleep (h/night)", "lung_sleep", 7, 0.0, 24.0, 0.5, help="7-8h is optimal")

    st.markdown("**Behavior**")
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        smoking = _pick("Current smoker", YES_NO, "lung_smoking")
        vaping = _pick("Vaping status", ["never", "current"], "lung_vaping")
    with c2:
        cigs = _num("Cigarettes / day", "lung_cigs", 0, 0.0, 100.0) if smoking == "Yes" else 0.0
        years = _num("Years smoked", "lung_years", 0, 0.0, 120.0) if smoking == "Yes" else 0.0
        secondhand = _pick("Secondhand smoke?", YES_NO, "lung_secondhand")
    with c3:
        freq = _pick("Exercise frequency", ["None", "1-2x", "3-5x", "Daily"], "lung_freq")
        intensity = location = ventilation = None
        if freq != "None":
            intensity = _pick("Exercise intensity", ["light", "moderate", "vigorous"], "lung_intensity", help="Affects ventilation rate")
    with c4:
        if freq != "None":
            location = _pick("Exercise location", ["outdoor", "indoor_gym"], "lung_location")
            if location == "indoor_gym":
                ventilation = _pick("Gym ventilation", ["good", "poor"], "lung_vent", help="Poor ventilation = resuspended dust")

    st.markdown("**Symptoms & breath-hold test**")
    c1, c2, c3 = st.columns(3)
    with c1:
        dyspnea = _pick("Shortness of breath", YES_NO, "lung_sob")
        cough = _pick("Chronic cough", YES_NO, "lung_cough")
    with c2:
        wheeze = _pick("Wheezing", YES_NO, "lung_wheeze")
        tight = _pick("Chest tightness", YES_NO, "lung_tight")
    with c3:
        infection = _pick("Respiratory infection (last 4 weeks)", YES_NO, "lung_infection")
        hold = _num("Breath-hold (seconds, 0 = skip)", "lung_hold", 0, 0.0, 300.0)

    data.name = name or data.name
    data.sex = sex
    data.age = age
    a.update({
        "sex": sex, "age": age, "height": height, "weight": weight,
        "familyHistory": family, "medicalHistory": history, "asthmaOnset": onset,
        "aqi": aqi, "outdoorDuration": outdoor, "occupationalExposure": occupational,
        "indoorAirQuality": indoor, "maskType": mask, "sleepHours": sleep_h,
        "smoking": smoking, "vapingStatus": vaping, "cigarettesPerDay": cigs, "yearsSmoked": years,
        "secondhandSmoke": secondhand, "exerciseFrequency": freq, "exerciseIntensity": intensity,
        "exerciseLocation": location, "gymVentilation": ventilation,
        "shortnessOfBreath": dyspnea, "chronicCough": cough, "wheezing": wheeze,
        "chestTightness": tight, "recentInfection": infection, "breathHoldSeconds": hold,
    })
    data.history = list(st.session_state.get(SUBMISSIONS_KEY, []))
    return data

# ---------- compute ----------
def compute(data: PatientData) -> List[ResultItem]:
    q = normalize(data.answers)
    res = compute_risk(q)
    b = res.breakdown.to_dict()

    results: List[ResultItem] = [
        ResultItem("Lung Health Score (0–100)", res.score, res.label.value, severity_for_label(res.label.value)),
    ]
    for key, max_points in DOMAIN_MAX.items():
        results.append(ResultItem(
            f"{DOMAIN_TITLES[key]} (max {max_points:g})",
            b[key],
            f"{b[key]:g} of {max_points:g} damage points",
            _domain_severity(b[key], max_points),
        ))
    results.append(ResultItem("Total damage", b["totalDamage"], "Points subtracted from 100", "info"))

    proj = project(q, res.score)
    last = proj.points[-1]
    results.append(ResultItem("Baseline FEV1 (L)", round(proj.baseline_fev1, 2), "Estimated from age and lung score", "info"))
    results.append(ResultItem(
        "FEV1 at year 10 (L)", last.baseline,
        f"Current habits; {last.optimized:.2f} L with all corrections applied",
        "high" if last.baseline < proj.baseline_fev1 * 0.9 else "info",
    ))
    if proj.saved_ml > 0:
        results.append(ResultItem(
            "Capacity saved (mL)", round(proj.saved_ml),
            f"{proj.preserved_pct:.1f}% preserved over 10 years with all corrections", "low",
        ))
    results += progress_items(data.history, _member(data.name), datetime.now())

    for c in corrections(q):
        if c.applicable:
            results.append(ResultItem(f"Correction: {c.label}", None, c.description, "info"))

    for rec in recommendations(res.score, res.breakdown, q):
        results.append(ResultItem(f"Advice ({rec.category})", None, rec.text, "info"))
    return results

def progress_items(history: List[Submission], user_id: str, now: datetime) -> List[ResultItem]:
    """Saved-score progress for one member; empty until a score has been saved."""
    stats = member_stats(user_id, history, now.date())
    if not stats.count:
        return []
    items = [ResultItem("Saved scores", stats.count, f"First {stats.first_score}, latest {stats.latest_score}", "info")]
    if stats.improvement_pct is not None:
        items.append(ResultItem(
            "Improvement (%)", stats.improvement_pct, "Share of the gap to 100 closed since the first saved score",
            "low" if stats.improvement_pct >= 0 else "moderate",
        ))
    items.append(ResultItem("Streak (days)", stats.streak, "Consecutive days with a saved score", "info"))
    last = max(s.submitted_at for s in history if s.user_id == user_id)
    wait = cooldown_remaining(last, now)
    if wait:
        items.append(ResultItem("Next save in (h)", round(wait.total_seconds() / 3600, 1), "One saved score per 24 hours", "info"))
    return items

# ---------- render ----------
def render(results: List[ResultItem]) -> None:
    st.subheader("Results")
    for x in results:
        if x.value is None:
            color_box(f"{x.metric} • {x.interpretation}", level=x.severity)
        else:
            color_box(f"{x.metric}: {x.value} • {x.interpretation}", level=x.severity)
    _save_controls(results)

def _save_controls(results: List[ResultItem]) -> None:
    if not results or results[0].value is None:
        return
    subs = st.session_state.setdefault(SUBMISSIONS_KEY, [])
    user = _member(st.session_state.get("lung_name"))
    now = datetime.now()
    last = max((s.submitted_at for s in subs if s.user_id == user), default=None)
    wait = cooldown_remaining(last, now)
    if st.button("Save score to progress", key="lung_save", disabled=bool(wait)):
        subs.append(Submission(user, int(results[0].value), now))
        logger.info("saved lung score %s for %s", results[0].value, user)
        st.rerun()
    if wait:
        st.caption(f"Next save available in {wait.total_seconds() / 3600:.1f} h")

    board = leaderboard(subs, now.date())
    if len(board) > 1:
        st.markdown("**Progress leaderboard**")
        st.table([
            {
                "Member": m.user_id,
                "Saved": m.count,
                "Improvement (%)": "—" if m.improvement_pct is None else m.improvement_pct,
                "Streak (days)": m.streak,
            }
            for m in board
        ])

# ---------- pdf rows ----------
def to_pdf(results: List[ResultItem]) -> List[list[str]]:
    rows = []
    for x in results:
        if x.metric:
            rows.append([x.metric, "—" if x.value is None else str(x.value), x.interpretation])
    return rows
