"""
Recommendation rules tests.
"""

from modules.lung.advice import recommendations
from modules.lung.engine import compute_risk
from modules.lung.questionnaire import normalize


def advise(answers):
    n = normalize(answers)
    result = compute_risk(n)
    return recommendations(result.score, result.breakdown, n)


def texts(recs):
    return " | ".join(r.text for r in recs)


class TestStatus:

    def test_healthy_status_first(self):
        recs = advise({"age": 30, "sleepHours": 8})
        assert recs[0].category == "Status"
        assert recs[0].text.startswith("Great work")

    def test_critical_status_is_urgent(self):
        recs = advise({
            "age": 90, "smoking": "Yes", "cigarettesPerDay": 40, "yearsSmoked": 50, "aqi": 400,
            "outdoorDuration": 10, "indoorAirQuality": "Poor", "sleepHours": 4, "medicalHistory": ["COPD"],
        })
        assert recs[0].category == "Urgent"
        assert "pulmonologist" in recs[0].text

    def test_padded_to_two(self):
        # exercising at AQI 90: no rule besides status fires
        recs = advise({"age": 30, "sleepHours": 8, "exerciseFrequency": "Daily", "aqi": 90})
        assert len(recs) == 2
        assert recs[1].text.startswith("Continue your healthy habits")


class TestRules:

    def test_smoker_and_vaper(self):
        recs = advise({"smoking": "Yes", "cigarettesPerDay": 12, "vapingStatus": "current"})
        joined = texts(recs)
        assert "Quit smoking - at 12 cigs/day" in joined
        assert "Stop vaping" in joined

    def test_secondhand_only_for_non_smokers(self):
        assert "secondhand" in texts(advise({"secondhandSmoke": "Yes"}))
        assert "Avoid secondhand" not in texts(advise({"smoking": "Yes", "secondhandSmoke": "Yes"}))

    def test_hazardous_aqi(self):
        assert "(hazardous)" in texts(advise({"aqi": 200}))

    def test_unhealthy_aqi_without_mask(self):
        assert "consider wearing a mask" in texts(advise({"aqi": 120}))
        assert "consider wearing a mask" not in texts(advise({"aqi": 120, "maskType": "N95"}))

    def test_long_outdoor_exposure(self):
        assert "8h outdoors at AQI 120" in texts(advise({"aqi": 120, "outdoorDuration": 8}))

    def test_indoor_and_occupational(self):
        joined = texts(advise({"indoorAirQuality": "Poor", "occupationalExposure": "High"}))
        assert "air purifier" in joined
        assert "respiratory PPE" in joined

    def test_sleep(self):
        assert "You sleep 5h" in texts(advise({"sleepHours": 5}))
        assert "10h sleep is elevated" in texts(advise({"sleepHours": 10}))

    def test_conditions(self):
        joined = texts(advise({"medicalHistory": ["COPD", "Asthma", "TB"]}))
        assert "COPD management" in joined
        assert "rescue inhaler" in joined
        assert "TB treatment" in joined

    def test_exercise(self):
        assert "Start light cardiovascular exercise" in texts(advise({}))
        assert "keep up your routine" in texts(advise({"exerciseFrequency": "3-5x", "aqi": 40}))

    def test_environment_driver(self):
        assert "top risk driver" in texts(advise({"aqi": 200, "outdoorDuration": 12}))

    def test_behavioral_driver_for_non_smoker(self):
        # secondhand (4) alone stays below 10, so the domain-driven line is absent
        assert "Behavioral factors" not in texts(advise({"secondhandSmoke": "Yes"}))
