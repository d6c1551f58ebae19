import streamlit as st

PALETTE = {
    "low": "#2e7d32",
    "moderate": "#f9a825",
    "high": "#ef6c00",
    "critical": "#c62828",
    "info": "#455a64",
}

# risk label -> box severity
LABEL_SEVERITY = {
    "Optimal": "low",
    "Good": "low",
    "Moderate": "moderate",
    "High Risk": "high",
    "Critical": "critical",
}

def severity_for_label(label: str) -> str:
    return LABEL_SEVERITY.get(label, "info")

def color_box(text: str, level: str = "info"):
    col = PALETTE.get(level, PALETTE["info"])
    st.markdown(
        f"""
        <div style=\"background:{col};padding:12px;border-radius:8px;color:white;font-weight:600;margin-bottom:6px;\">{text}</div>
        """,
        unsafe_allow_html=True,
    )
