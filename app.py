import logging
import streamlit as st
from core.logs import setup_logging
from core.registry import load_config, load_enabled_modules
from core.types import PatientData
from core.report import build_pdf

st.set_page_config(page_title="Lung Health Analyzer", layout="wide")
st.title("Lung Health Analyzer")

# 1) Config + logging
cfg = load_config()
setup_logging(cfg)
logger = logging.getLogger("app")

# 2) Patient data shared across modules
base = PatientData()

# 3) Load enabled modules
modules = load_enabled_modules(cfg)

all_rows = []
for mod in modules:
    with st.expander(mod.title, expanded=True):
        base = mod.inputs(base)
        results = mod.compute(base)
        mod.render(results)
        all_rows += mod.to_pdf(results)

logger.debug("collected %d report rows from %d modules", len(all_rows), len(modules))

# 4) Consolidated PDF
pdf_bytes = build_pdf(patient=base, rows=all_rows)
st.download_button("Download PDF Report", data=pdf_bytes, file_name="lung_health_report.pdf", mime="application/pdf")

st.caption("Disclaimer: Screening & education only. Not medical advice.")
