"""
CV Portfolio – Streamlit frontend.
No business logic in layout; extraction and publishing live in the pipeline and portfolio services.
"""

import json
from typing import Optional

import streamlit as st

from cv_portfolio.config import AVAILABLE_THEMES, DEFAULT_THEME, OPENAI_API_KEY, SKILL_CATEGORIES
from cv_portfolio.cv_pipeline.cv_extractor import run_cv_pipeline_sync, save_upload
from cv_portfolio.errors import CVPortfolioError, RecoveryFailure
from cv_portfolio.portfolio.publisher import PortfolioPublisher
from cv_portfolio.schemas.cv_record import CVExtraction, CVRecord
from cv_portfolio.schemas.portfolio import PublishResult
from cv_portfolio.utils.helpers import run_sync

ACCEPTED_TYPES = ["pdf", "docx", "txt"]


def _extract(file_bytes: bytes, filename: str) -> CVExtraction:
    path = save_upload(file_bytes, filename)
    return run_cv_pipeline_sync(path, filename)


def _publish(record: CVRecord, theme: str) -> PublishResult:
    return run_sync(PortfolioPublisher().publish(record, theme))


def _render_record(record: CVRecord) -> None:
    st.markdown(f"### {record.name or 'Unnamed'}")
    if record.position:
        st.caption(f"**{record.position}** · {record.experience_years or '—'} years")
    if record.professional_summary:
        st.markdown(record.professional_summary)

    contact = record.contact
    st.caption(f"**Email:** {contact.email or '—'} · **Phone:** {contact.phone or '—'} · **Location:** {contact.location or '—'}")

    with st.expander("Skills by category", expanded=True):
        for category in SKILL_CATEGORIES:
            items = record.skills.get(category) or []
            if items:
                st.markdown(f"**{category}:** " + " ".join(f"`{s}`" for s in items))

    if record.experience:
        with st.expander("Experience"):
            for job in record.experience:
                st.markdown(f"**{job.role or '—'}** @ {job.company or '—'} ({job.start_date} – {job.end_date})")
                for line in job.description:
                    st.markdown(f"- {line}")

    if record.projects:
        with st.expander("Projects"):
            for project in record.projects:
                st.markdown(f"**{project.title}** · *{project.tech}*")
                if project.description:
                    st.caption(project.description)


def render_layout() -> None:
    """Streamlit page layout."""
    st.set_page_config(page_title="CV Portfolio", layout="wide")
    st.title("CV Portfolio")
    st.markdown("*Upload a CV, review the extracted data, publish a portfolio site.*")
    st.divider()

    if "extraction" not in st.session_state:
        st.session_state["extraction"] = None
    if "error" not in st.session_state:
        st.session_state["error"] = None
    if "raw" not in st.session_state:
        st.session_state["raw"] = ""
    if "published" not in st.session_state:
        st.session_state["published"] = None

    # ----- Upload section -----
    uploaded = st.file_uploader("Upload CV", type=ACCEPTED_TYPES, key="cv_file")
    extract_clicked = st.button("Extract", type="primary", key="extract_btn", disabled=uploaded is None)

    if extract_clicked and uploaded is not None:
        st.session_state["published"] = None
        st.session_state["raw"] = ""
        if not OPENAI_API_KEY:
            st.session_state["error"] = "OPENAI_API_KEY is not set. Add it to your .env file."
            st.session_state["extraction"] = None
        else:
            with st.spinner("Extracting text and parsing the CV…"):
                try:
                    st.session_state["extraction"] = _extract(uploaded.getvalue(), uploaded.name)
                    st.session_state["error"] = None
                except RecoveryFailure as e:
                    st.session_state["error"] = f"The model answer could not be parsed: {e.message}"
                    st.session_state["raw"] = e.raw or ""
                    st.session_state["extraction"] = None
                except CVPortfolioError as e:
                    st.session_state["error"] = e.message
                    st.session_state["extraction"] = None

    if st.session_state.get("error"):
        st.error(st.session_state["error"])
        if st.session_state.get("raw"):
            with st.expander("Raw model output"):
                st.code(st.session_state["raw"])

    extraction: Optional[CVExtraction] = st.session_state.get("extraction")
    if extraction is None:
        if not st.session_state.get("error"):
            st.info("Upload a PDF, DOCX or TXT CV, then click **Extract**.")
        return

    # ----- Results section -----
    st.subheader("Extracted CV")
    _render_record(extraction.record)
    with st.expander("JSON"):
        st.code(json.dumps(extraction.record.model_dump(), indent=2, ensure_ascii=False), language="json")
    with st.expander("Raw model output"):
        st.code(extraction.raw)
    st.download_button(
        "Download JSON",
        data=extraction.record.model_dump_json(indent=2).encode("utf-8"),
        file_name="cv.json",
        mime="application/json",
        key="download_json",
    )

    # ----- Publish section -----
    st.divider()
    st.subheader("Publish portfolio")
    theme = st.selectbox(
        "Theme",
        options=AVAILABLE_THEMES,
        index=AVAILABLE_THEMES.index(DEFAULT_THEME) if DEFAULT_THEME in AVAILABLE_THEMES else 0,
        key="theme",
    )
    if st.button("Publish", key="publish_btn"):
        try:
            st.session_state["published"] = _publish(extraction.record, theme)
        except CVPortfolioError as e:
            st.error(e.message)

    published: Optional[PublishResult] = st.session_state.get("published")
    if published is not None:
        if published.is_existing:
            st.info("A portfolio already exists for this email; returning its link.")
        st.success(f"Portfolio: {published.url}")
        st.link_button("Open portfolio", url=published.url, type="secondary")


if __name__ == "__main__":
    render_layout()
