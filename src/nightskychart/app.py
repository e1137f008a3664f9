"""Night Sky Visibility Chart: Streamlit app plotting a target's altitude over one night."""

import datetime
import html
import logging

import streamlit as st
from dotenv import load_dotenv
from streamlit_js_eval import streamlit_js_eval

load_dotenv()

from nightskychart.compute import WINDOWS, GeocodingError, InputError, run  # noqa: E402
from nightskychart.config import Settings, configure_logging  # noqa: E402
from nightskychart.i18n import t  # noqa: E402
from nightskychart.models import QueryInput, VisibilitySummary  # noqa: E402
from nightskychart.renderers.plotly_chart import render_plotly_chart  # noqa: E402

_settings = Settings.from_env()
configure_logging(_settings)
logger = logging.getLogger("nightskychart.app")

# --- Language detection (browser-first via streamlit-js-eval) ---
# navigator.language is read once and cached in session_state.
# On the first run the JS call returns None; the rerun triggered by
# streamlit_js_eval fills it in.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ko" if _browser_lang.lower().startswith("ko") else "en"

_lang: str = st.session_state.get("lang", "en")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="✦",
    layout="centered",
)

# --- Session state initialization ---
if "visibility" not in st.session_state:
    st.session_state.visibility = None
if "error_msg" not in st.session_state:
    st.session_state.error_msg = None

st.markdown(
    """
    <style>
    /* Hide streamlit_js_eval invisible iframe */
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    [data-testid="stHeader"], [data-testid="stToolbar"] { display: none !important; }
    .nsc-header {
        background-color: #1f2937;
        color: #ffffff;
        padding: 1rem 1.2rem;
        border-radius: 6px;
        margin-bottom: 1.5rem;
    }
    .nsc-header h1 { font-size: 1.5rem; margin: 0; color: #ffffff; }
    .nsc-error { color: #ef4444; margin-top: 0.5rem; }
    .nsc-summary { color: #374151; font-size: 0.95rem; line-height: 1.6; }
    .nsc-footer {
        background-color: #1f2937;
        color: #ffffff;
        text-align: center;
        font-size: 0.8rem;
        padding: 0.8rem;
        border-radius: 6px;
        margin-top: 2rem;
    }
    [data-testid="stButton"] button {
        width: 100%;
        background-color: #3b82f6 !important;
        color: #ffffff !important;
        border: none !important;
        border-radius: 6px !important;
    }
    [data-testid="stButton"] button:hover { background-color: #2563eb !important; }
    </style>
    """,
    unsafe_allow_html=True,
)

st.markdown(
    f"<div class='nsc-header'><h1>{t('page_title', _lang)}</h1></div>",
    unsafe_allow_html=True,
)


def _summary_html(summary: VisibilitySummary, lang: str) -> str:
    lines = [
        t("summary", lang).format(
            max_alt=summary.max_altitude,
            max_time=summary.max_altitude_time,
            dark_hours=summary.dark_hours_above_horizon,
            moon=summary.moon_illumination,
        )
    ]
    if summary.best_dark_time:
        lines.append(t("summary_best", lang).format(best=summary.best_dark_time))
    else:
        lines.append(t("summary_never_dark", lang))
    return "<br>".join(html.escape(line) for line in lines)


# --- Input form ---
location = st.text_input(
    t("label_location", _lang), placeholder=t("placeholder_location", _lang)
)
date_val = st.date_input(t("label_date", _lang), value=None)
target = st.text_input(
    t("label_target", _lang), placeholder=t("placeholder_target", _lang)
)
object_name = st.text_input(
    t("label_object_name", _lang), placeholder=t("placeholder_object_name", _lang)
)
window = st.radio(
    t("label_window", _lang),
    options=list(WINDOWS),
    format_func=lambda w: t(f"window_{w}", _lang),
    horizontal=True,
)
submitted = st.button(t("btn_generate", _lang), key="generate_btn")

# --- Form submission handler ---
if submitted:
    st.session_state.error_msg = None
    query = QueryInput(
        location=location,
        date=date_val.strftime("%Y-%m-%d") if date_val else "",
        target=target,
        object_name=object_name,
    )
    with st.spinner(t("loading_compute", _lang)):
        try:
            st.session_state.visibility = run(
                query, lang=_lang, window=window, settings=_settings
            )
        except (InputError, GeocodingError) as e:
            logger.exception("Chart generation failed for %r", query)
            st.session_state.visibility = None
            st.session_state.error_msg = t("error_generate", _lang).format(
                error=html.escape(str(e))
            )

# --- Error message ---
if st.session_state.error_msg:
    st.markdown(
        f"<p class='nsc-error'>{st.session_state.error_msg}</p>",
        unsafe_allow_html=True,
    )

# --- Chart area ---
visibility = st.session_state.visibility
if visibility is not None and visibility.samples:
    fig = render_plotly_chart(visibility, lang=_lang)
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})
    st.markdown(
        f"<p class='nsc-summary'>{_summary_html(visibility.summary, _lang)}</p>",
        unsafe_allow_html=True,
    )

st.markdown(
    f"<div class='nsc-footer'>{t('footer', _lang).format(year=datetime.date.today().year)}</div>",
    unsafe_allow_html=True,
)
