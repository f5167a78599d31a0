import logging

import streamlit as st
import streamlit.components.v1 as components

import config
from datasets import summarize
from errors import DataLoadFailure
from force_layout import CancellationToken, FrameRecorder
from legend_filter import LegendClick, LegendFilter, OutsideClick
from logging_config import level_from_name, setup_logging
from olympic_renderers import (
    build_first_time_simulation,
    build_sports_simulation,
    render_first_participation,
    render_gender_pies,
    render_paralympics,
    render_reveal_pie,
    render_sustainability_timeline,
)
from prompts import (
    FOOTER_TEXT,
    FRONT_PAGE_TEXT,
    FRONT_PAGE_TITLE,
    discussion_questions,
    explanation_for,
    has_gemini_key,
)
from renderer_selector import SECTIONS, load_section_records
from sketchy import build_scene_html, empty_scene, load_template

setup_logging(level_from_name(config.LOG_LEVEL))
logger = logging.getLogger("app")

st.set_page_config(page_title="Olympic Games Evolution", layout="wide")


# ---------- API key status ----------
if has_gemini_key():
    st.sidebar.success("Gemini API key loaded ✔")
else:
    st.sidebar.info("No GEMINI_API_KEY found, discussion questions come from the bundled list.")


try:
    TEMPLATE = load_template(config.TEMPLATE_PATH)
except OSError as e:
    st.error("Could not read rough_template.html")
    st.code(str(e))
    st.stop()


def embed(scene, extra_height: int = 20) -> None:
    html = build_scene_html(scene, TEMPLATE)
    components.html(html, height=int(scene.height) + extra_height, scrolling=True)


def explanation_panel(section, records) -> None:
    """Source link, discussion notes and, on demand, three questions for the group."""
    info = explanation_for(section.id)
    if info["source_url"]:
        st.markdown(f"Data source: [{info['source_label']}]({info['source_url']})")
    for note in info["notes"]:
        st.caption(note)

    key = f"questions-{section.id}"
    if st.button("Suggest discussion questions", key=f"ask-{section.id}"):
        summary = summarize(records[0]) if records else None
        st.session_state[key] = discussion_questions(section.id, section.title, summary)

    result = st.session_state.get(key)
    if result:
        for q in result["questions"]:
            st.markdown(f"- {q}")
        if result["source"] == "fallback":
            st.caption("(bundled questions)")


# ---------- Section bodies ----------

def show_first_time(schema, records) -> None:
    if "legend-first-time" not in st.session_state:
        st.session_state["legend-first-time"] = LegendFilter(
            schema["continents"], config.HIGHLIGHTED, config.DIMMED
        )
    legend: LegendFilter = st.session_state["legend-first-time"]

    cols = st.columns(len(schema["continents"]) + 2)
    for col, continent in zip(cols, schema["continents"]):
        label = config.CONTINENT_LABELS.get(continent, continent)
        if col.button(label, key=f"legend-btn-{continent}"):
            legend.handle(LegendClick(continent))
    # a click anywhere but a legend item
    if cols[-2].button("show all", key="legend-btn-all"):
        legend.handle(OutsideClick())
    play = cols[-1].button("▶ play", key="play-first-time", type="primary")

    frames = None
    if play:
        recorder = FrameRecorder(stride=config.FIRST_TIME_FRAME_STRIDE)
        token = CancellationToken()
        sim = build_first_time_simulation(schema, on_tick=recorder, token=token)
        with st.spinner("Placing countries..."):
            recorder.finish(sim.run())
        st.session_state["first-time-played"] = sim.position_map()
        frames = recorder.frames

    # later reruns (legend clicks) redraw the resting layout without replaying
    positions = st.session_state.get("first-time-played")
    played = positions is not None
    if not played:
        positions = build_first_time_simulation(schema).position_map()

    embed(render_first_participation(schema, legend, positions, frames, played=played))


def show_environment(schema, records) -> None:
    embed(render_sustainability_timeline(schema))


def show_gender(schema, records) -> None:
    if not st.session_state.get("gender-revealed"):
        st.markdown("Guess: what share of Olympic athletes were women?")
        embed(render_reveal_pie())
        if st.button("show", key="reveal-gender", type="primary"):
            st.session_state["gender-revealed"] = True
            st.rerun()
        return
    embed(render_gender_pies(schema))


def show_paralympics(schema, records) -> None:
    frames = None
    if "paralympics-layout" not in st.session_state:
        recorder = FrameRecorder(stride=config.PARA_FRAME_STRIDE)
        sim = build_sports_simulation(schema, on_tick=recorder)
        recorder.finish(sim.run())
        st.session_state["paralympics-layout"] = sim.position_map()
        frames = recorder.frames
    positions = st.session_state["paralympics-layout"]
    embed(render_paralympics(schema, positions, frames))


SECTION_VIEWS = {
    "first-time": show_first_time,
    "environment": show_environment,
    "gender": show_gender,
    "paralympics": show_paralympics,
}


# ---------- Front page ----------
st.markdown('<div id="home"></div>', unsafe_allow_html=True)
st.title(FRONT_PAGE_TITLE)

left, right = st.columns([3, 2])
with left:
    st.write(FRONT_PAGE_TEXT)
with right:
    st.subheader("Contents")
    for section in SECTIONS:
        st.markdown(f"[{section.title}]({section.anchor})")


# ---------- Charts ----------
for section in SECTIONS:
    st.markdown(f'<div id="{section.id}"></div>', unsafe_allow_html=True)
    st.divider()
    head, home = st.columns([12, 1])
    head.header(section.title)
    home.markdown("[⌂ home](#home)")

    try:
        records = load_section_records(section)
        schema = section.build_schema(*records)
    except DataLoadFailure as e:
        logger.warning("section %s not rendered: %s", section.id, e)
        st.info("This chart's data could not be loaded.")
        embed(empty_scene(600, 120, "no data"))
        continue

    if st.toggle("About this chart", key=f"info-{section.id}"):
        explanation_panel(section, records)

    SECTION_VIEWS[section.id](schema, records)


# ---------- Footer ----------
st.divider()
st.caption(FOOTER_TEXT)
