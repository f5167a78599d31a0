import json
import logging
from textwrap import dedent
from typing import Dict, List, Optional

import google.generativeai as gen

import config

logger = logging.getLogger(__name__)


# ============================================================
# PAGE COPY
# ============================================================

FRONT_PAGE_TITLE = "Olympics & Paralympics Facts and Legacy"

FRONT_PAGE_TEXT = (
    'Materials for a collaborative project between the Universities of Tokyo and Tsukuba on the topic of '
    '"School Trip Around the Olympics Sports Museum". The questions and accompanying visualisations serve '
    "as cues for group discussions among the students before they visit the museum. They aim to bring up "
    "important topics around the history and goals of the Olympics and Paralympics, aimed at secondary "
    "school students in Japan."
)

FOOTER_TEXT = "Made by Dea Bankova. Pigeon mascot character by Fujiwara Kanna."

# section id -> data source and discussion notes shown in the info panel
EXPLANATIONS: Dict[str, Dict] = {
    "first-time": {
        "source_label": "Wikipedia",
        "source_url": "https://en.wikipedia.org/wiki/List_of_participating_nations_at_the_Summer_Olympic_Games",
        "notes": [
            "Use the source to research further. Why did certain countries enter the Olympics later than "
            "others? Which countries or regions participated as part of other entities previously; did they "
            "welcome the chance to compete in the Olympics independently?",
        ],
    },
    "environment": {
        "source_label": (
            'Maria Konstantaki (2018) "Environmental Sustainability of Olympic Games: a Narrative Review '
            'of Events, Initiatives, Impact and Hidden Aspects"'
        ),
        "source_url": (
            "https://www.researchgate.net/publication/340446440_ENVIRONMENTAL_SUSTAINABILITY_OF_OLYMPIC_GAMES_"
            "A_NARRATIVE_REVIEW_OF_EVENTS_INITIATIVES_IMPACT_AND_HIDDEN_ASPECTS"
        ),
        "notes": [
            "Timeline of major positive and negative environmental events, initiatives and outcomes at or "
            "related to the Olympics. Based on events described in the paper by Maria Konstantaki (2018).",
            "What do you think the positive and negative environmental impact of the Olympics is? Do you know "
            "about the recycling efforts for Tokyo 2020? Why do you think the medals were made from recycled "
            "electronics, for example? What would you do if you were organising the games to ensure they have "
            "a positive impact?",
        ],
    },
    "gender": {
        "source_label": "IOC",
        "source_url": (
            "https://stillmed.olympic.org/media/Document%20Library/OlympicOrg/Factsheets-Reference-Documents/"
            "Women-in-the-Olympic-Movement/Factsheet-Women-in-the-Olympic-Movement.pdf"
        ),
        "notes": ["*Female and male participation in the Summer Olympics; numbers are approximate"],
    },
    "paralympics": {
        "source_label": "International Paralympic Committee",
        "source_url": "https://www.paralympic.org/paralympic-games",
        "notes": ["Competitors per Summer Paralympic Games and the sports on the programme; numbers are approximate"],
    },
}

FALLBACK_QUESTIONS: Dict[str, List[str]] = {
    "first-time": [
        "Which continent had the most countries at the very first Games, and why might that be?",
        "Pick a country that joined after 1950. What was happening there at the time?",
        "Some countries took part as part of another nation before competing on their own. How might their athletes have felt?",
    ],
    "environment": [
        "Which negative event on the timeline surprised you the most?",
        "How could a host city reuse its venues after the Games are over?",
        "If you organised the next Games, what one change would you make for the environment?",
    ],
    "gender": [
        "In which decade did the share of female athletes grow the fastest?",
        "Why do you think almost no women competed in the first modern Olympics?",
        "What still needs to change for sport to be equal for everyone?",
    ],
    "paralympics": [
        "How has the number of Paralympic competitors changed since 1960?",
        "Why do you think new sports were added to the Paralympic programme over time?",
        "How can your school make sport more accessible for everyone?",
    ],
}

GENERIC_QUESTIONS = [
    "What is the most surprising thing this chart shows?",
    "What question would you ask a museum guide about it?",
    "How do you think this chart will look in twenty years?",
]


def has_gemini_key() -> bool:
    return bool(config.GEMINI_API_KEY)


def explanation_for(section_id: str) -> Dict:
    return EXPLANATIONS.get(section_id, {"source_label": "", "source_url": "", "notes": []})


# ============================================================
# PROMPT BUILDING
# ============================================================

def build_prompt(section_id: str, title: str, data_summary: Optional[str]) -> str:
    """
    Gemini only writes discussion questions. The charts are built locally
    from the bundled data, never from model output.
    """
    table_block = data_summary.strip() if data_summary else "[none]"
    notes = " ".join(explanation_for(section_id)["notes"]) or "[none]"
    return dedent(
        f"""
        You help teachers prepare secondary school students in Japan for a
        school trip to the Olympics Sports Museum.

        chart: {section_id}
        question: {title}
        notes: \"\"\"{notes}\"\"\"

        dataSummary: \"\"\"{table_block}\"\"\"

        REQUIRED FORMAT:
        {{
          "questions": ["...", "...", "..."]
        }}

        RULES:
        - Exactly three short open questions a 14 year old can discuss in a group.
        - Only return ONE JSON object.
        - Do NOT wrap it in markdown or ``` fences.
        """
    ).strip()


def _strip_fences(text: str) -> str:
    t = text.strip()
    if t.startswith("```"):
        parts = t.split("```")
        if len(parts) >= 2:
            t = parts[1].strip()
            if t.startswith("json"):
                t = t[len("json"):].strip()
    return t


def parse_questions(raw: str) -> List[str]:
    """Pulls the question list out of a model reply; ValueError if there is none."""
    raw = _strip_fences(raw or "")
    start = raw.find("{")
    end = raw.rfind("}")
    if start != -1 and end != -1 and end > start:
        raw = raw[start : end + 1]

    data = json.loads(raw)
    questions = data.get("questions") if isinstance(data, dict) else None
    if not isinstance(questions, list):
        raise ValueError("reply has no question list")
    cleaned = [str(q).strip() for q in questions if str(q).strip()]
    if not cleaned:
        raise ValueError("reply has an empty question list")
    return cleaned[:3]


# ============================================================
# GEMINI CALL
# ============================================================

def call_gemini(section_id: str, title: str, data_summary: Optional[str]) -> Dict:
    if not has_gemini_key():
        raise RuntimeError("GEMINI_API_KEY is not set")

    gen.configure(api_key=config.GEMINI_API_KEY)
    model = gen.GenerativeModel(config.GEMINI_MODEL)
    response = model.generate_content(build_prompt(section_id, title, data_summary))

    try:
        questions = parse_questions(response.text or "")
    except ValueError as exc:
        # json.JSONDecodeError is a ValueError
        logger.warning("unusable Gemini reply for %s: %s", section_id, exc)
        return build_fallback_questions(section_id)

    return {"questions": questions, "source": "gemini"}


# ============================================================
# FALLBACK (NO GEMINI / ERROR)
# ============================================================

def build_fallback_questions(section_id: str) -> Dict:
    return {"questions": list(FALLBACK_QUESTIONS.get(section_id, GENERIC_QUESTIONS)), "source": "fallback"}


def discussion_questions(section_id: str, title: str, data_summary: Optional[str] = None) -> Dict:
    """Gemini when a key is configured, the bundled questions otherwise."""
    if not has_gemini_key():
        return build_fallback_questions(section_id)
    try:
        return call_gemini(section_id, title, data_summary)
    except Exception as exc:
        logger.warning("Gemini call failed for %s: %s", section_id, exc)
        return build_fallback_questions(section_id)
