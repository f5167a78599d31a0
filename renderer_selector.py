###############################################################
# renderer_selector.py — the page's sections, in page order
###############################################################
"""
Each section names its anchor, title, the datasets it needs (with the
fields its chart depends on) and the schema builder for them. The page
walks SECTIONS top to bottom; the front page links to the anchors.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import config
from datasets import Record, load_dataset
from schema_generator import (
    build_first_time_schema,
    build_gender_schema,
    build_paralympics_schema,
    build_timeline_schema,
)


@dataclass(frozen=True)
class DatasetSource:
    name: str
    filename: str
    required: Tuple[str, ...]

    @property
    def path(self) -> Path:
        return config.DATA_DIR / self.filename


@dataclass(frozen=True)
class Section:
    id: str
    title: str
    datasets: Tuple[DatasetSource, ...]
    build_schema: Callable[..., dict]

    @property
    def anchor(self) -> str:
        return f"#{self.id}"


COUNTRIES = DatasetSource("countries", "countries_first_year.json", ("country", "first_year", "continent"))
ENVIRONMENT = DatasetSource("environment", "environmental_cal.csv", ("year", "event", "polarity", "olympics"))
FEMALE = DatasetSource("female", "female_summer_olympics.csv", ("year", "proportion"))
PARALYMPICS = DatasetSource("paralympics", "paralympics.csv", ("year", "host", "nations", "competitors"))
PARA_SPORTS = DatasetSource("paralympics_sports", "paralympics_sports.csv", ("year", "sport"))


SECTIONS: Tuple[Section, ...] = (
    Section(
        "first-time",
        "When did countries first participate in the Olympics?",
        (COUNTRIES,),
        lambda countries: build_first_time_schema(countries, list(config.CONTINENT_COLOURS)),
    ),
    Section(
        "environment",
        "How do the Olympics impact the environment?",
        (ENVIRONMENT,),
        build_timeline_schema,
    ),
    Section(
        "gender",
        "What is the athlete gender split at the Olympics?",
        (FEMALE,),
        lambda female: build_gender_schema(female, max_years=config.PIES_MAX_YEARS),
    ),
    Section(
        "paralympics",
        "What is the history and timeline of the Paralympics?",
        (PARALYMPICS, PARA_SPORTS),
        lambda games, sports: build_paralympics_schema(games, sports, rows=config.PARA_SPORT_ROWS),
    ),
)


def select_section(section_id: str) -> Section:
    for section in SECTIONS:
        if section.id == section_id:
            return section
    raise KeyError(f"no section {section_id!r}")


def load_section_records(section: Section, data_dir: Optional[Path] = None) -> List[List[Record]]:
    """Loads every dataset of ``section``; raises DataLoadFailure on the first bad one."""
    paths = [data_dir / source.filename if data_dir else source.path for source in section.datasets]
    return [load_dataset(path, source.required) for path, source in zip(paths, section.datasets)]


def build_section_schema(section: Section, data_dir: Optional[Path] = None) -> Dict:
    records = load_section_records(section, data_dir)
    return section.build_schema(*records)
