###############################################################
# schema_generator.py — loaded records -> chart schemas
###############################################################
"""
Turns the records of each bundled dataset into the plain-dict schema a
section renderer consumes. Values are checked here, once, so the
renderers can trust every field they read.
"""
from __future__ import annotations

from typing import Dict, List, Sequence

from datasets import Record, unique
from errors import DataLoadFailure

GENDERS = ("male", "female")
POLARITIES = ("positive", "negative")


def number(resource: str, record: Record, field: str) -> float:
    """``record[field]`` as a float; anything unparsable is a DataLoadFailure for ``resource``."""
    try:
        return float(record[field])
    except (TypeError, ValueError) as exc:
        raise DataLoadFailure(resource, f"{field} is not a number: {record.get(field)!r}") from exc


def whole(resource: str, record: Record, field: str) -> int:
    value = number(resource, record, field)
    if not value.is_integer():
        raise DataLoadFailure(resource, f"{field} is not a whole number: {record.get(field)!r}")
    return int(value)


################################################################
# 1. GENDER PIES
################################################################

def gender_split(record: Record) -> List[Dict]:
    """
    One year -> two pie inputs, male first:
    [{"gender": "male", "percentage": 100 - p}, {"gender": "female", "percentage": p}]
    """
    p = number("female_summer_olympics", record, "proportion")
    if not 0.0 <= p <= 100.0:
        raise DataLoadFailure("female_summer_olympics", f"proportion out of range for {record.get('year')}: {p}")
    return [
        {"gender": "male", "percentage": 100.0 - p},
        {"gender": "female", "percentage": p},
    ]


def build_gender_schema(records: Sequence[Record], max_years: int = 28) -> Dict:
    """
    {
      "years": [
        {"year": 1896, "slices": [{"gender": "male", ...}, {"gender": "female", ...}]},
        ...
      ]
    }
    Years keep file order and are capped at ``max_years``.
    """
    years = []
    for rec in records[:max_years]:
        years.append({"year": whole("female_summer_olympics", rec, "year"), "slices": gender_split(rec)})
    return {"years": years}


################################################################
# 2. FIRST PARTICIPATION
################################################################

def build_first_time_schema(records: Sequence[Record], continents: Sequence[str]) -> Dict:
    """
    {
      "years": [1896, 1900, ...],            # sorted, distinct
      "continents": [...],                   # legend order
      "countries": [{"key", "country", "year", "continent"}, ...]
    }
    """
    allowed = set(continents)
    countries = []
    for rec in records:
        continent = rec["continent"]
        if continent not in allowed:
            raise DataLoadFailure("countries_first_year", f"unknown continent {continent!r} for {rec['country']}")
        countries.append(
            {
                "key": f"country-{rec['country']}",
                "country": rec["country"],
                "year": whole("countries_first_year", rec, "first_year"),
                "continent": continent,
            }
        )
    years = sorted({c["year"] for c in countries})
    return {"years": years, "continents": list(continents), "countries": countries}


################################################################
# 3. PARALYMPICS
################################################################

def build_paralympics_schema(games: Sequence[Record], sports: Sequence[Record], rows: int = 22) -> Dict:
    """
    {
      "years": [1960, ...],
      "games": [{"year", "host", "nations", "competitors"}, ...],
      "sports": ["Archery", ...],            # distinct, first-seen order
      "entries": [{"key", "year", "sport", "row"}, ...]
    }
    ``row`` spreads the dots of one Games vertically (index modulo ``rows``).
    """
    years = [whole("paralympics", g, "year") for g in games]
    known = set(years)
    entries = []
    for i, rec in enumerate(sports):
        year = whole("paralympics_sports", rec, "year")
        if year not in known:
            raise DataLoadFailure("paralympics_sports", f"no Games on record for {year}")
        entries.append(
            {
                "key": f"sport-{year}-{i}",
                "year": year,
                "sport": rec["sport"],
                "row": i % rows,
            }
        )
    return {
        "years": years,
        "games": [
            {
                "year": whole("paralympics", g, "year"),
                "host": g["host"],
                "nations": whole("paralympics", g, "nations"),
                "competitors": whole("paralympics", g, "competitors"),
            }
            for g in games
        ],
        "sports": unique(sports, "sport"),
        "entries": entries,
    }


################################################################
# 4. SUSTAINABILITY TIMELINE
################################################################

def event_offset(polarity: str, at_olympics: bool) -> int:
    """Negative outcomes hang below the axis; non-Games milestones sit highest."""
    if polarity == "negative":
        return 100
    if not at_olympics:
        return -200
    return -100


def build_timeline_schema(records: Sequence[Record]) -> Dict:
    """
    {
      "years": [...],                        # distinct, file order
      "events": [{"key", "year", "event", "polarity", "olympics", "notes", "offset"}, ...]
    }
    """
    events = []
    for i, rec in enumerate(records):
        polarity = str(rec["polarity"]).lower()
        if polarity not in POLARITIES:
            raise DataLoadFailure("environmental_cal", f"unknown polarity {rec['polarity']!r}")
        at_olympics = str(rec["olympics"]).lower() in ("yes", "true", "1")
        events.append(
            {
                "key": f"event-{i}",
                "year": whole("environmental_cal", rec, "year"),
                "event": rec["event"],
                "polarity": polarity,
                "olympics": at_olympics,
                "notes": rec.get("notes") or "",
                "offset": event_offset(polarity, at_olympics),
            }
        )
    return {"years": unique(events, "year"), "events": events}
