"""
Aggregations behind the dashboard charts.

Every function takes the already-filtered records and returns plain
Python containers ready for JSON. Missing answers never land in a bucket,
percentages stay unrounded floats (see ``format_percentage`` for display),
and empty input gives an empty result.
"""
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Sequence

import pandas as pd

from .frames import records_frame
from .models import AGE_GROUPS, COMPANY_SIZES, GENDERS, YES_NO, SurveyRecord

# Predicates answer True / False, or None when the record has no answer;
# a None result is left out of the denominator.
Predicate = Callable[[SurveyRecord], Optional[bool]]


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def answered_yes(field: str) -> Predicate:
    def predicate(r):
        value = getattr(r, field)
        return None if value is None else value == "Yes"
    return predicate


def flag_set(field: str) -> Predicate:
    def predicate(r):
        value = getattr(r, field)
        return None if value is None else value is True
    return predicate


def has_mental_health_issue(r: SurveyRecord) -> Optional[bool]:
    """Any of treatment, family history or disorder; unknown only if none was answered."""
    answers = (flag_set("sought_treatment")(r), answered_yes("family_history")(r), flag_set("disorder")(r))
    if any(a is True for a in answers):
        return True
    if all(a is None for a in answers):
        return None
    return False


MENTAL_HEALTH_FACTORS: Dict[str, Predicate] = {
    "Sought Treatment": flag_set("sought_treatment"),
    "Family History": answered_yes("family_history"),
    "Prefer Anonymity": flag_set("prefer_anonymity"),
}


# ---------------------------------------------------------------------------
# Generic aggregations
# ---------------------------------------------------------------------------

def _ordered_keys(counts: Mapping[Hashable, int], order: Optional[Sequence] = None) -> List:
    if order is not None:
        known = [k for k in order if k in counts]
        extra = sorted((k for k in counts if k not in order), key=str)
        return known + extra
    return sorted(counts, key=lambda k: (-counts[k], str(k)))


def count_by(records: Sequence[SurveyRecord], field: str, order: Optional[Sequence] = None) -> Dict[Any, Dict[str, float]]:
    """
    Count records per value of ``field``.

    percentage = count / len(records) * 100. Records without a value for
    the field are left out of every bucket but still count in the total.
    """
    total = len(records)
    if not total:
        return {}
    counts = records_frame(records)[field].dropna().value_counts(sort=False).to_dict()
    return {
        k: {"count": int(counts[k]), "percentage": counts[k] / total * 100}
        for k in _ordered_keys(counts, order)
    }


def crosstab(
    records: Sequence[SurveyRecord],
    field_a: str,
    field_b: str,
    domain_a: Sequence,
    domain_b: Sequence,
) -> List[Dict[str, Any]]:
    """
    One cell per (a, b) combination of the two domains, zero counts included.

    Records missing either answer are in no cell and out of the total, so
    the cell percentages add up to 100 whenever any record is counted.
    """
    if not records:
        return []
    df = records_frame(records)[[field_a, field_b]].dropna()
    counts = df.groupby([field_a, field_b]).size().to_dict() if not df.empty else {}
    total = len(df)
    cells = []
    for a in domain_a:
        for b in domain_b:
            n = int(counts.get((a, b), 0))
            cells.append({field_a: a, field_b: b, "count": n, "percentage": n / total * 100 if total else 0.0})
    return cells


def _known(values: pd.Series) -> pd.Series:
    return values.dropna().astype(bool)


def conditional_rate_by_bucket(
    records: Sequence[SurveyRecord],
    field: str,
    predicate: Predicate,
    order: Optional[Sequence] = None,
) -> Dict[Any, Dict[str, float]]:
    """
    Share of each bucket of ``field`` satisfying ``predicate``.

    Records the predicate cannot answer are not counted, and buckets left
    with no records are not emitted.
    """
    if not records:
        return {}
    df = records_frame(records)[[field]].copy()
    df["matched"] = pd.Series([predicate(r) for r in records], index=df.index, dtype=object)
    df = df.dropna(subset=[field, "matched"]).copy()
    if df.empty:
        return {}
    df["matched"] = df["matched"].astype(bool)
    stats = df.groupby(field)["matched"].agg(["size", "sum"]).to_dict("index")
    sizes = {k: int(v["size"]) for k, v in stats.items() if v["size"] > 0}
    out = {}
    for k in _ordered_keys(sizes, order or ()):
        matches = int(stats[k]["sum"])
        out[k] = {"count": sizes[k], "matches": matches, "percentage": matches / sizes[k] * 100}
    return out


def grouped_rate(
    records: Sequence[SurveyRecord],
    factors: Mapping[str, Predicate],
    by: str,
    domain: Sequence,
) -> Dict[str, Dict[Any, float]]:
    """
    Rate of each factor within each slice of ``by``.

    Each slice is normalized by the records in it that answered the factor,
    so the rates of one factor across slices do not add up to 100. A slice
    with no such records is left out for that factor.
    """
    if not records:
        return {}
    slices = records_frame(records)[by]
    out = {}
    for name, p in factors.items():
        answers = pd.Series([p(r) for r in records], index=slices.index, dtype=object)
        known = slices.notna() & answers.notna()
        if not known.any():
            out[name] = {}
            continue
        rates = _known(answers[known]).groupby(slices[known]).mean() * 100
        out[name] = {g: float(rates[g]) for g in domain if g in rates.index}
    return out


def percentage_of(records: Sequence[SurveyRecord], predicate: Predicate) -> float:
    """Share of the records answering ``predicate`` that answered True."""
    answers = [a for a in (predicate(r) for r in records) if a is not None]
    if not answers:
        return 0.0
    return sum(1 for a in answers if a) / len(answers) * 100


def format_percentage(value: float, digits: int = 0) -> str:
    return f"{value:.{digits}f}%"


# ---------------------------------------------------------------------------
# Dashboard presets
# ---------------------------------------------------------------------------

def summary_statistics(records: Sequence[SurveyRecord]) -> Dict[str, Any]:
    return {
        "total_respondents": len(records),
        "sought_treatment": percentage_of(records, flag_set("sought_treatment")),
        "family_history": percentage_of(records, answered_yes("family_history")),
        "countries": len({r.location for r in records if r.location}),
    }


def age_group_distribution(records):
    return count_by(records, "age_group", AGE_GROUPS)


def gender_factor_rates(records):
    return grouped_rate(records, MENTAL_HEALTH_FACTORS, "gender", GENDERS)


def company_size_issue_rates(records):
    return conditional_rate_by_bucket(records, "company_size", has_mental_health_issue, COMPANY_SIZES)


def family_history_treatment_grid(records) -> List[Dict[str, Any]]:
    cells = crosstab(records, "family_history", "sought_treatment", YES_NO, (False, True))
    for cell in cells:
        history = "Family History" if cell["family_history"] == "Yes" else "No Family History"
        treatment = "Sought Treatment" if cell["sought_treatment"] else "No Treatment"
        cell["label"] = f"{history}, {treatment}"
    return cells


def treatment_by_age_group(records) -> List[Dict[str, Any]]:
    """Sought / not-sought counts per age group; groups without answers are dropped."""
    cells = crosstab(records, "age_group", "sought_treatment", AGE_GROUPS, (True, False))
    counts = {(c["age_group"], c["sought_treatment"]): c["count"] for c in cells}
    rows = [
        {"age_group": g, "sought": counts.get((g, True), 0), "not_sought": counts.get((g, False), 0)}
        for g in AGE_GROUPS
    ]
    return [row for row in rows if row["sought"] + row["not_sought"] > 0]


def location_counts(records, limit: Optional[int] = None):
    counts = count_by(records, "location")
    if limit is not None:
        counts = dict(list(counts.items())[:limit])
    return counts


# (category, field, ((outcome label, answer), ...))
TREE_CATEGORIES = (
    ("Diagnosis", "diagnosis", (
        ("With Diagnosis", "Yes"),
        ("Without Diagnosis", "No"),
        ("Unsure", "Maybe"),
    )),
    ("Treatment", "sought_treatment", (
        ("Sought Treatment", True),
        ("Did Not Seek Treatment", False),
    )),
    ("Workplace", "responsible_employer", (
        ("Supportive Employer", "Yes"),
        ("Unsupportive Employer", "No"),
        ("Somewhat Supportive", "Maybe"),
    )),
)


def mental_health_tree(records) -> Dict[str, Any]:
    """
    Root -> category -> outcome hierarchy.

    Outcome percentages are relative to the respondents who gave one of
    the category's known answers.
    """
    if not records:
        return {}
    children = []
    for name, field, outcomes in TREE_CATEGORIES:
        counts = count_by(records, field)
        values = [(label, counts.get(answer, {}).get("count", 0)) for label, answer in outcomes]
        known = sum(v for _, v in values)
        children.append({
            "name": name,
            "children": [
                {"name": label, "value": v, "percentage": v / known * 100 if known else 0.0}
                for label, v in values
            ],
        })
    return {"name": "Mental Health", "children": children}


# (node id, label, group, predicate)
NETWORK_DIMENSIONS = (
    ("FamilyHistory", "Family History", 1, answered_yes("family_history")),
    ("SoughtTreatment", "Treatment", 2, flag_set("sought_treatment")),
    ("Diagnosis", "Diagnosis", 3, answered_yes("diagnosis")),
    ("DiscussMHProblems", "Discuss Mental Health", 4, answered_yes("discuss_mental_health_problems")),
    ("ResponsibleEmployer", "Employer", 5, answered_yes("responsible_employer")),
)

NETWORK_LINKS = (
    ("ResponsibleEmployer", "SoughtTreatment"),
    ("SoughtTreatment", "FamilyHistory"),
    ("FamilyHistory", "Diagnosis"),
    ("Diagnosis", "DiscussMHProblems"),
    ("DiscussMHProblems", "ResponsibleEmployer"),
)


def network_nodes(records) -> Dict[str, List[Dict[str, Any]]]:
    """
    The five network dimensions with their "Yes" counts, and the fixed
    ring of links weighted by how many respondents said yes to both ends.
    """
    if not records:
        return {}
    flags = pd.DataFrame({node_id: [bool(p(r)) for r in records] for node_id, _, _, p in NETWORK_DIMENSIONS})
    nodes = [
        {"id": node_id, "label": label, "group": group, "count": int(flags[node_id].sum())}
        for node_id, label, group, _ in NETWORK_DIMENSIONS
    ]
    links = [
        {"source": s, "target": t, "value": int((flags[s] & flags[t]).sum())}
        for s, t in NETWORK_LINKS
    ]
    return {"nodes": nodes, "links": links}
