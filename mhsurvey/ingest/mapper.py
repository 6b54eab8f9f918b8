import pandas as pd

# survey CSV header -> record field
COL_MAP = {
    "Family History of Mental Illness": "family_history",
    "Company Size": "company_size",
    "year": "year",
    "Age": "age",
    "Age-Group": "age_group",
    "Gender": "gender",
    "Sought Treatment": "sought_treatment",
    "Prefer Anonymity": "prefer_anonymity",
    "Rate Reaction to Problems": "rate_reaction_to_problems",
    "Negative Consequences": "negative_consequences",
    "Location": "location",
    "Access to information": "access_to_information",
    "Insurance": "insurance",
    "Diagnosis": "diagnosis",
    "Discuss Mental Health Problems": "discuss_mental_health_problems",
    "Responsible Employer": "responsible_employer",
    "Disorder": "disorder",
    "Primarily a Tech Employer": "primarily_tech_employer",
}

# 0/1 columns
FLAG_FIELDS = {
    "sought_treatment",
    "prefer_anonymity",
    "access_to_information",
    "insurance",
    "disorder",
    "primarily_tech_employer",
}


def pick_field(col):
    """Header -> field name; tolerant of case and surrounding spaces."""
    s = str(col).strip()
    if s in COL_MAP:
        return COL_MAP[s]
    lowered = {k.lower(): v for k, v in COL_MAP.items()}
    return lowered.get(s.lower())


def is_blank(v):
    if v is None:
        return True
    if isinstance(v, str):
        return not v.strip()
    try:
        return bool(pd.isna(v))
    except (TypeError, ValueError):
        return False


def norm_flag(v):
    """1 -> True, any other answer -> False, blank -> None."""
    if is_blank(v):
        return None
    if isinstance(v, bool):
        return v
    s = str(v).strip()
    try:
        return float(s) == 1
    except ValueError:
        return s.lower() in ("yes", "true")


def norm_age(v):
    if is_blank(v):
        return None
    try:
        f = float(str(v).strip())
    except ValueError:
        return None
    return int(f) if f.is_integer() else None


def norm_year(v):
    if is_blank(v):
        return None
    s = str(v).strip()
    try:
        f = float(s)
        if f.is_integer():
            return str(int(f))
    except ValueError:
        pass
    return s


def norm_text(v):
    if is_blank(v):
        return None
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v).strip()


def row_to_payload(row) -> dict:
    """One CSV row (already keyed by field name) -> record payload."""
    out = {}
    for field, v in row.items():
        if field in FLAG_FIELDS:
            out[field] = norm_flag(v)
        elif field == "age":
            out[field] = norm_age(v)
        elif field == "year":
            out[field] = norm_year(v)
        else:
            out[field] = norm_text(v)
    return out
