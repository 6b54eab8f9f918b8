from dataclasses import dataclass, fields
from typing import Dict, List, Mapping, Optional, Sequence

from .models import SurveyRecord

# query-arg spellings accepted for each filter field
_ARG_NAMES = {
    "year": ("year",),
    "gender": ("gender",),
    "company_size": ("companySize", "company_size"),
    "age_group": ("ageGroup", "age_group"),
}

# the dropdown's "All ..." option
_UNCONSTRAINED = {"", "all"}


@dataclass(frozen=True)
class FilterState:
    """
    Equality constraints over the survey collection.

    A field left as None does not constrain anything; set fields are
    combined with AND.
    """
    year: Optional[str] = None
    gender: Optional[str] = None
    company_size: Optional[str] = None
    age_group: Optional[str] = None

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "FilterState":
        values: Dict[str, Optional[str]] = {}
        for name, spellings in _ARG_NAMES.items():
            raw = None
            for key in spellings:
                if args.get(key) is not None:
                    raw = args.get(key)
                    break
            if raw is not None and raw.strip().lower() in _UNCONSTRAINED:
                raw = None
            values[name] = raw
        return cls(**values)

    def active(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def is_empty(self) -> bool:
        return not self.active()


def apply_filters(records: Sequence[SurveyRecord], state: FilterState) -> List[SurveyRecord]:
    """Return a new list with the records matching every active constraint."""
    active = state.active()
    return [r for r in records if all(getattr(r, name) == value for name, value in active.items())]


def filter_options(records: Sequence[SurveyRecord]) -> Dict[str, List[str]]:
    """Sorted unique values of each filter field, for the filter dropdowns."""
    options = {}
    for name in _ARG_NAMES:
        options[name] = sorted({getattr(r, name) for r in records if getattr(r, name)})
    return options
