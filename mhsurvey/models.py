from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# Canonical bucket orders used for display
AGE_GROUPS = ("0-20", "21-30", "31-40", "41-65", "66-100")
COMPANY_SIZES = ("1-5", "6-25", "26-100", "100-500", "500-1000", "More than 1000")
GENDERS = ("Male", "Female", "Undecided")
YES_NO = ("No", "Yes")

RECORD_FIELDS = (
    "family_history",
    "company_size",
    "year",
    "age",
    "age_group",
    "gender",
    "sought_treatment",
    "prefer_anonymity",
    "rate_reaction_to_problems",
    "negative_consequences",
    "location",
    "access_to_information",
    "insurance",
    "diagnosis",
    "discuss_mental_health_problems",
    "responsible_employer",
    "disorder",
    "primarily_tech_employer",
)


class NewSurveyRecord(BaseModel):
    """One respondent's answers, before the store assigns an id.

    The wire format is camelCase (``familyHistory``); attributes are
    snake_case. Every answer is optional.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    family_history: Optional[str] = None
    company_size: Optional[str] = None
    year: Optional[str] = None
    age: Optional[int] = None
    age_group: Optional[str] = None
    gender: Optional[str] = None
    sought_treatment: Optional[bool] = None
    prefer_anonymity: Optional[bool] = None
    rate_reaction_to_problems: Optional[str] = None
    negative_consequences: Optional[str] = None
    location: Optional[str] = None
    access_to_information: Optional[bool] = None
    insurance: Optional[bool] = None
    diagnosis: Optional[str] = None
    discuss_mental_health_problems: Optional[str] = None
    responsible_employer: Optional[str] = None
    disorder: Optional[bool] = None
    primarily_tech_employer: Optional[bool] = None

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_text(cls, v):
        # 2014 / 2014.0 / "2014" all mean the survey year "2014"
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        return str(v)


class SurveyRecord(NewSurveyRecord):
    id: int

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)
