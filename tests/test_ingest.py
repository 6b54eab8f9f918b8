import pandas as pd
import pytest

from mhsurvey.ingest.mapper import norm_flag, norm_year, pick_field, row_to_payload
from mhsurvey.ingest.pipeline import EmptyUploadError, RecordValidationError, ingest_file, validate_records
from mhsurvey.models import NewSurveyRecord

CSV = """Family History of Mental Illness,Company Size,year,Age,Age-Group,Gender,Sought Treatment,Location,Primarily a Tech Employer,Favourite Colour
Yes,6-25,2014,27,21-30,Male,1,USA,1,blue
No,More than 1000,2016,35,31-40,Female,0,Canada,,green
"""


@pytest.fixture
def survey_csv(tmp_path):
    p = tmp_path / "survey.csv"
    p.write_text(CSV, encoding="utf-8")
    return p


def test_pick_field_ignores_case_and_spaces():
    assert pick_field(" age-group ") == "age_group"
    assert pick_field("Family History of Mental Illness") == "family_history"
    assert pick_field("Favourite Colour") is None


@pytest.mark.parametrize("raw,expected", [
    (1, True), (1.0, True), ("1", True), (0, False), ("Yes", True), ("No", False),
    (None, None), ("", None), (float("nan"), None),
])
def test_norm_flag(raw, expected):
    assert norm_flag(raw) is expected


def test_norm_year():
    assert norm_year(2014.0) == "2014"
    assert norm_year("2016") == "2016"
    assert norm_year(None) is None


def test_row_to_payload():
    payload = row_to_payload({"sought_treatment": 1, "age": 31.0, "gender": " Male ", "year": 2014})
    assert payload == {"sought_treatment": True, "age": 31, "gender": "Male", "year": "2014"}


def test_ingest_csv(survey_csv, store):
    assert ingest_file(survey_csv, store) == 2
    first, second = store.get_all()
    assert first.family_history == "Yes"
    assert first.sought_treatment is True
    assert first.age == 27
    assert first.year == "2014"
    assert first.primarily_tech_employer is True
    assert second.sought_treatment is False
    assert second.primarily_tech_employer is None


def test_ingest_clear_replaces_data(survey_csv, store):
    ingest_file(survey_csv, store)
    ingest_file(survey_csv, store, clear=True)
    assert [r.id for r in store.get_all()] == [1, 2]


def test_ingest_excel(tmp_path, store):
    p = tmp_path / "survey.xlsx"
    pd.DataFrame({"Gender": ["Female"], "Age-Group": ["21-30"], "Sought Treatment": [1]}).to_excel(p, index=False)
    assert ingest_file(p, store) == 1
    assert store.get_all()[0].age_group == "21-30"


def test_unsupported_extension(tmp_path, store):
    p = tmp_path / "survey.txt"
    p.write_text("x")
    with pytest.raises(ValueError):
        ingest_file(p, store)


def test_validation_is_all_or_nothing():
    with pytest.raises(RecordValidationError) as info:
        validate_records([{"gender": "Male"}, {"age": "not a number"}])
    assert info.value.row == 1
    assert info.value.errors


@pytest.mark.parametrize("content", ["Gender,Age-Group\n", "Favourite Colour\nblue\n"])
def test_empty_file_leaves_store_alone(tmp_path, store, content):
    store.insert_one(NewSurveyRecord(gender="Male"))
    p = tmp_path / "empty.csv"
    p.write_text(content)
    with pytest.raises(EmptyUploadError):
        ingest_file(p, store, clear=True)
    assert len(store) == 1


def test_xls_is_not_accepted(tmp_path, store):
    p = tmp_path / "legacy.xls"
    p.write_bytes(b"")
    with pytest.raises(ValueError, match="Unsupported file type"):
        ingest_file(p, store)
