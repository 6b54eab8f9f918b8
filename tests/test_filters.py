from mhsurvey.filters import FilterState, apply_filters, filter_options
from mhsurvey.models import SurveyRecord


def _records(n_female=40, total=100):
    return [
        SurveyRecord(id=i + 1, gender="Female" if i < n_female else "Male", year="2014" if i % 2 else "2016")
        for i in range(total)
    ]


def test_gender_filter_keeps_only_matching_records():
    out = apply_filters(_records(), FilterState(gender="Female"))
    assert len(out) == 40
    assert all(r.gender == "Female" for r in out)


def test_empty_filter_returns_everything_as_new_list():
    records = _records()
    out = apply_filters(records, FilterState())
    assert out == records
    assert out is not records


def test_filters_combine_with_and():
    out = apply_filters(_records(), FilterState(gender="Female", year="2014"))
    assert len(out) == 20
    assert all(r.gender == "Female" and r.year == "2014" for r in out)


def test_apply_filters_is_idempotent():
    state = FilterState(gender="Male", year="2016")
    once = apply_filters(_records(), state)
    assert apply_filters(once, state) == once


def test_no_match_gives_empty_list():
    assert apply_filters(_records(), FilterState(gender="Undecided")) == []


def test_from_args_accepts_camel_and_snake_names():
    state = FilterState.from_args({"companySize": "6-25", "age_group": "21-30", "gender": "all", "year": ""})
    assert state == FilterState(company_size="6-25", age_group="21-30")
    assert state.active() == {"company_size": "6-25", "age_group": "21-30"}
    assert FilterState.from_args({}).is_empty()


def test_filter_options_are_sorted_and_unique():
    opts = filter_options(_records(total=4, n_female=1))
    assert opts["year"] == ["2014", "2016"]
    assert opts["gender"] == ["Female", "Male"]
    assert opts["company_size"] == []
