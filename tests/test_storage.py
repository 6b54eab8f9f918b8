from mhsurvey.models import NewSurveyRecord, SurveyRecord


def test_ids_are_sequential_and_unique(store):
    first = store.insert_one(NewSurveyRecord(gender="Male"))
    rest = store.insert_many([NewSurveyRecord(gender="Female"), NewSurveyRecord()])
    assert [r.id for r in [first] + rest] == [1, 2, 3]
    assert len(store) == 3


def test_get_all_preserves_insertion_order(store):
    for g in ("Female", "Male", "Undecided"):
        store.insert_one(NewSurveyRecord(gender=g))
    assert [r.gender for r in store.get_all()] == ["Female", "Male", "Undecided"]


def test_get_all_returns_a_copy(store):
    store.insert_one(NewSurveyRecord())
    records = store.get_all()
    records.clear()
    assert len(store.get_all()) == 1


def test_clear_resets_ids(store):
    store.insert_many([NewSurveyRecord(), NewSurveyRecord()])
    store.clear()
    assert store.get_all() == []
    assert store.insert_one(NewSurveyRecord()).id == 1


def test_get_unknown_id(store):
    assert store.get(42) is None


def test_record_wire_format_is_camel_case():
    rec = SurveyRecord.model_validate({"id": 7, "familyHistory": "Yes", "soughtTreatment": True, "year": 2014})
    body = rec.to_json()
    assert body["familyHistory"] == "Yes"
    assert body["soughtTreatment"] is True
    assert body["year"] == "2014"
    assert body["ageGroup"] is None
