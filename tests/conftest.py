import pytest

from mhsurvey import create_app
from mhsurvey.models import NewSurveyRecord
from mhsurvey.storage import SurveyStore


def make_record(**answers):
    return NewSurveyRecord(**answers)


@pytest.fixture
def store():
    return SurveyStore()


@pytest.fixture
def app(store, tmp_path):
    app = create_app("testing", store=store)
    app.config["UPLOAD_DIR"] = str(tmp_path / "uploads")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sample_records(store):
    """A small, varied data set stored in ``store``."""
    rows = [
        dict(gender="Male", age_group="21-30", company_size="6-25", year="2014", family_history="Yes",
             sought_treatment=True, prefer_anonymity=False, location="USA", diagnosis="Yes",
             discuss_mental_health_problems="Yes", responsible_employer="Yes"),
        dict(gender="Female", age_group="21-30", company_size="6-25", year="2014", family_history="No",
             sought_treatment=False, prefer_anonymity=True, location="Canada", diagnosis="No",
             discuss_mental_health_problems="No", responsible_employer="Maybe"),
        dict(gender="Female", age_group="31-40", company_size="More than 1000", year="2016", family_history="Yes",
             sought_treatment=True, prefer_anonymity=True, location="USA", diagnosis="Maybe",
             discuss_mental_health_problems="Yes", responsible_employer="No"),
        dict(gender="Male", age_group="41-65", company_size="1-5", year="2016", family_history="No",
             sought_treatment=False, prefer_anonymity=None, location="Brazil", diagnosis="Yes",
             discuss_mental_health_problems="No", responsible_employer="Yes"),
    ]
    return store.insert_many(make_record(**r) for r in rows)
