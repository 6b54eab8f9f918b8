from flask import current_app
from flask_cors import CORS

from .storage import SurveyStore

cors = CORS()


def init_store(app, store=None):
    app.extensions["survey_store"] = store if store is not None else SurveyStore()


def get_store() -> SurveyStore:
    return current_app.extensions["survey_store"]
