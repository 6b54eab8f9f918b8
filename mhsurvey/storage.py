import logging
from typing import Dict, Iterable, List, Optional

from .models import NewSurveyRecord, SurveyRecord

logger = logging.getLogger(__name__)


class SurveyStore:
    """In-memory survey record collection with sequential ids.

    One instance is owned by each Flask app (see ``extensions.init_store``);
    nothing here is process-global, so tests can build their own.
    """

    def __init__(self):
        self._records: Dict[int, SurveyRecord] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    def _assign(self, record: NewSurveyRecord) -> SurveyRecord:
        stored = SurveyRecord(id=self._next_id, **record.model_dump())
        self._records[stored.id] = stored
        self._next_id += 1
        return stored

    def insert_one(self, record: NewSurveyRecord) -> SurveyRecord:
        stored = self._assign(record)
        logger.debug("Inserted survey record id=%s", stored.id)
        return stored

    def insert_many(self, records: Iterable[NewSurveyRecord]) -> List[SurveyRecord]:
        stored = [self._assign(r) for r in records]
        logger.info("Inserted %d survey records (next id=%d)", len(stored), self._next_id)
        return stored

    def get(self, record_id: int) -> Optional[SurveyRecord]:
        return self._records.get(record_id)

    def get_all(self) -> List[SurveyRecord]:
        # dicts keep insertion order
        return list(self._records.values())

    def clear(self) -> None:
        logger.info("Clearing %d survey records", len(self._records))
        self._records.clear()
        self._next_id = 1
