from typing import Sequence

import pandas as pd

from .models import RECORD_FIELDS, SurveyRecord


def records_frame(records: Sequence[SurveyRecord], *, with_id: bool = False, by_alias: bool = False) -> pd.DataFrame:
    """
    One row per record, one column per answer.

    Columns are object dtype so missing answers stay None (not NaN) and
    booleans/ints keep their Python types through groupby.
    """
    columns = (("id",) if with_id else ()) + RECORD_FIELDS
    rows = [r.model_dump(include=set(columns)) for r in records]
    df = pd.DataFrame(rows, columns=list(columns), dtype=object)
    if by_alias:
        df.columns = [SurveyRecord.model_fields[c].alias or c for c in df.columns]
    return df
