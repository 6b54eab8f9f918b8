NO_DATA_MESSAGE = "No data available"


def placeholder(message: str = NO_DATA_MESSAGE) -> dict:
    """What every layout returns when there is nothing to draw."""
    return {"empty": True, "message": message}
