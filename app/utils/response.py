from typing import Any


def message_response(message: str, **data: Any) -> dict:
    return {"message": message, **data}


def error_response(message: str, details: Any = None) -> dict:
    body: dict = {"error": message}
    if details is not None:
        body["details"] = details
    return body
