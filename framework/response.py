from typing import Any, Optional


class ResponseModel:
    """Body builders shared by every route; the wire keys are part of the public contract."""

    @staticmethod
    def success(message: Optional[str] = None, **data: Any) -> dict:
        body = {"message": message} if message is not None else {}
        body.update(data)
        return body

    @staticmethod
    def fail(message: str, **data: Any) -> dict:
        return {"message": message, **data}

    @staticmethod
    def error(error: str, details: Any = None) -> dict:
        body = {"error": error}
        if details is not None:
            body["details"] = details
        return body
