# vidtube/core/json.py
from typing import Any
import json
from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse


class UTF8JSONResponse(JSONResponse):
    """
    JSON en UTF-8 sin escapes ASCII. Pasa antes por jsonable_encoder, así
    los modelos pydantic salen con sus alias camelCase y las fechas en ISO.
    """
    media_type = "application/json; charset=utf-8"

    def render(self, content: Any) -> bytes:
        payload = jsonable_encoder(content, by_alias=True)
        return json.dumps(
            payload,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        ).encode("utf-8")


def api_response(data: Any = None, message: str = "ok", status_code: int = 200) -> UTF8JSONResponse:
    """Sobre estándar de éxito: {statusCode, data, message, success}."""
    return UTF8JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "data": data if data is not None else {},
            "message": message,
            "success": status_code < 400,
        },
    )
