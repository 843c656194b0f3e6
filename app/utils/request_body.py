from typing import TypeVar

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from starlette.datastructures import FormData, UploadFile

ModelT = TypeVar("ModelT", bound=BaseModel)


def is_json_request(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";")[0].strip().lower() == "application/json"


async def parse_body(request: Request, model: type[ModelT]) -> tuple[ModelT, FormData | None]:
    """Validate a JSON or form-encoded body against ``model``.

    The parsed form is returned alongside so callers can pick out attached
    files; it is None for JSON bodies.
    """
    form = None
    if is_json_request(request):
        try:
            payload = await request.json()
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Malformed JSON body",
            ) from exc
    else:
        form = await request.form()
        payload = {key: value for key, value in form.items() if isinstance(value, str)}

    try:
        return model.model_validate(payload), form
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


def form_files(form: FormData | None, field: str) -> list[UploadFile]:
    """Non-empty files attached under ``field``."""
    if form is None:
        return []
    return [
        item
        for item in form.getlist(field)
        if isinstance(item, UploadFile) and item.filename
    ]
