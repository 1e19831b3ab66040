"""Reading create/update payloads that arrive either as JSON or as multipart forms."""

from dataclasses import dataclass, field
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.datastructures import UploadFile

from app.core.storage import ImageUpload

LIST_FIELDS = {"categories"}
FILE_FIELDS = {"images"}


@dataclass
class RequestPayload:
    fields: dict[str, Any] = field(default_factory=dict)
    uploads: list[UploadFile] = field(default_factory=list)


def _body_error(message: str) -> RequestValidationError:
    return RequestValidationError([{"loc": ("body",), "msg": message, "type": "value_error"}])


async def read_payload(request: Request) -> RequestPayload:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as exc:
            raise _body_error("Malformed JSON body.") from exc
        if not isinstance(body, dict):
            raise _body_error("The request body must be an object.")
        return RequestPayload(fields=body)

    if not content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        return RequestPayload()

    payload = RequestPayload()
    form = await request.form()
    for key, value in form.multi_items():
        name = key.removesuffix("[]")
        if name in FILE_FIELDS:
            if isinstance(value, UploadFile):
                payload.uploads.append(value)
        elif name in LIST_FIELDS:
            values = payload.fields.setdefault(name, [])
            # A lone empty value is how a form says "empty list".
            if value != "":
                values.append(value)
        else:
            payload.fields[name] = value
    return payload


async def read_images(uploads: list[UploadFile]) -> list[ImageUpload]:
    images: list[ImageUpload] = []
    for upload in uploads:
        content = await upload.read()
        images.append(ImageUpload(filename=upload.filename or "", content=content))
    return images
