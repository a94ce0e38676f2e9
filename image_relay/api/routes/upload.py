"""
Image upload endpoint.

Accepts a single image as multipart form data and relays it to Cloud
Storage. Responses are plain text:
- 200 with the public URL on success
- 400 when the form has no usable image file
- 500 with a generic message on any downstream failure (see main.py)

The form is read from the request directly instead of through a File()
parameter, so a text value or an empty file input under "image" gets the
same 400 as a missing field rather than a validation error.
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse
from starlette.datastructures import UploadFile

from ...core.relay.errors import MissingInputError
from ..dependencies import ImageRelayDep

logger = logging.getLogger(__name__)

router = APIRouter()


MISSING_IMAGE_MESSAGE = "Missing image file"
IMAGE_FIELD = "image"


@router.post(
    "/upload",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload an image",
    description="Relay an image to the configured bucket and return its public URL",
    responses={
        400: {"description": "No image file in the form"},
        500: {"description": "Authentication or upload failed"},
    },
    openapi_extra={
        "requestBody": {
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "required": [IMAGE_FIELD],
                        "properties": {
                            IMAGE_FIELD: {"type": "string", "format": "binary"},
                        },
                    }
                }
            },
        }
    },
)
async def upload_image(request: Request, relay: ImageRelayDep) -> PlainTextResponse:
    """
    Upload an image.

    The file is read fully into memory and forwarded as-is; neither its
    size nor its content type is validated.
    """
    form = await request.form()
    image = form.get(IMAGE_FIELD)

    # Browsers send an unnamed, empty part for a file input left blank
    if not isinstance(image, UploadFile) or not image.filename:
        logger.warning(
            "Upload request without image file",
            extra={"field_type": type(image).__name__}
        )
        raise MissingInputError(MISSING_IMAGE_MESSAGE)

    content = await image.read()

    public_url = await relay.relay(
        filename=image.filename,
        content=content,
        content_type=image.content_type,
    )

    return PlainTextResponse(f"Image uploaded successfully: {public_url}")
