"""Request and response types for xAI's image endpoints.

xAI's ``/v1/images/generations`` is OpenAI-compatible apart from its model
names (e.g. ``grok-imagine-image``).  ``/v1/images/edits`` differs from
OpenAI's multipart upload: it takes a JSON body with the source image passed
as a base64 data URI.

See https://docs.x.ai/api/endpoints#images
"""

from dataclasses import dataclass

from xaiclient.models.base import ResponseModel


@dataclass(frozen=True)
class CreateImageRequestBody:
    """Parameters for an image generation call.

    Args:
        model: Model ID, e.g. ``"grok-imagine-image"``.
        prompt: Description of the desired image(s).
        n: Number of images to generate.
        response_format: ``"url"`` or ``"b64_json"``.
    """

    model: str
    prompt: str
    n: int | None = None
    response_format: str | None = None


@dataclass(frozen=True)
class ImageReference:
    """Source image for an edit, usually a ``data:image/jpeg;base64,...`` URI."""

    url: str
    type: str = "image_url"


@dataclass(frozen=True)
class CreateImageEditRequestBody:
    """Parameters for an image edit call.

    Args:
        model: Model ID, e.g. ``"grok-imagine-image"``.
        prompt: Description of the desired edit.
        image: The image to edit.
        n: Number of images to generate.
        response_format: ``"url"`` or ``"b64_json"``.
    """

    model: str
    prompt: str
    image: ImageReference
    n: int | None = None
    response_format: str | None = None


class ImageData(ResponseModel):
    url: str | None = None
    b64_json: str | None = None
    revised_prompt: str | None = None


class CreateImageResponseBody(ResponseModel):
    """Generated or edited images."""

    created: int | None = None
    data: list[ImageData]
