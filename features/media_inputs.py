"""Load caller-supplied images given either as a location or inline base64."""

from __future__ import annotations

import asyncio
from typing import Optional, Tuple

from core.exceptions import ValidationError
from core.utils.media import content_type_for, decode_base64
from infrastructure.storage.resolver import MediaLocationResolver


def check_image_source(image_uri: Optional[str], image_base64: Optional[str]) -> bool:
    """Return whether an image was supplied; both forms at once is an error."""

    if image_uri and image_base64:
        raise ValidationError("Provide either image_uri or image_base64, not both", field="image_uri")
    return bool(image_uri or image_base64)


async def load_image(
    resolver: MediaLocationResolver,
    image_uri: Optional[str],
    image_base64: Optional[str],
    image_mime_type: Optional[str] = None,
) -> Optional[Tuple[bytes, str]]:
    """Return ``(bytes, mime_type)`` for the supplied image, or ``None``.

    Remote locations are downloaded into a scratch file that is removed
    before this returns.
    """

    if not check_image_source(image_uri, image_base64):
        return None

    if image_base64:
        try:
            data = decode_base64(image_base64, field="image_base64")
        except ValueError as exc:
            raise ValidationError(str(exc), field="image_base64") from exc
        return data, image_mime_type or "image/png"

    async with resolver.scope() as workspace:
        path = await workspace.resolve_input(image_uri)
        data = await asyncio.to_thread(path.read_bytes)
    return data, image_mime_type or content_type_for(image_uri)


__all__ = ["check_image_source", "load_image"]
