"""Deliver generated media to storage or inline them in the response."""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional, Sequence

from core.providers.types import MediaOutput
from infrastructure.storage.resolver import MediaLocationResolver, destination_for_index

logger = logging.getLogger(__name__)


async def deliver_outputs(
    outputs: Sequence[MediaOutput],
    resolver: MediaLocationResolver,
    output_uri: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Store each output at ``output_uri`` or encode it as base64.

    A single output is written to ``output_uri`` exactly. Several outputs are
    written to ``stem_{i}.ext`` beside it. Outputs that the vendor already
    stored remotely and that carry no bytes are reported by their URI.
    """

    delivered: List[Dict[str, Any]] = []
    for index, output in enumerate(outputs):
        item: Dict[str, Any] = output.metadata()
        if output.uri and not output.data:
            item["uri"] = output.uri
        elif output_uri:
            destination = output_uri if len(outputs) == 1 else destination_for_index(output_uri, index, output.mime_type)
            item["uri"] = await resolver.store(output.data, destination, output.mime_type)
            logger.info("Stored output %d at %s", index, item["uri"])
        else:
            item["data_base64"] = base64.b64encode(output.data).decode("ascii")
        delivered.append(item)
    return delivered


__all__ = ["deliver_outputs"]
