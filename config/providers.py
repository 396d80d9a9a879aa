"""Default provider selection per media kind.

Overridden at startup through ``IMAGE_PROVIDER``, ``VIDEO_PROVIDER``,
``SPEECH_PROVIDER`` and ``MUSIC_PROVIDER`` (see core.config.load_settings).
"""

from __future__ import annotations

from typing import Dict

DEFAULT_PROVIDERS: Dict[str, str] = {
    "image": "imagen",
    "video": "veo",
    "speech": "cloud_tts",
    "music": "lyria",
}

__all__ = ["DEFAULT_PROVIDERS"]
