"""Image configuration exports."""

from . import defaults, models
from .defaults import *  # noqa: F401,F403
from .models import *  # noqa: F401,F403

__all__ = [
    *defaults.__all__,
    *models.__all__,
]
