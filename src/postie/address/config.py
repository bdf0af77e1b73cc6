"""Parser settings via dataclass.

Library calls use :data:`DEFAULT_SETTINGS`, which is unbounded and never
reads the environment.  Tools that want operator-tunable limits build
their settings with :meth:`ParserSettings.from_env`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ENV_MAX_COMMENT_DEPTH = "POSTIE_MAX_COMMENT_DEPTH"
ENV_MAX_INPUT_LENGTH = "POSTIE_MAX_INPUT_LENGTH"


@dataclass(frozen=True)
class ParserSettings:
    """Limits applied while parsing an addr-spec.

    ``None`` disables a limit.  ``max_comment_depth`` counts the
    outermost comment as depth 1.
    """

    max_comment_depth: int | None = None
    max_input_length: int | None = None

    def __post_init__(self) -> None:
        for name in ("max_comment_depth", "max_input_length"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @classmethod
    def from_env(cls) -> ParserSettings:
        """Build settings from ``POSTIE_*`` environment variables.

        Absent or empty variables leave the corresponding limit disabled.

        Raises:
            ValueError: If a variable is not a non-negative integer.
        """
        settings = cls(
            max_comment_depth=_int_from_env(ENV_MAX_COMMENT_DEPTH),
            max_input_length=_int_from_env(ENV_MAX_INPUT_LENGTH),
        )
        logger.debug("Loaded parser settings from environment: %s", settings)
        return settings


def _int_from_env(var: str) -> int | None:
    raw = os.getenv(var, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None


DEFAULT_SETTINGS = ParserSettings()
