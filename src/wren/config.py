"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass, field
from typing import Any


def _default_exception_response() -> dict[str, Any]:
    return {"status": False}


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, handler_pool_max=256)
    """

    # Log HTTPError translations with their traceback
    debug: bool = False

    # Handler pool: idle instances retained per handler category
    handler_pool_max: int = 1024

    # Body written by ExceptionHandler for unexpected failures (status 500)
    exception_response: Any = field(default_factory=_default_exception_response)

    # Content type ParameterHandler sets before a view runs
    default_content_type: str = "application/json"

    # Seconds to wait for the full request body; None waits forever
    body_timeout: float | None = 30.0
