"""BaseService — abstract foundation for reth-build services.

Every service receives the frozen :class:`LauncherSettings` at
construction time and never consults the environment on its own.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rethbuild.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from rethbuild.config.settings import LauncherSettings

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class LaunchService(BaseService):
            def build_image(self) -> ServiceResult:
                ...
                return self._fail(op, "BUILD_FAILED", "...", exit_code=rc)
    """

    def __init__(self, settings: LauncherSettings) -> None:
        self._settings = settings

    @staticmethod
    def _fail(
        op: str,
        code: str,
        message: str,
        *,
        warnings: list[str] | None = None,
        data: dict[str, Any] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        """Build a failed result. Exit status goes in ``detail["exit_code"]``."""
        logger.debug("%s failed: %s", op, message)
        return ServiceResult(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError(code=code, message=message, detail=detail),
        )
