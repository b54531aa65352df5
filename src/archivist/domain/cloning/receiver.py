"""Construction of the destination record for one clone invocation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .configuration import CloneConfiguration

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReceiverResult:
    """Outcome of building a receiver.

    ``fell_back`` is set when the configured target could not be built and
    the source's own type was used instead; ``error`` holds the reason.
    """

    receiver: object
    receiver_type: type
    fell_back: bool = False
    error: Exception | None = None


class ReceiverFactory:
    """Builds the receiver at most once; later calls return the same result."""

    def __init__(self, config: CloneConfiguration, source_type: type) -> None:
        self.config = config
        self.source_type = source_type
        self._result: ReceiverResult | None = None

    def get_or_create(self) -> ReceiverResult:
        if self._result is None:
            self._result = self._build()
        return self._result

    @property
    def built(self) -> bool:
        return self._result is not None

    def _build(self) -> ReceiverResult:
        try:
            target_type = self.config.resolve_target(self.source_type)
            receiver = target_type()
        except Exception as exc:  # noqa: BLE001
            return self._fall_back(exc)
        return ReceiverResult(receiver=receiver, receiver_type=target_type)

    def _fall_back(self, error: Exception) -> ReceiverResult:
        log.warning(
            "Could not build clone target %r for %s (%s); using %s instead",
            self.config.target,
            self.source_type.__qualname__,
            error,
            self.source_type.__qualname__,
        )
        return ReceiverResult(
            receiver=self.source_type(),
            receiver_type=self.source_type,
            fell_back=True,
            error=error,
        )
