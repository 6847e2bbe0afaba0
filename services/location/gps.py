"""Single-shot device geolocation"""

import asyncio
import logging
from typing import Optional, Protocol

from pydantic import ValidationError

from core.config import settings
from services.geocoding.errors import Denied, PositionError, Timeout, Unavailable
from services.geocoding.models import Coordinates

logger = logging.getLogger(__name__)


class PositionProvider(Protocol):
    """Platform geolocation backend (browser bridge, gpsd, mobile SDK, ...)"""

    async def get_current_position(self, high_accuracy: bool, maximum_age: float) -> Coordinates:
        """Raise PermissionError when the user or OS denies access"""
        ...


class GPSLocator:
    """Wraps the platform's current-position query; no retries"""

    def __init__(
        self,
        provider: Optional[PositionProvider] = None,
        timeout: Optional[float] = None,
        high_accuracy: Optional[bool] = None,
        maximum_age: float = 0,
    ):
        self.provider = provider
        self.timeout = settings.GPS_TIMEOUT_SECONDS if timeout is None else timeout
        self.high_accuracy = settings.GPS_HIGH_ACCURACY if high_accuracy is None else high_accuracy
        self.maximum_age = maximum_age

    async def locate(self) -> Coordinates:
        """
        Ask the device for its current position.

        Raises:
            Denied: permission refused
            Timeout: no fix within the timeout
            Unavailable: no provider, or the provider failed
        """
        if self.provider is None:
            raise Unavailable()

        try:
            position = await asyncio.wait_for(
                self.provider.get_current_position(self.high_accuracy, self.maximum_age),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Device position timed out after {self.timeout}s")
            raise Timeout() from e
        except PermissionError as e:
            logger.warning(f"Device position denied: {e}")
            raise Denied() from e
        except PositionError:
            raise
        except OSError as e:
            logger.warning(f"Device position unavailable: {e}")
            raise Unavailable() from e

        try:
            return Coordinates.model_validate(position)
        except ValidationError as e:
            logger.warning(f"Device reported an invalid position {position!r}")
            raise Unavailable() from e
