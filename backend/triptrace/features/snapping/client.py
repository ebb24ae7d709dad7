"""
Snap-to-roads API client.

One GET per chunk:
    GET {api_url}?path=lat,lon|lat,lon|...&interpolate=true&key=...

The response must carry a non-empty `snappedPoints` array; anything else
is raised as a RoadsError subclass for the caller to handle.
"""

import logging
from typing import List, Optional, Sequence

import httpx
from pydantic import ValidationError

from triptrace.features.snapping.schemas import SnapToRoadsResponse
from triptrace.features.tracking.models import Coordinate, HasLatLon

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class RoadsError(Exception):
    """Base snap-to-roads error."""
    pass


class RoadsAPIError(RoadsError):
    """Service answered with a non-2xx status."""

    def __init__(self, status: int, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(f"Roads API error {status}: {detail}")


class RoadsNetworkError(RoadsError):
    """Transport failure or timeout."""
    pass


class RoadsResponseError(RoadsError):
    """Body is not valid JSON, fails validation, or has no snapped points."""
    pass


# =============================================================================
# Client
# =============================================================================

def build_path_param(points: Sequence[HasLatLon]) -> str:
    """Format points as the `path` query parameter."""
    return "|".join(f"{p.latitude},{p.longitude}" for p in points)


class RoadsClient:
    """
    Async client for the snap-to-roads service.

    An httpx.AsyncClient can be injected (shared connection pool, tests);
    otherwise a short-lived one is opened per request.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._http_client = http_client

    async def snap_path(self, points: Sequence[HasLatLon]) -> List[Coordinate]:
        """
        Snap one chunk of points to roads, with interpolation.

        Returns:
            Snapped coordinates in service order (non-empty)

        Raises:
            RoadsAPIError: Non-2xx status
            RoadsNetworkError: Connection problem or timeout
            RoadsResponseError: Malformed or empty response
        """
        params = {
            "path": build_path_param(points),
            "interpolate": "true",
            "key": self.api_key,
        }

        try:
            if self._http_client is not None:
                response = await self._http_client.get(
                    self.api_url, params=params, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(
                        self.api_url, params=params, timeout=self.timeout
                    )
        except httpx.TimeoutException as e:
            raise RoadsNetworkError(f"Roads API timed out: {e}") from e
        except httpx.HTTPError as e:
            raise RoadsNetworkError(f"Roads API request failed: {e}") from e

        if not response.is_success:
            raise RoadsAPIError(response.status_code, response.text[:200])

        try:
            body = SnapToRoadsResponse.model_validate(response.json())
        except (ValidationError, ValueError) as e:
            raise RoadsResponseError(f"Malformed Roads API response: {e}") from e

        if not body.snapped_points:
            raise RoadsResponseError("Roads API returned no snapped points")

        if body.warning_message:
            logger.info(f"Roads API warning: {body.warning_message}")

        return [
            Coordinate(sp.location.latitude, sp.location.longitude)
            for sp in body.snapped_points
        ]
