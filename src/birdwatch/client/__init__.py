"""HTTP client for the Birdwatch REST API."""

from birdwatch.client.api_client import ApiNotFoundError, ApiRequestError, BirdwatchClient

__all__ = [
    "ApiNotFoundError",
    "ApiRequestError",
    "BirdwatchClient",
]
