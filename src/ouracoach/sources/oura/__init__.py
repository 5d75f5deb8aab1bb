from ouracoach.sources.oura.client import OuraAPIError, OuraClient

__all__ = [
    "OuraAPIError",
    "OuraClient",
]
