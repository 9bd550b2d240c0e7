from .exceptions import OverpassPayloadError, OverpassRequestError
from .overpass_client import OverpassClient

__all__ = [
    "OverpassClient",
    "OverpassRequestError",
    "OverpassPayloadError",
]
