"""pyposition - Async position resolution from GPS, IP, cell and WiFi signals."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyposition")
except PackageNotFoundError:
    __version__ = "0+local"
from pyposition._cache import ResolutionCache, fingerprint
from pyposition.config import PositionConfig
from pyposition.exceptions import (
    GeoIpLookupError,
    PositionConfigError,
    PositionError,
    ProviderError,
    ProviderResponseError,
    ProviderTransportError,
)
from pyposition.gateway import GoogleProviderGateway, ProviderGateway
from pyposition.models import (
    Address,
    CellTower,
    CellTowersRequest,
    Coordinates,
    GpsPositionRequest,
    GpsTimezoneRequest,
    IpAddress,
    IpAddressRequest,
    PositionRequest,
    PositionResponse,
    TimeZone,
    WifiAccessPoint,
    WifiAccessPointsRequest,
)
from pyposition.quota import QuotaCounter, QuotaState
from pyposition.resolver import PositionResolver
from pyposition.validation import classify, is_public_ipv4

__all__ = [
    "__version__",
    "Address",
    "CellTower",
    "CellTowersRequest",
    "Coordinates",
    "GeoIpLookupError",
    "GoogleProviderGateway",
    "GpsPositionRequest",
    "GpsTimezoneRequest",
    "IpAddress",
    "IpAddressRequest",
    "PositionConfig",
    "PositionConfigError",
    "PositionError",
    "PositionRequest",
    "PositionResolver",
    "PositionResponse",
    "ProviderError",
    "ProviderGateway",
    "ProviderResponseError",
    "ProviderTransportError",
    "QuotaCounter",
    "QuotaState",
    "ResolutionCache",
    "TimeZone",
    "WifiAccessPoint",
    "WifiAccessPointsRequest",
    "classify",
    "fingerprint",
    "is_public_ipv4",
]
