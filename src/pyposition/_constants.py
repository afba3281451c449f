"""Internal constants shared across the library."""

USER_AGENT = "pyposition/1.0"

GEOCODING_URL = "https://maps.googleapis.com/maps/api/geocode/json"
TIMEZONE_URL = "https://maps.googleapis.com/maps/api/timezone/json"
GEOLOCATION_URL = "https://www.googleapis.com/geolocation/v1/geolocate"

# Development keys allow roughly a hundred calls a day.
DEFAULT_DAILY_LIMIT = 100

# GeoIP city-level answers are only good to a few tens of kilometres.
DEFAULT_GEOIP_ACCURACY = 20000

# HTTP statuses worth another attempt.
RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

# ------------------------------------------------------------------
# Request signature keys, in classification order
# ------------------------------------------------------------------

KEY_GPS_POSITION = "gpsPosition"
KEY_IP_ADDRESS = "ipAddress"
KEY_GPS_TIMEZONE = "gpsTimezone"
KEY_CELL_TOWERS = "cellTowers"
KEY_WIFI_ACCESS_POINTS = "wifiAccessPoints"
KEY_RADIO_TYPE = "radioType"
