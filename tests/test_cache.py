from __future__ import annotations

from pyposition._cache import ResolutionCache, fingerprint
from pyposition.validation import classify


def _request(data: dict) -> object:
    request = classify(data)
    assert request is not None
    return request


def test_fingerprint_ignores_key_order() -> None:
    a = _request(
        {
            "cellTowers": [{"cellId": 1, "mobileCountryCode": 222, "mobileNetworkCode": 1, "locationAreaCode": 5}],
            "radioType": "gsm",
        }
    )
    b = _request(
        {
            "radioType": "gsm",
            "cellTowers": [{"locationAreaCode": 5, "mobileNetworkCode": 1, "mobileCountryCode": 222, "cellId": 1}],
        }
    )

    assert fingerprint(a) == fingerprint(b)


def test_fingerprint_distinguishes_kind() -> None:
    gps = _request({"gpsPosition": {"latitude": 45.0, "longitude": 9.0}})
    tz = _request({"gpsTimezone": {"latitude": 45.0, "longitude": 9.0}})

    assert fingerprint(gps) != fingerprint(tz)


def test_fingerprint_is_exact_on_coordinates() -> None:
    a = _request({"gpsPosition": {"latitude": 45.4774536, "longitude": 9.1906932}})
    b = _request({"gpsPosition": {"latitude": 45.4774537, "longitude": 9.1906932}})

    assert fingerprint(a) != fingerprint(b)


def test_fingerprint_keeps_sequence_order() -> None:
    ap1 = {"macAddress": "00:17:C2:F8:9C:60"}
    ap2 = {"macAddress": "00:25:C9:DF:AB:A7"}

    assert fingerprint(_request({"wifiAccessPoints": [ap1, ap2]})) != fingerprint(
        _request({"wifiAccessPoints": [ap2, ap1]})
    )


def test_lookup_and_insert() -> None:
    cache = ResolutionCache()
    request = _request({"gpsPosition": {"latitude": 45.0, "longitude": 9.0}})

    assert cache.lookup(request) is None
    cache.insert(request, {"address": {"text": "Milan"}})

    assert cache.lookup(request) == {"address": {"text": "Milan"}}
    assert len(cache) == 1


def test_empty_response_is_not_cached() -> None:
    cache = ResolutionCache()
    request = _request({"gpsPosition": {"latitude": 45.0, "longitude": 9.0}})

    cache.insert(request, {})

    assert cache.lookup(request) is None
    assert len(cache) == 0


def test_returned_values_are_copies() -> None:
    cache = ResolutionCache()
    request = _request({"gpsPosition": {"latitude": 45.0, "longitude": 9.0}})
    response = {"address": {"text": "Milan"}}
    cache.insert(request, response)

    response["address"]["text"] = "changed"
    hit = cache.lookup(request)
    assert hit == {"address": {"text": "Milan"}}

    hit["address"]["text"] = "changed again"
    assert cache.lookup(request) == {"address": {"text": "Milan"}}


def test_snapshot_restore_and_clear() -> None:
    cache = ResolutionCache()
    request = _request({"ipAddress": {"ipv4": "8.8.8.8"}})
    cache.insert(request, {"latitude": 38.0, "longitude": -97.0})

    restored = ResolutionCache(cache.snapshot())
    assert restored.lookup(request) == {"latitude": 38.0, "longitude": -97.0}

    restored.clear()
    assert len(restored) == 0
    assert len(cache) == 1
