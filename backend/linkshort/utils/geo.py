from typing import Optional

# Country codes Cloudflare sends when it cannot geolocate (unknown, Tor)
UNKNOWN_COUNTRIES = {"XX", "T1"}


class GeoData:
    """Container for geo data"""
    def __init__(self, country: Optional[str] = None, city: Optional[str] = None):
        self.country = country
        self.city = city


def _header(headers, name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def get_geo_data(headers) -> GeoData:
    """
    Read visitor location from edge proxy headers.

    The values are trusted as provided by the edge (cf-ipcountry, cf-ipcity);
    no lookup is performed.
    """
    country = _header(headers, "cf-ipcountry")
    if country and country.upper() in UNKNOWN_COUNTRIES:
        country = None

    return GeoData(
        country=country,
        city=_header(headers, "cf-ipcity"),
    )
