from __future__ import annotations

import math
from typing import Iterable, List, Optional

from .models import Listing

EARTH_RADIUS_MILES = 3959


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles, rounded to one decimal place."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_MILES * c, 1)


def add_distance(listings: Iterable[Listing], lat: Optional[float], lng: Optional[float]) -> List[Listing]:
    if lat is None or lng is None:
        return list(listings)
    results: List[Listing] = []
    for listing in listings:
        if listing.has_coordinates:
            listing = listing.with_distance(haversine_miles(lat, lng, listing.latitude, listing.longitude))
        results.append(listing)
    return results
