"""Distances and positions on the WGS84 ellipsoid, plus planar measures."""

from __future__ import annotations

import math

from aistiles.errors import DEGREE_CRS, METRIC_CRS
from aistiles.geometry import CoordM, PointM

WGS84_A = 6378137.0
WGS84_F = 1 / 298.257223563
WGS84_B = WGS84_A * (1 - WGS84_F)
MEAN_EARTH_RADIUS = 6371008.8

_MAX_ITERATIONS = 200
_TOLERANCE = 1e-12


def _lonlat(point) -> tuple[float, float]:
    if isinstance(point, (PointM, CoordM)):
        return point.x, point.y
    x, y, *_ = point
    return float(x), float(y)


def _check_crs(point, allowed: tuple[int, ...], unit: str) -> None:
    crs = getattr(point, "crs", None)
    if crs is not None and crs not in allowed:
        raise ValueError(f"Given CRS: {crs} uses non-{unit} Uom")


def _normalize_lon(lon: float) -> float:
    return (lon + 180.0) % 360.0 - 180.0


def inverse(lon1: float, lat1: float, lon2: float, lat2: float) -> tuple[float, float, float]:
    """Return ``(distance, azimuth1, azimuth2)`` between two points, in metres and degrees."""
    f = WGS84_F
    big_l = math.radians(lon2 - lon1)
    u1 = math.atan((1 - f) * math.tan(math.radians(lat1)))
    u2 = math.atan((1 - f) * math.tan(math.radians(lat2)))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

    lam = big_l
    for _ in range(_MAX_ITERATIONS):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.hypot(
            cos_u2 * sin_lam, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam
        )
        if sin_sigma == 0.0:
            return 0.0, 0.0, 0.0
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos2_alpha = 1 - sin_alpha**2
        cos_2sm = cos_sigma - 2 * sin_u1 * sin_u2 / cos2_alpha if cos2_alpha != 0 else 0.0
        c = f / 16 * cos2_alpha * (4 + f * (4 - 3 * cos2_alpha))
        previous = lam
        lam = big_l + (1 - c) * f * sin_alpha * (
            sigma + c * sin_sigma * (cos_2sm + c * cos_sigma * (-1 + 2 * cos_2sm**2))
        )
        if abs(lam - previous) < _TOLERANCE:
            break

    u_sq = cos2_alpha * (WGS84_A**2 - WGS84_B**2) / WGS84_B**2
    big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = big_b * sin_sigma * (
        cos_2sm
        + big_b
        / 4
        * (
            cos_sigma * (-1 + 2 * cos_2sm**2)
            - big_b / 6 * cos_2sm * (-3 + 4 * sin_sigma**2) * (-3 + 4 * cos_2sm**2)
        )
    )
    distance = WGS84_B * big_a * (sigma - delta_sigma)
    sin_lam, cos_lam = math.sin(lam), math.cos(lam)
    azi1 = math.atan2(cos_u2 * sin_lam, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam)
    azi2 = math.atan2(cos_u1 * sin_lam, -sin_u1 * cos_u2 + cos_u1 * sin_u2 * cos_lam)
    return distance, math.degrees(azi1), math.degrees(azi2)


def direct(lon: float, lat: float, azimuth: float, distance: float) -> tuple[float, float]:
    """Return ``(lon, lat)`` reached by travelling ``distance`` metres along ``azimuth``."""
    f = WGS84_F
    alpha1 = math.radians(azimuth)
    sin_a1, cos_a1 = math.sin(alpha1), math.cos(alpha1)
    tan_u1 = (1 - f) * math.tan(math.radians(lat))
    cos_u1 = 1 / math.sqrt(1 + tan_u1**2)
    sin_u1 = tan_u1 * cos_u1
    sigma1 = math.atan2(tan_u1, cos_a1)
    sin_alpha = cos_u1 * sin_a1
    cos2_alpha = 1 - sin_alpha**2
    u_sq = cos2_alpha * (WGS84_A**2 - WGS84_B**2) / WGS84_B**2
    big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))

    base = distance / (WGS84_B * big_a)
    sigma = base
    for _ in range(_MAX_ITERATIONS):
        cos_2sm = math.cos(2 * sigma1 + sigma)
        sin_sigma, cos_sigma = math.sin(sigma), math.cos(sigma)
        delta_sigma = big_b * sin_sigma * (
            cos_2sm
            + big_b
            / 4
            * (
                cos_sigma * (-1 + 2 * cos_2sm**2)
                - big_b / 6 * cos_2sm * (-3 + 4 * sin_sigma**2) * (-3 + 4 * cos_2sm**2)
            )
        )
        previous = sigma
        sigma = base + delta_sigma
        if abs(sigma - previous) < _TOLERANCE:
            break

    sin_sigma, cos_sigma = math.sin(sigma), math.cos(sigma)
    cos_2sm = math.cos(2 * sigma1 + sigma)
    tmp = sin_u1 * sin_sigma - cos_u1 * cos_sigma * cos_a1
    lat2 = math.atan2(
        sin_u1 * cos_sigma + cos_u1 * sin_sigma * cos_a1,
        (1 - f) * math.hypot(sin_alpha, tmp),
    )
    lam = math.atan2(sin_sigma * sin_a1, cos_u1 * cos_sigma - sin_u1 * sin_sigma * cos_a1)
    c = f / 16 * cos2_alpha * (4 + f * (4 - 3 * cos2_alpha))
    big_l = lam - (1 - c) * f * sin_alpha * (
        sigma + c * sin_sigma * (cos_2sm + c * cos_sigma * (-1 + 2 * cos_2sm**2))
    )
    return _normalize_lon(lon + math.degrees(big_l)), math.degrees(lat2)


def distance(origin, destination) -> float:
    """Geodesic distance in metres between two lon/lat points."""
    _check_crs(origin, DEGREE_CRS, "degree")
    _check_crs(destination, DEGREE_CRS, "degree")
    lon1, lat1 = _lonlat(origin)
    lon2, lat2 = _lonlat(destination)
    return inverse(lon1, lat1, lon2, lat2)[0]


def haversine_distance(origin, destination) -> float:
    """Great-circle distance in metres on a sphere of the mean earth radius."""
    _check_crs(origin, DEGREE_CRS, "degree")
    _check_crs(destination, DEGREE_CRS, "degree")
    lon1, lat1 = _lonlat(origin)
    lon2, lat2 = _lonlat(destination)
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    return MEAN_EARTH_RADIUS * 2 * math.asin(math.sqrt(a))


def euclidean_distance(origin, destination) -> float:
    """Planar distance between two points in a metric CRS."""
    _check_crs(origin, METRIC_CRS, "meter")
    _check_crs(destination, METRIC_CRS, "meter")
    x1, y1 = _lonlat(origin)
    x2, y2 = _lonlat(destination)
    return math.hypot(x2 - x1, y2 - y1)


def point_at_distance_between(origin, destination, distance: float) -> tuple[float, float]:
    """Return the ``(lon, lat)`` that lies ``distance`` metres from ``origin`` towards ``destination``."""
    lon1, lat1 = _lonlat(origin)
    if distance == 0.0:
        return lon1, lat1
    lon2, lat2 = _lonlat(destination)
    bearing = (inverse(lon1, lat1, lon2, lat2)[1] + 360.0) % 360.0
    return direct(lon1, lat1, bearing, distance)