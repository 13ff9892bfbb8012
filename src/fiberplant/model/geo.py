#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Distancias geodésicas en km sobre coordenadas (lat, lng).
"""

import math

from fiberplant.constants import EARTH_RADIUS_KM


def haversine_km(p1, p2):
    """Distancia de gran círculo entre dos puntos (lat, lng) en km."""
    lat1, lng1 = p1
    lat2, lng2 = p2
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def polyline_length_km(coords):
    """Longitud de una polilínea [(lat, lng), ...]."""
    total = 0.0
    for i in range(1, len(coords)):
        total += haversine_km(coords[i - 1], coords[i])
    return total


def to_coordinates(value):
    """
    Normaliza una coordenada a tupla (lat, lng).
    Acepta tuplas/listas o dicts {'lat','lng'}; devuelve None si no es resoluble.
    (0, 0) se trata como "sin coordenada", igual que los formularios de edición.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        lat, lng = value.get('lat'), value.get('lng')
    else:
        try:
            lat, lng = value
        except (TypeError, ValueError):
            return None
    if lat is None or lng is None:
        return None
    lat, lng = float(lat), float(lng)
    if not lat and not lng:
        return None
    return (lat, lng)


def coordinates_to_dict(coords):
    if coords is None:
        return None
    return {'lat': coords[0], 'lng': coords[1]}
