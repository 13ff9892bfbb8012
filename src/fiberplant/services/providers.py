#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging

import httpx

from fiberplant.config import provider_settings
from fiberplant.model.geo import polyline_length_km

logger = logging.getLogger(__name__)


class OsrmRoutingProvider:
    """Proveedor de distancia por carretera (OSRM). Sólo sugiere longitudes de tramo."""

    def __init__(self, base_url=None, timeout=None, user_agent=None):
        settings = provider_settings()
        self.base_url = (base_url or settings["osrm_url"]).rstrip("/")
        self.timeout = float(timeout or settings["timeout"])
        self.user_agent = user_agent or settings["user_agent"]

    @staticmethod
    def _format_coords(points):
        # OSRM espera "lng,lat"
        return ";".join(f"{lng},{lat}" for lat, lng in points)

    def route(self, start, end, waypoints=None):
        """Devuelve {'path': [(lat, lng), ...], 'distance_km': float} o None si falla.

        Si la respuesta no trae distancia, se mide la geometría devuelta.
        """
        points = [start] + list(waypoints or []) + [end]
        url = f"{self.base_url}/{self._format_coords(points)}"
        try:
            response = httpx.get(
                url,
                params={"overview": "full", "geometries": "geojson"},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Error obteniendo ruta OSRM: {exc}")
            return None

        routes = data.get("routes") or []
        if data.get("code") != "Ok" or not routes:
            logger.warning(f"OSRM sin ruta: {data.get('code')}")
            return None
        try:
            path = [(coord[1], coord[0]) for coord in routes[0]["geometry"]["coordinates"]]
            distance = routes[0].get("distance")
            distance_km = float(distance) / 1000.0 if distance is not None else polyline_length_km(path)
        except (KeyError, TypeError, ValueError, IndexError) as exc:
            logger.warning(f"Respuesta OSRM mal formada: {exc}")
            return None
        return {"path": path, "distance_km": distance_km}


class NominatimLocationSearch:
    """Búsqueda de lugares por texto libre (Nominatim). Sólo rellena coordenadas."""

    def __init__(self, base_url=None, timeout=None, user_agent=None):
        settings = provider_settings()
        self.base_url = (base_url or settings["nominatim_url"]).rstrip("/")
        self.timeout = float(timeout or settings["timeout"])
        self.user_agent = user_agent or settings["user_agent"]

    def search(self, query, limit=5):
        """Devuelve [{'name', 'latitude', 'longitude'}, ...]; lista vacía si falla."""
        if not query or not query.strip():
            return []
        params = {
            "q": query.strip(),
            "format": "json",
            "limit": max(limit, 1),
        }
        try:
            response = httpx.get(
                f"{self.base_url}/search",
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
            items = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Error en búsqueda de lugares '{query}': {exc}")
            return []

        results = []
        for item in items if isinstance(items, list) else []:
            try:
                results.append({
                    "name": item.get("display_name") or item.get("name") or query,
                    "latitude": float(item["lat"]),
                    "longitude": float(item["lon"]),
                })
            except (KeyError, TypeError, ValueError):
                continue
        return results
