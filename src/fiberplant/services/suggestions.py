#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import threading

from fiberplant.services.providers import OsrmRoutingProvider, NominatimLocationSearch

logger = logging.getLogger(__name__)


class SuggestionService:
    """Sugerencias asíncronas de longitud de tramo y de coordenadas de punto.

    Cada consulta se lanza en un hilo. Al llegar el resultado sólo se
    aplica si el objeto consultado sigue siendo el mismo en la red y su
    editor sigue abierto; si no, se descarta. Nunca modifica la topología:
    los resultados quedan en ``length_suggestions`` / ``location_suggestions``.
    """

    def __init__(self, editor, routing_provider=None, location_search=None):
        self.editor = editor
        self.routing_provider = routing_provider or OsrmRoutingProvider()
        self.location_search = location_search or NominatimLocationSearch()
        self.length_suggestions = {}
        self.location_suggestions = {}
        self.discarded = 0
        self._lock = threading.Lock()

    def _start(self, name, target, *args):
        thread = threading.Thread(target=target, args=args, name=name, daemon=True)
        thread.start()
        return thread

    # --- Longitud de tramo ---

    def request_section_length(self, section_id, waypoints=None, callback=None):
        """Lanza la consulta de distancia por carretera de un tramo.

        Returns:
            threading.Thread en curso, o None si faltan coordenadas o el tramo no existe
        """
        network = self.editor.network
        section = network.get_section(section_id)
        if section is None:
            logger.warning(f"request_section_length: tramo {section_id} no encontrado")
            return None
        start = section.start_coordinate or network.resolve_coordinates(section.start_point_id)
        end = section.end_coordinate or network.resolve_coordinates(section.end_point_id)
        if start is None or end is None:
            logger.info(f"Tramo {section_id} sin coordenadas completas; no se sugiere longitud")
            return None
        return self._start(f"length-{section_id}", self._run_length,
                           section_id, section, start, end, waypoints, callback)

    def _run_length(self, section_id, token, start, end, waypoints, callback):
        try:
            result = self.routing_provider.route(start, end, waypoints)
        except Exception as e:
            logger.error(f"Error en proveedor de rutas para tramo {section_id}: {e}")
            return
        self._deliver_length(section_id, token, result, callback)

    def _deliver_length(self, section_id, token, result, callback):
        with self._lock:
            current = self.editor.network.get_section(section_id)
            if current is not token or not self.editor.is_section_open(section_id):
                self.discarded += 1
                logger.info(f"Sugerencia de longitud para {section_id} descartada (tramo cerrado o sustituido)")
                return
            if not result:
                return
            distance_km = round(result['distance_km'], 3)
            self.length_suggestions[section_id] = distance_km
        logger.debug(f"Longitud sugerida para {section_id}: {distance_km} km")
        if callback:
            callback(section_id, distance_km)

    # --- Coordenadas de punto ---

    def request_point_location(self, point_id, query, callback=None):
        """Lanza una búsqueda de lugar para rellenar las coordenadas de un punto."""
        point = self.editor.network.get_point(point_id)
        if point is None:
            logger.warning(f"request_point_location: punto {point_id} no encontrado")
            return None
        return self._start(f"location-{point_id}", self._run_location, point_id, point, query, callback)

    def _run_location(self, point_id, token, query, callback):
        try:
            results = self.location_search.search(query)
        except Exception as e:
            logger.error(f"Error en búsqueda de lugar para punto {point_id}: {e}")
            return
        with self._lock:
            current = self.editor.network.get_point(point_id)
            if current is not token or not self.editor.is_point_open(point_id):
                self.discarded += 1
                logger.info(f"Resultado de búsqueda para {point_id} descartado (punto cerrado o sustituido)")
                return
            self.location_suggestions[point_id] = results
        if callback:
            callback(point_id, results)
