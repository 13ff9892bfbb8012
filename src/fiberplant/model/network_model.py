#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import threading
from datetime import datetime

import networkx as nx

from fiberplant.constants import (
    NETWORK_BACKBONE, NETWORK_OPERATIONAL, UNKNOWN_POINT_LABEL
)
from fiberplant.model.entities import CableSection, InfrastructurePoint
from fiberplant.model.geo import to_coordinates, coordinates_to_dict

# Logger por defecto
default_logger = logging.getLogger(__name__)


def _open_end(section_id, side):
    """Nodo sintético para un extremo de tramo sin punto asignado."""
    return ('open', section_id, side)


def build_topology_graph(networks):
    """Construye un MultiGraph con los tramos de varias redes.

    Nodos: IDs de puntos/sitios (o extremos abiertos sintéticos).
    Aristas: una por tramo, con clave = ID del tramo y atributos
    section, network_id, network_name y order (orden de descubrimiento).
    """
    graph = nx.MultiGraph()
    order = 0
    for network in networks:
        for section in network.sections.values():
            u = section.start_point_id or _open_end(section.id, 'start')
            v = section.end_point_id or _open_end(section.id, 'end')
            graph.add_edge(
                u, v,
                key=section.id,
                section=section,
                network_id=network.id,
                network_name=network.name,
                weight=section.length_km,
                order=order,
            )
            order += 1
    return graph


class NetworkModel:
    """Agregado de red (liaison): conjunto de tramos y de puntos de infraestructura.

    Las colecciones son diccionarios indexados por ID que se sustituyen
    completos en cada mutación, de modo que un lector que conserve una
    instantánea anterior no ve cambios a mitad de lectura.
    """

    def __init__(self, network_id, name, category=NETWORK_BACKBONE, status=NETWORK_OPERATIONAL,
                 sections=None, points=None, manual_distance_km=0.0,
                 start_coordinates=None, end_coordinates=None, sites=None):
        """Inicializa el agregado.

        Args:
            network_id: ID de la red (clave de persistencia)
            name: Nombre visible de la red
            sections: iterable de CableSection
            points: iterable de InfrastructurePoint
            manual_distance_km: distancia introducida a mano, usada si no hay tramos
            sites: dict id -> Site, contexto de sólo lectura
        """
        self.id = network_id
        self.name = name
        self.category = category
        self.status = status
        self.sections = {s.id: s for s in sections or []}
        self.points = {p.id: p for p in points or []}
        self.manual_distance_km = float(manual_distance_km or 0.0)
        self.start_coordinates = to_coordinates(start_coordinates)
        self.end_coordinates = to_coordinates(end_coordinates)
        self.sites = dict(sites or {})
        self.graph_lock = threading.Lock()  # Lock para proteger las colecciones
        self._graph_cache = None
        self._cache_valid = False

    # --- Consultas ---

    def get_section(self, section_id):
        return self.sections.get(section_id)

    def get_point(self, point_id):
        return self.points.get(point_id)

    def section_ids(self):
        return list(self.sections)

    def sections_at_point(self, point_id):
        """Tramos de esta red cuyo inicio o fin es el punto."""
        return [s for s in self.sections.values() if s.references_point(point_id)]

    def resolve_coordinates(self, node_id):
        """Coordenadas de un punto o sitio por ID; None si la referencia no se resuelve."""
        point = self.points.get(node_id)
        if point is not None and point.coordinates:
            return point.coordinates
        site = self.sites.get(node_id)
        if site is not None:
            return site.coordinates
        return None

    def resolve_point_label(self, node_id):
        """Nombre de un punto o sitio; una referencia colgante no es un error."""
        point = self.points.get(node_id)
        if point is not None:
            return point.name
        site = self.sites.get(node_id)
        if site is not None:
            return site.name
        return UNKNOWN_POINT_LABEL

    @property
    def distance_km(self):
        """Suma de los tramos no alojados; sin tramos, la distancia manual."""
        if not self.sections:
            return self.manual_distance_km
        return sum(s.length_km for s in self.sections.values() if not s.is_hosted)

    def derived_start_coordinates(self):
        if self.sections:
            first = next(iter(self.sections.values()))
            coords = first.start_coordinate or self.resolve_coordinates(first.start_point_id)
            if coords:
                return coords
        return self.start_coordinates

    def derived_end_coordinates(self):
        if self.sections:
            last = list(self.sections.values())[-1]
            coords = last.end_coordinate or self.resolve_coordinates(last.end_point_id)
            if coords:
                return coords
        return self.end_coordinates

    # --- Mutaciones (copia en escritura) ---

    def _invalidate(self):
        self._cache_valid = False
        self._graph_cache = None

    def put_section(self, section):
        """Inserta o sustituye un tramo conservando su posición."""
        with self.graph_lock:
            sections = dict(self.sections)
            sections[section.id] = section
            self.sections = sections
            self._invalidate()

    def replace_section(self, section_id, new_sections):
        """Sustituye un tramo por una lista de tramos en la misma posición."""
        with self.graph_lock:
            if section_id not in self.sections:
                return False
            sections = {}
            for sid, section in self.sections.items():
                if sid == section_id:
                    for new in new_sections:
                        sections[new.id] = new
                else:
                    sections[sid] = section
            self.sections = sections
            self._invalidate()
            return True

    def remove_section(self, section_id):
        with self.graph_lock:
            if section_id not in self.sections:
                return None
            sections = dict(self.sections)
            removed = sections.pop(section_id)
            self.sections = sections
            self._invalidate()
            return removed

    def remove_sections_referencing(self, point_id):
        """Elimina todos los tramos con el punto como inicio o fin. Devuelve los eliminados."""
        with self.graph_lock:
            removed = [s for s in self.sections.values() if s.references_point(point_id)]
            if removed:
                self.sections = {sid: s for sid, s in self.sections.items()
                                 if not s.references_point(point_id)}
                self._invalidate()
            return removed

    def put_point(self, point):
        with self.graph_lock:
            points = dict(self.points)
            points[point.id] = point
            self.points = points
            self._invalidate()

    def remove_point(self, point_id):
        with self.graph_lock:
            if point_id not in self.points:
                return None
            points = dict(self.points)
            removed = points.pop(point_id)
            self.points = points
            self._invalidate()
            return removed

    # --- Grafo de topología ---

    def get_topology_graph(self, sibling_networks=()):
        """Devuelve el MultiGraph de la red (cacheado si no hay redes hermanas)."""
        if sibling_networks:
            return build_topology_graph([self] + [n for n in sibling_networks if n.id != self.id])
        with self.graph_lock:
            if not self._cache_valid or self._graph_cache is None:
                default_logger.debug(f"[TOPOLOGY] Construyendo grafo para red {self.id}")
                self._graph_cache = build_topology_graph([self])
                self._cache_valid = True
            return self._graph_cache

    def connected_groups(self):
        """Grupos de puntos conectados físicamente (sin extremos abiertos)."""
        graph = self.get_topology_graph()
        groups = []
        for component in nx.connected_components(graph):
            nodes = sorted(n for n in component if not isinstance(n, tuple))
            if nodes:
                groups.append(nodes)
        return groups

    def shortest_route(self, from_id, to_id):
        """Secuencia de IDs de tramo del camino más corto (km) entre dos nodos, o None."""
        graph = self.get_topology_graph()
        if from_id not in graph or to_id not in graph:
            return None
        try:
            nodes = nx.shortest_path(graph, from_id, to_id, weight='weight')
        except nx.NetworkXNoPath:
            return None
        route = []
        for u, v in zip(nodes, nodes[1:]):
            edges = graph.get_edge_data(u, v)
            key = min(edges, key=lambda k: edges[k]['weight'])
            route.append(key)
        return route

    # --- Serialización ---

    def to_dict(self):
        """Registro serializable entregado al colaborador de persistencia."""
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'status': self.status,
            'manualDistanceKm': self.manual_distance_km,
            'distanceKm': self.distance_km,
            'startCoordinates': coordinates_to_dict(self.derived_start_coordinates()),
            'endCoordinates': coordinates_to_dict(self.derived_end_coordinates()),
            'sections': [s.to_dict() for s in self.sections.values()],
            'infrastructurePoints': [p.to_dict() for p in self.points.values()],
            'timestamp': datetime.now().isoformat(),
        }

    @classmethod
    def from_dict(cls, data, sites=None):
        return cls(
            data['id'], data.get('name', ''),
            category=data.get('category', NETWORK_BACKBONE),
            status=data.get('status', NETWORK_OPERATIONAL),
            sections=[CableSection.from_dict(s) for s in data.get('sections') or []],
            points=[InfrastructurePoint.from_dict(p) for p in data.get('infrastructurePoints') or []],
            manual_distance_km=data.get('manualDistanceKm', data.get('distanceKm', 0.0)),
            start_coordinates=data.get('startCoordinates'),
            end_coordinates=data.get('endCoordinates'),
            sites=sites,
        )

    def __repr__(self):
        return f"NetworkModel({self.id!r}, {len(self.sections)} tramos, {len(self.points)} puntos)"
