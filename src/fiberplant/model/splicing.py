#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Motor de empalmes de un punto de infraestructura.

Descubre los tramos que llegan al punto (en la red propietaria y en las
redes hermanas), elige el cable entrante por defecto con una heurística
pura y gestiona el emparejamiento manual y automático de brins.
"""

import logging
from collections import namedtuple

from fiberplant.constants import (
    SCORE_PER_SERVICE, SCORE_CORE_SITE_BONUS, SCORE_ARRIVING_BONUS, SCORE_FIBER_DIVISOR,
    CATEGORY_SEMI_ARTERE, SEMI_ARTERE_MIN_OUTGOING, POINT_CATEGORIES, POINT_TYPES,
    WARN_CATEGORY_INCOMPLETE, WARN_DANGLING_CONNECTIONS
)
from fiberplant.model.entities import SplicingConnection
from fiberplant.model.network_model import build_topology_graph
from fiberplant.model.results import EditResult

logger = logging.getLogger(__name__)

# Resumen de sólo lectura usado por la heurística
SectionSummary = namedtuple(
    'SectionSummary',
    ['section_id', 'service_count', 'far_endpoint_is_core_site', 'point_is_end', 'fiber_count']
)


class ConnectedSection:
    """Tramo que termina en el punto, con la red a la que pertenece."""

    def __init__(self, section, network_id, network_name, is_foreign):
        self.section = section
        self.network_id = network_id
        self.network_name = network_name
        self.is_foreign = is_foreign

    @property
    def id(self):
        return self.section.id

    @property
    def label(self):
        if self.is_foreign:
            return f"{self.section.name} [{self.network_name}]"
        return self.section.name

    def __repr__(self):
        return f"ConnectedSection({self.label!r})"


def discover_connected_sections(point_id, network, sibling_networks=()):
    """Tramos (de la red y de las hermanas) cuyo inicio o fin es el punto.

    El orden es el de descubrimiento: primero la red propietaria, luego
    las hermanas, cada una en su orden de tramos.
    """
    graph = build_topology_graph([network] + [n for n in sibling_networks if n.id != network.id])
    if point_id not in graph:
        return []
    edges = sorted(graph.edges(point_id, keys=True, data=True), key=lambda e: e[3]['order'])
    found = []
    seen = set()
    for _u, _v, key, data in edges:
        if key in seen:
            continue
        seen.add(key)
        found.append(ConnectedSection(data['section'], data['network_id'], data['network_name'],
                                      data['network_id'] != network.id))
    return found


def summarize_section(section, point_id, sites):
    """Construye el SectionSummary de un tramo visto desde un punto."""
    far_id = section.far_endpoint_id(point_id)
    site = sites.get(far_id) if far_id else None
    return SectionSummary(
        section_id=section.id,
        service_count=section.service_count,
        far_endpoint_is_core_site=bool(site is not None and site.is_core),
        point_is_end=section.end_point_id == point_id,
        fiber_count=section.fiber_count,
    )


def score_section(summary):
    """Puntuación de un tramo como candidato a cable entrante."""
    score = SCORE_PER_SERVICE * summary.service_count
    if summary.far_endpoint_is_core_site:
        score += SCORE_CORE_SITE_BONUS
    if summary.point_is_end:
        score += SCORE_ARRIVING_BONUS
    return score + summary.fiber_count / SCORE_FIBER_DIVISOR


def pick_default_incoming(summaries):
    """Índice del resumen con mayor puntuación (el primero en caso de empate), o None."""
    best_index = None
    best_score = None
    for index, summary in enumerate(summaries):
        score = score_section(summary)
        if best_score is None or score > best_score:
            best_index, best_score = index, score
    return best_index


def validate_category(category, outgoing_count):
    """Comprobación suave de cardinalidad. Devuelve una lista de advertencias."""
    warnings = []
    if category == CATEGORY_SEMI_ARTERE and outgoing_count < SEMI_ARTERE_MIN_OUTGOING:
        warnings.append({
            'code': WARN_CATEGORY_INCOMPLETE,
            'message': (f"Punto SEMI_ARTERE con {outgoing_count} salida(s); "
                        f"se esperan al menos {SEMI_ARTERE_MIN_OUTGOING}"),
        })
    return warnings


class SpliceSession:
    """Sesión de edición de empalmes de un punto.

    Trabaja sobre una copia de las conexiones del punto; ``save`` la
    vuelca en la red propietaria.
    """

    def __init__(self, editor, point, sites=None):
        self.editor = editor
        self.point_id = point.id
        self.name = point.name
        self.point_type = point.point_type
        self.category = point.category
        self.description = point.description
        self.coordinates = point.coordinates
        self.connections = list(point.connections)
        self.sites = dict(editor.network.sites)
        self.sites.update(sites or {})
        self.incoming_section_id = None
        self.active_outgoing_id = None
        self.pending_incoming_strand_id = None
        self.refresh()

    # --- Descubrimiento ---

    def connected_sections(self):
        return discover_connected_sections(self.point_id, self.editor.network,
                                           self.editor.sibling_networks)

    def refresh(self):
        """Revalida el cable entrante y el saliente activo contra la topología actual."""
        connected = self.connected_sections()
        ids = [c.id for c in connected]
        if self.incoming_section_id not in ids:
            summaries = [summarize_section(c.section, self.point_id, self.sites) for c in connected]
            index = pick_default_incoming(summaries)
            self.incoming_section_id = ids[index] if index is not None else None
            self.pending_incoming_strand_id = None
            logger.debug(f"[SPLICE] Entrante por defecto en {self.point_id}: {self.incoming_section_id}")
        outgoing_ids = [i for i in ids if i != self.incoming_section_id]
        if self.active_outgoing_id not in outgoing_ids:
            self.active_outgoing_id = outgoing_ids[0] if outgoing_ids else None
        return connected

    def incoming(self):
        for c in self.refresh():
            if c.id == self.incoming_section_id:
                return c
        return None

    def outgoing_candidates(self):
        return [c for c in self.refresh() if c.id != self.incoming_section_id]

    def active_outgoing(self):
        for c in self.outgoing_candidates():
            if c.id == self.active_outgoing_id:
                return c
        return None

    def choose_incoming(self, section_id):
        if section_id not in [c.id for c in self.refresh()]:
            return EditResult.not_found(f"Tramo {section_id} no llega al punto {self.point_id}")
        self.incoming_section_id = section_id
        self.pending_incoming_strand_id = None
        self.refresh()
        return EditResult.ok(f"Cable entrante: {section_id}")

    def choose_outgoing(self, section_id):
        if section_id not in [c.id for c in self.outgoing_candidates()]:
            return EditResult.not_found(f"Tramo {section_id} no es una salida del punto {self.point_id}")
        self.active_outgoing_id = section_id
        return EditResult.ok(f"Cable saliente activo: {section_id}")

    # --- Emparejamiento manual ---

    def connection_for(self, incoming_strand_id):
        for conn in self.connections:
            if conn.incoming_strand_id == incoming_strand_id:
                return conn
        return None

    def select_incoming_strand(self, strand_id):
        """Arma (o desarma si ya estaba) la selección de un brin entrante."""
        incoming = self.incoming()
        if incoming is None or incoming.section.strand_by_id(strand_id) is None:
            return EditResult.not_found(f"Brin entrante {strand_id} no encontrado")
        if self.pending_incoming_strand_id == strand_id:
            self.pending_incoming_strand_id = None
            return EditResult.ok(f"Selección de {strand_id} anulada")
        self.pending_incoming_strand_id = strand_id
        return EditResult.ok(f"Brin entrante {strand_id} seleccionado")

    def select_outgoing_strand(self, strand_id):
        """Confirma, sustituye o deshace el empalme del brin entrante seleccionado."""
        if self.pending_incoming_strand_id is None:
            return EditResult.invalid("No hay brin entrante seleccionado")
        if not any(c.section.strand_by_id(strand_id) for c in self.outgoing_candidates()):
            return EditResult.not_found(f"Brin saliente {strand_id} no encontrado")
        incoming_id = self.pending_incoming_strand_id
        self.pending_incoming_strand_id = None

        existing = self.connection_for(incoming_id)
        if existing is not None and existing.outgoing_strand_id == strand_id:
            self.connections = [c for c in self.connections if c is not existing]
            logger.debug(f"[SPLICE] {incoming_id} -> {strand_id} desconectado")
            return EditResult.ok(f"Empalme {incoming_id} -> {strand_id} eliminado")

        new_conn = SplicingConnection(incoming_id, strand_id)
        if existing is not None:
            self.connections = [new_conn if c is existing else c for c in self.connections]
            message = f"Empalme de {incoming_id} cambiado a {strand_id}"
        else:
            self.connections = self.connections + [new_conn]
            message = f"Empalme {incoming_id} -> {strand_id} creado"
        logger.debug(f"[SPLICE] {message}")
        return EditResult.ok(message, data=new_conn)

    # --- Operaciones masivas ---

    def auto_splice(self, incoming_section_id=None, target_section_id=None):
        """Empalma brin[i] con brin[i] para i < min(cuentas), sin tocar los ya empalmados."""
        connected = {c.id: c for c in self.refresh()}
        incoming_section_id = incoming_section_id or self.incoming_section_id
        target_section_id = target_section_id or self.active_outgoing_id
        incoming = connected.get(incoming_section_id)
        target = connected.get(target_section_id)
        if incoming is None or target is None:
            return EditResult.not_found("Tramo entrante o de destino no encontrado en el punto")

        already = {c.incoming_strand_id for c in self.connections}
        in_strands = incoming.section.strands
        out_strands = target.section.strands
        added = []
        for i in range(min(len(in_strands), len(out_strands))):
            if in_strands[i].id in already:
                continue
            added.append(SplicingConnection(in_strands[i].id, out_strands[i].id))
        self.connections = self.connections + added
        logger.info(f"Auto-empalme en {self.point_id}: {len(added)} conexiones "
                    f"({incoming_section_id} -> {target_section_id})")
        return EditResult.ok(f"{len(added)} empalmes creados", data=added)

    def reset_all(self):
        count = len(self.connections)
        self.connections = []
        self.pending_incoming_strand_id = None
        return EditResult.ok(f"{count} empalmes eliminados")

    # --- Validación ---

    def outgoing_count(self):
        return len(self.outgoing_candidates())

    def validate(self):
        return validate_category(self.category, self.outgoing_count())

    def dangling_connections(self):
        """Conexiones cuyos brins no se resuelven en ningún tramo del punto."""
        known = set()
        for c in self.refresh():
            known |= c.section.strand_ids()
        return [conn for conn in self.connections
                if conn.incoming_strand_id not in known or conn.outgoing_strand_id not in known]

    # --- Guardado ---

    def save(self, cut_section_id=None):
        """Guarda nombre, tipo, categoría, descripción, coordenadas y empalmes del punto.

        Args:
            cut_section_id: si se indica, el punto corta ese tramo (split_section)

        Returns:
            EditResult; la validación de categoría sólo añade advertencias
        """
        network = self.editor.network
        stored = network.get_point(self.point_id)
        if stored is None:
            return EditResult.not_found(f"Punto {self.point_id} no encontrado")
        if self.category not in POINT_CATEGORIES:
            return EditResult.invalid(f"Categoría '{self.category}' no es válida")
        if self.point_type not in POINT_TYPES:
            return EditResult.invalid(f"Tipo '{self.point_type}' no es válido")

        updated = stored.copy(
            name=self.name,
            point_type=self.point_type,
            category=self.category,
            description=self.description,
            coordinates=self.coordinates,
            connections=self.connections,
        )
        if cut_section_id:
            result = self.editor.split_section(cut_section_id, updated)
            if not result:
                return result
            result.message = f"Punto '{self.name}' guardado; {result.message}"
        else:
            network.put_point(updated)
            result = EditResult.ok(f"Punto '{self.name}' guardado")

        for warning in self.validate():
            result.add_warning(warning['code'], warning['message'])
            logger.warning(f"Punto {self.point_id}: {warning['message']}")
        dangling = self.dangling_connections()
        if dangling:
            result.add_warning(WARN_DANGLING_CONNECTIONS,
                               f"{len(dangling)} empalmes con brins no resueltos en {self.point_id}")
        self.editor.record_change('save_point', self.point_id, f"{len(self.connections)} empalmes")
        result.data = network.get_point(self.point_id)
        return result
