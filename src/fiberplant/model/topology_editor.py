#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import uuid
from datetime import datetime

from fiberplant.constants import (
    DEFAULT_STANDARD_ID, DEFAULT_SECTION_NAME, DEFAULT_POINT_NAME, DEFAULT_CABLE_TYPE,
    SPLIT_PART1_SUFFIX, SPLIT_PART2_SUFFIX, STRAND_FREE, STRAND_STATUSES,
    WARN_STRANDS_REGENERATED, WARN_DANGLING_CONNECTIONS, WARN_UNKNOWN_STANDARD,
    WARN_MISSING_COORDINATES
)
from fiberplant.model.entities import CableSection, InfrastructurePoint
from fiberplant.model.geo import haversine_km
from fiberplant.model.results import EditResult
from fiberplant.model.splicing import SpliceSession
from fiberplant.model.standards import (
    get_standard, is_known_standard, generate_strands, standard_for_fiber_count
)

logger = logging.getLogger(__name__)


def _new_id(prefix):
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _strand_prefix(section_id):
    # IDs nuevos en cada regeneración: los empalmes antiguos no se reenganchan solos
    return f"{section_id}.{uuid.uuid4().hex[:6]}"


def section_standard(section):
    """Estándar con el que se regeneran los brins de un tramo.

    Si el ID de estándar no se conoce o no coincide con el número de
    fibras del tramo (tramos alojados de 2 FO, registros sin standardId),
    manda el número de fibras.
    """
    standard = get_standard(section.standard_id) if is_known_standard(section.standard_id) else None
    if standard is None or standard.fiber_count != section.fiber_count:
        standard = standard_for_fiber_count(section.fiber_count)
    return standard


def compute_split_lengths(section, point_coordinates):
    """Calcula (dist_desde_inicio, dist_hasta_fin, usó_fallback) para un corte.

    Con ambas coordenadas conocidas se usan distancias haversine, escaladas
    proporcionalmente a la longitud del tramo para conservarla. Sin
    coordenadas, cada parte mide exactamente la mitad. Con una sola
    coordenada, la parte conocida se mide y la otra mide la mitad del tramo.
    """
    total = section.length_km
    d_start = None
    d_end = None
    if point_coordinates is not None:
        if section.start_coordinate is not None:
            d_start = haversine_km(section.start_coordinate, point_coordinates)
        if section.end_coordinate is not None:
            d_end = haversine_km(point_coordinates, section.end_coordinate)

    if d_start is None and d_end is None:
        return total / 2.0, total / 2.0, True

    if d_start is not None and d_end is not None:
        measured = d_start + d_end
        if total > 0 and measured > 0:
            return total * d_start / measured, total * d_end / measured, False
        return d_start, d_end, False

    # Sólo un extremo medido: el otro lado recibe la mitad del tramo
    if d_start is None:
        d_start = total / 2.0
    if d_end is None:
        d_end = total / 2.0
    return d_start, d_end, True


class TopologyEditor:
    """Editor de topología de una red: alta/edición/baja de tramos, corte y borrado en cascada.

    Todas las mutaciones son síncronas sobre las colecciones en memoria del
    agregado; sólo se persisten cuando el llamador invoca ``commit``.
    """

    def __init__(self, network, sibling_networks=(), storage=None):
        """Inicializa el editor.

        Args:
            network: NetworkModel que se edita
            sibling_networks: redes hermanas de sólo lectura (descubrimiento de empalmes)
            storage: NetworkStorage opcional usado por commit()
        """
        self.network = network
        self.sibling_networks = [n for n in sibling_networks if n.id != network.id]
        self.storage = storage
        self.active_view_id = None  # None = vista global de la red
        self.open_section_id = None
        self.open_point_id = None
        self.splice_session = None
        self.pending_section_ids = set()
        self.pending_changes = []

    # --- Estado de vista / sesiones ---

    def show_network_view(self):
        self.active_view_id = None

    def show_section_view(self, section_id):
        if self.network.get_section(section_id) is None:
            return EditResult.not_found(f"Tramo {section_id} no encontrado")
        self.active_view_id = section_id
        return EditResult.ok(f"Vista del tramo {section_id}")

    def open_section_editor(self, section_id):
        section = self.network.get_section(section_id)
        if section is None:
            return EditResult.not_found(f"Tramo {section_id} no encontrado")
        self.open_section_id = section_id
        return EditResult.ok(f"Editando tramo {section_id}", data=section)

    def close_section_editor(self):
        self.open_section_id = None

    def is_section_open(self, section_id):
        return self.open_section_id == section_id and self.network.get_section(section_id) is not None

    def open_splice_editor(self, point_id, sites=None):
        """Abre el editor de empalmes de un punto. data = SpliceSession."""
        point = self.network.get_point(point_id)
        if point is None:
            logger.warning(f"open_splice_editor: punto {point_id} no existe")
            return EditResult.not_found(f"Punto {point_id} no encontrado")
        self.open_point_id = point_id
        self.splice_session = SpliceSession(self, point, sites=sites)
        return EditResult.ok(f"Editando empalmes de {point_id}", data=self.splice_session)

    def close_splice_editor(self):
        self.open_point_id = None
        self.splice_session = None

    def is_point_open(self, point_id):
        return self.open_point_id == point_id and self.network.get_point(point_id) is not None

    def record_change(self, action, target_id, detail=''):
        self.pending_changes.append({
            'timestamp': datetime.now().isoformat(),
            'action': action,
            'target_id': target_id,
            'detail': detail,
        })

    # --- Tramos ---

    def create_section(self, start_node_id=None, standard_id=DEFAULT_STANDARD_ID):
        """Crea un tramo con el estándar por defecto y lo añade a la red.

        La resolución de extremos queda para una edición posterior.
        """
        standard = get_standard(standard_id)
        section_id = _new_id('sec')
        name = DEFAULT_SECTION_NAME.format(n=len(self.network.sections) + 1)
        section = CableSection(
            section_id, name,
            fiber_count=standard.fiber_count,
            standard_id=standard.id,
            length_km=0.0,
            cable_type=DEFAULT_CABLE_TYPE,
            start_point_id=start_node_id,
            strands=generate_strands(standard, id_prefix=section_id),
        )
        self.network.put_section(section)
        self.pending_section_ids.add(section_id)
        self.open_section_id = section_id
        self.record_change('create_section', section_id, name)
        logger.info(f"Tramo '{name}' ({section_id}) creado en red {self.network.id}")
        return EditResult.ok(f"Tramo '{name}' creado", data=section)

    def _connections_referencing(self, strand_ids):
        """Empalmes (punto_id, conexión) de esta red y de las hermanas que usan esos brins."""
        found = []
        for network in [self.network] + self.sibling_networks:
            for point in network.points.values():
                for conn in point.connections:
                    if conn.incoming_strand_id in strand_ids or conn.outgoing_strand_id in strand_ids:
                        found.append((point.id, conn))
        return found

    def _regeneration_warnings(self, result, old_section):
        """Añade advertencias si la regeneración descarta servicios o empalmes."""
        in_use = [s for s in old_section.strands if s.has_service or s.status != STRAND_FREE]
        linked = self._connections_referencing(old_section.strand_ids())
        if in_use or linked:
            text = (f"Brins del tramo {old_section.id} regenerados: {len(in_use)} asignaciones "
                    f"y {len(linked)} empalmes descartados")
            result.add_warning(WARN_STRANDS_REGENERATED, text)
            logger.warning(text)
        if linked:
            result.add_warning(WARN_DANGLING_CONNECTIONS,
                               f"{len(linked)} empalmes apuntan a brins que ya no existen")

    def edit_section(self, updated, remap_services=False):
        """Guarda un tramo editado.

        Si cambian el estándar o el número de fibras, todos los brins se
        regeneran desde el nuevo estándar y se descarta cualquier
        asignación de servicio o empalme previo (se devuelve una
        advertencia). Con ``remap_services=True`` se conservan servicio,
        cliente y estado de los números de brin que sobreviven.
        """
        stored = self.network.get_section(updated.id)
        if stored is None:
            return EditResult.not_found(f"Tramo {updated.id} no encontrado")

        result = EditResult.ok(f"Tramo '{updated.name}' guardado")
        final = updated.copy()

        standard_changed = updated.standard_id != stored.standard_id
        count_changed = updated.fiber_count != stored.fiber_count
        if standard_changed or count_changed:
            if standard_changed:
                if not is_known_standard(updated.standard_id):
                    result.add_warning(WARN_UNKNOWN_STANDARD,
                                       f"Estándar '{updated.standard_id}' desconocido, se usa {DEFAULT_STANDARD_ID}")
                standard = get_standard(updated.standard_id)
            else:
                standard = standard_for_fiber_count(updated.fiber_count)
            strands = generate_strands(standard, id_prefix=_strand_prefix(updated.id),
                                       color_scheme=updated.color_scheme)
            if remap_services:
                strands = self._remap_strands(stored.strands, strands)
            final = final.copy(standard_id=standard.id, fiber_count=standard.fiber_count, strands=strands)
            self._regeneration_warnings(result, stored)
            self.record_change('regenerate_strands', updated.id, f"{stored.standard_id} -> {standard.id}")
        elif updated.color_scheme != stored.color_scheme:
            final = final.copy(strands=self._recolor(final, updated.color_scheme))

        if updated.id in self.pending_section_ids:
            # Primer guardado: la longitud se suma al acumulador manual de la red
            self.network.manual_distance_km += final.length_km
            self.pending_section_ids.discard(updated.id)

        self.network.put_section(final)
        if self.open_section_id == updated.id:
            self.open_section_id = None
        self.record_change('edit_section', updated.id, updated.name)
        logger.info(f"Tramo {updated.id} guardado ({final.fiber_count} FO, {final.length_km} km)")
        result.data = final
        return result

    def _remap_strands(self, old_strands, new_strands):
        by_number = {s.number: s for s in old_strands}
        remapped = []
        for strand in new_strands:
            old = by_number.get(strand.number)
            if old is None:
                remapped.append(strand)
                continue
            changes = {'status': old.status, 'service_name': old.service_name, 'client': old.client}
            if old.color_override:
                changes['color_code'] = old.color_code
                changes['color_override'] = True
            remapped.append(strand.copy(**changes))
        return remapped

    def _recolor(self, section, color_scheme):
        fresh = {s.number: s for s in generate_strands(section_standard(section), color_scheme=color_scheme)}
        recolored = []
        for strand in section.strands:
            template = fresh.get(strand.number)
            if template is None or strand.color_override:
                recolored.append(strand)
            else:
                recolored.append(strand.copy(color_code=template.color_code))
        return recolored

    def update_strand(self, section_id, number, **fields):
        """Modifica un brin (status, service_name, client, color_code) por número."""
        section = self.network.get_section(section_id)
        if section is None:
            return EditResult.not_found(f"Tramo {section_id} no encontrado")
        strand = section.strand_by_number(number)
        if strand is None:
            return EditResult.not_found(f"Brin {number} no encontrado en tramo {section_id}")
        allowed = {'status', 'service_name', 'client', 'color_code'}
        unknown = set(fields) - allowed
        if unknown:
            return EditResult.invalid(f"Campos no editables: {', '.join(sorted(unknown))}")
        if 'status' in fields and fields['status'] not in STRAND_STATUSES:
            return EditResult.invalid(f"Estado '{fields['status']}' no es válido")
        if 'color_code' in fields:
            fields['color_override'] = bool(fields['color_code'])
        new_strand = strand.copy(**fields)
        strands = [new_strand if s.id == strand.id else s for s in section.strands]
        self.network.put_section(section.copy(strands=strands))
        self.record_change('update_strand', section_id, f"brin {number}")
        return EditResult.ok(f"Brin {number} actualizado en tramo {section_id}", data=new_strand)

    def delete_section(self, section_id, confirmed=False):
        """Elimina un tramo. Sin confirmación explícita no se toca nada."""
        if not confirmed:
            return EditResult.not_confirmed(f"Eliminación del tramo {section_id} no confirmada")
        removed = self.network.remove_section(section_id)
        if removed is None:
            return EditResult.not_found(f"Tramo {section_id} no encontrado")
        self.pending_section_ids.discard(section_id)
        if self.active_view_id == section_id:
            self.show_network_view()
        if self.open_section_id == section_id:
            self.open_section_id = None
        self.record_change('delete_section', section_id, removed.name)
        logger.info(f"Tramo {section_id} eliminado de red {self.network.id}")
        return EditResult.ok(f"Tramo '{removed.name}' eliminado", data=removed)

    def split_section(self, section_id, point):
        """Inserta un punto en mitad de un tramo, partiéndolo en dos.

        Args:
            section_id: ID del tramo a cortar
            point: InfrastructurePoint colocado en el lugar del corte

        Returns:
            EditResult con data = {'part1', 'part2', 'point'}
        """
        section = self.network.get_section(section_id)
        if section is None:
            return EditResult.not_found(f"Tramo {section_id} no encontrado")

        result = EditResult.ok(f"Tramo '{section.name}' cortado en {point.name}")
        d_start, d_end, fallback = compute_split_lengths(section, point.coordinates)
        if fallback:
            result.add_warning(WARN_MISSING_COORDINATES,
                               f"Coordenadas incompletas para el corte de {section_id}; longitud repartida")
            logger.warning(f"split_section: coordenadas incompletas en {section_id}, usando reparto por defecto")

        part1_id = _new_id('sec')
        part2_id = _new_id('sec')
        standard = section_standard(section)
        part1 = section.copy(
            id=part1_id,
            name=section.name + SPLIT_PART1_SUFFIX,
            length_km=d_start,
            end_point_id=point.id,
            end_coordinate=point.coordinates,
            fiber_count=standard.fiber_count,
            standard_id=standard.id,
            strands=generate_strands(standard, id_prefix=part1_id,
                                     color_scheme=section.color_scheme),
        )
        part2 = section.copy(
            id=part2_id,
            name=section.name + SPLIT_PART2_SUFFIX,
            length_km=d_end,
            start_point_id=point.id,
            start_coordinate=point.coordinates,
            fiber_count=standard.fiber_count,
            standard_id=standard.id,
            strands=generate_strands(standard, id_prefix=part2_id,
                                     color_scheme=section.color_scheme),
        )
        self._regeneration_warnings(result, section)

        self.network.replace_section(section_id, [part1, part2])
        self.network.put_point(point)

        if section_id in self.pending_section_ids:
            self.pending_section_ids.discard(section_id)
        if self.active_view_id == section_id:
            self.show_network_view()
        if self.open_section_id == section_id:
            self.open_section_id = None
        self.record_change('split_section', section_id, f"{part1_id} + {part2_id} en {point.id}")
        logger.info(f"Tramo {section_id} cortado en {point.id}: {part1_id} ({d_start:.3f} km) "
                    f"+ {part2_id} ({d_end:.3f} km)")
        result.data = {'part1': part1, 'part2': part2, 'point': point}
        return result

    # --- Puntos de infraestructura ---

    def create_point(self, coordinates=None, name=DEFAULT_POINT_NAME, **fields):
        """Crea un punto independiente y lo añade a la red."""
        point = InfrastructurePoint(_new_id('infra'), name, coordinates=coordinates, **fields)
        self.network.put_point(point)
        self.record_change('create_point', point.id, name)
        return EditResult.ok(f"Punto '{name}' creado", data=point)

    def remove_point_only(self, point_id):
        """Primer paso del borrado en cascada: quita el punto. Devuelve el punto o None."""
        removed = self.network.remove_point(point_id)
        if removed is not None and self.open_point_id == point_id:
            self.close_splice_editor()
        return removed

    def remove_dependent_sections(self, point_id):
        """Segundo paso: quita los tramos con el punto como inicio o fin."""
        removed = self.network.remove_sections_referencing(point_id)
        removed_ids = {s.id for s in removed}
        if self.active_view_id in removed_ids:
            self.show_network_view()
        if self.open_section_id in removed_ids:
            self.open_section_id = None
        self.pending_section_ids -= removed_ids
        return removed

    def delete_infrastructure_point(self, point_id, confirmed=False):
        """Elimina un punto y, en cascada, los tramos que terminan en él."""
        if not confirmed:
            return EditResult.not_confirmed(f"Eliminación del punto {point_id} no confirmada")
        if self.network.get_point(point_id) is None:
            return EditResult.not_found(f"Punto {point_id} no encontrado")
        point = self.remove_point_only(point_id)
        removed = self.remove_dependent_sections(point_id)
        self.record_change('delete_point', point_id, f"{len(removed)} tramos en cascada")
        logger.info(f"Punto {point_id} eliminado; {len(removed)} tramos eliminados en cascada")
        return EditResult.ok(f"Punto '{point.name}' eliminado con {len(removed)} tramos",
                             data={'point': point, 'sections': removed})

    # --- Persistencia ---

    def commit(self):
        """Entrega el agregado al almacenamiento junto con el registro de cambios."""
        if not self.storage:
            return False, "No hay sistema de almacenamiento configurado"
        if not self.storage.save_network(self.network.to_dict()):
            return False, f"Error guardando red '{self.network.id}'"
        for change in self.pending_changes:
            self.storage.log_topology_change(self.network.id, change['action'],
                                             change['target_id'], change['detail'],
                                             timestamp=change['timestamp'])
        count = len(self.pending_changes)
        self.pending_changes = []
        return True, f"Red '{self.network.id}' guardada ({count} cambios)"
