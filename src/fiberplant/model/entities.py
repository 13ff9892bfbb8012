#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Entidades de la topología: brins, tramos de cable (aristas), puntos de
infraestructura (nodos), conexiones de empalme y sitios.

Las referencias tramo -> punto son IDs débiles resueltos por búsqueda; nunca
se guardan referencias a objetos. Las ediciones producen copias (``copy``)
que sustituyen a la entrada original en la colección propietaria.
"""

import copy as _copy

from fiberplant.constants import (
    STRAND_FREE, STRAND_STATUSES, SPLICE_STATUS_SPLICED, CATEGORY_STANDARD,
    POINT_TYPE_CHAMBRE, DEFAULT_STANDARD_ID, DEFAULT_CABLE_TYPE, CORE_SITE_TYPES
)
from fiberplant.model.geo import to_coordinates, coordinates_to_dict


class FiberStrand:
    """Un brin de fibra dentro de un tramo."""

    def __init__(self, strand_id, number, tube=None, color_code=None, status=STRAND_FREE,
                 service_name=None, client=None, color_override=False):
        if status not in STRAND_STATUSES:
            raise ValueError(f"Estado de brin '{status}' no es válido")
        self.id = strand_id
        self.number = int(number)
        self.tube = tube
        self.color_code = color_code
        self.status = status
        self.service_name = service_name
        self.client = client
        self.color_override = color_override

    @property
    def has_service(self):
        return bool(self.service_name and str(self.service_name).strip())

    def copy(self, **changes):
        new = _copy.copy(self)
        for key, value in changes.items():
            setattr(new, key, value)
        if new.status not in STRAND_STATUSES:
            raise ValueError(f"Estado de brin '{new.status}' no es válido")
        return new

    def to_dict(self):
        return {
            'id': self.id,
            'number': self.number,
            'tube': self.tube,
            'colorCode': self.color_code,
            'status': self.status,
            'serviceName': self.service_name,
            'client': self.client,
            'colorOverride': self.color_override,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data['id'], data['number'],
            tube=data.get('tube'),
            color_code=data.get('colorCode'),
            status=data.get('status', STRAND_FREE),
            service_name=data.get('serviceName'),
            client=data.get('client'),
            color_override=data.get('colorOverride', False),
        )

    def __repr__(self):
        return f"FiberStrand({self.id!r}, #{self.number}, {self.color_code}, {self.status})"


class SplicingConnection:
    """Empalme de un brin entrante con un brin saliente dentro de un punto."""

    def __init__(self, incoming_strand_id, outgoing_strand_id, status=SPLICE_STATUS_SPLICED):
        self.incoming_strand_id = incoming_strand_id
        self.outgoing_strand_id = outgoing_strand_id
        self.status = status

    def to_dict(self):
        return {
            'incomingStrandId': self.incoming_strand_id,
            'outgoingStrandId': self.outgoing_strand_id,
            'status': self.status,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data['incomingStrandId'], data['outgoingStrandId'],
                   data.get('status', SPLICE_STATUS_SPLICED))

    def __eq__(self, other):
        if not isinstance(other, SplicingConnection):
            return NotImplemented
        return (self.incoming_strand_id, self.outgoing_strand_id, self.status) == \
            (other.incoming_strand_id, other.outgoing_strand_id, other.status)

    def __hash__(self):
        return hash((self.incoming_strand_id, self.outgoing_strand_id, self.status))

    def __repr__(self):
        return f"SplicingConnection({self.incoming_strand_id!r} -> {self.outgoing_strand_id!r})"


class CableSection:
    """Tramo físico de cable: la arista de la topología."""

    def __init__(self, section_id, name, fiber_count=12, standard_id=DEFAULT_STANDARD_ID,
                 length_km=0.0, cable_type=DEFAULT_CABLE_TYPE, start_point_id=None,
                 end_point_id=None, start_coordinate=None, end_coordinate=None,
                 strands=None, is_hosted=False, color_scheme=None):
        self.id = section_id
        self.name = name
        self.fiber_count = int(fiber_count)
        self.standard_id = standard_id
        self.length_km = float(length_km or 0.0)
        self.cable_type = cable_type
        self.start_point_id = start_point_id
        self.end_point_id = end_point_id
        self.start_coordinate = to_coordinates(start_coordinate)
        self.end_coordinate = to_coordinates(end_coordinate)
        self.strands = list(strands or [])
        self.is_hosted = bool(is_hosted)
        self.color_scheme = color_scheme

    def copy(self, **changes):
        """Copia superficial con cambios; la lista de brins es nueva."""
        new = _copy.copy(self)
        new.strands = list(self.strands)
        for key, value in changes.items():
            if key in ('start_coordinate', 'end_coordinate'):
                value = to_coordinates(value)
            elif key == 'strands':
                value = list(value)
            setattr(new, key, value)
        return new

    def strand_by_id(self, strand_id):
        for strand in self.strands:
            if strand.id == strand_id:
                return strand
        return None

    def strand_by_number(self, number):
        for strand in self.strands:
            if strand.number == number:
                return strand
        return None

    def strand_ids(self):
        return {s.id for s in self.strands}

    @property
    def service_count(self):
        return sum(1 for s in self.strands if s.has_service)

    def references_point(self, point_id):
        return point_id is not None and point_id in (self.start_point_id, self.end_point_id)

    def far_endpoint_id(self, point_id):
        """Extremo opuesto al punto dado (None si el tramo no toca el punto)."""
        if self.end_point_id == point_id:
            return self.start_point_id
        if self.start_point_id == point_id:
            return self.end_point_id
        return None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'fiberCount': self.fiber_count,
            'standardId': self.standard_id,
            'lengthKm': self.length_km,
            'cableType': self.cable_type,
            'startPointId': self.start_point_id,
            'endPointId': self.end_point_id,
            'startCoordinate': coordinates_to_dict(self.start_coordinate),
            'endCoordinate': coordinates_to_dict(self.end_coordinate),
            'fiberStrands': [s.to_dict() for s in self.strands],
            'isHosted': self.is_hosted,
            'colorScheme': self.color_scheme,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data['id'], data.get('name', ''),
            fiber_count=data.get('fiberCount', 12),
            standard_id=data.get('standardId', DEFAULT_STANDARD_ID),
            length_km=data.get('lengthKm', 0.0),
            cable_type=data.get('cableType', DEFAULT_CABLE_TYPE),
            start_point_id=data.get('startPointId'),
            end_point_id=data.get('endPointId'),
            start_coordinate=data.get('startCoordinate'),
            end_coordinate=data.get('endCoordinate'),
            strands=[FiberStrand.from_dict(s) for s in data.get('fiberStrands') or []],
            is_hosted=data.get('isHosted', False),
            color_scheme=data.get('colorScheme'),
        )

    def __repr__(self):
        return f"CableSection({self.id!r}, {self.name!r}, {self.fiber_count} FO, {self.length_km} km)"


class InfrastructurePoint:
    """Chambre o manchon: el nodo de la topología donde se empalman los cables."""

    def __init__(self, point_id, name, point_type=POINT_TYPE_CHAMBRE, category=CATEGORY_STANDARD,
                 coordinates=None, description='', connections=None):
        self.id = point_id
        self.name = name
        self.point_type = point_type
        self.category = category or CATEGORY_STANDARD
        self.coordinates = to_coordinates(coordinates)
        self.description = description or ''
        self.connections = list(connections or [])

    def copy(self, **changes):
        new = _copy.copy(self)
        new.connections = list(self.connections)
        for key, value in changes.items():
            if key == 'coordinates':
                value = to_coordinates(value)
            elif key == 'connections':
                value = list(value)
            setattr(new, key, value)
        return new

    def connection_for(self, incoming_strand_id):
        for conn in self.connections:
            if conn.incoming_strand_id == incoming_strand_id:
                return conn
        return None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.point_type,
            'category': self.category,
            'coordinates': coordinates_to_dict(self.coordinates),
            'description': self.description,
            'splicingConfig': {'connections': [c.to_dict() for c in self.connections]},
        }

    @classmethod
    def from_dict(cls, data):
        splicing = data.get('splicingConfig') or {}
        return cls(
            data['id'], data.get('name', ''),
            point_type=data.get('type', POINT_TYPE_CHAMBRE),
            category=data.get('category', CATEGORY_STANDARD),
            coordinates=data.get('coordinates'),
            description=data.get('description', ''),
            connections=[SplicingConnection.from_dict(c) for c in splicing.get('connections') or []],
        )

    def __repr__(self):
        return f"InfrastructurePoint({self.id!r}, {self.name!r}, {self.category})"


class Site:
    """Sitio (CTT, centro de transmisión, torre...). Sólo lectura para el motor."""

    def __init__(self, site_id, name, site_type, coordinates=None):
        self.id = site_id
        self.name = name
        self.site_type = site_type
        self.coordinates = to_coordinates(coordinates)

    @property
    def is_core(self):
        return self.site_type in CORE_SITE_TYPES

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.site_type,
            'coordinates': coordinates_to_dict(self.coordinates),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data.get('name', ''), data.get('type'), data.get('coordinates'))
