#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import math
import re

from fiberplant.constants import (
    STANDARD_CONFIGS, DEFAULT_STANDARD_ID, CLR_STD_12, COLOR_HEX, DEFAULT_COLOR_HEX,
    STRAND_FREE, STRAND_IN_USE, get_standard_config, get_color_scheme
)
from fiberplant.model.entities import FiberStrand

logger = logging.getLogger(__name__)


class FiberStandard:
    """Disposición física de un cable: número de tubos x fibras por tubo + ciclo de colores."""

    def __init__(self, standard_id, name, tube_count, fibers_per_tube, color_sequence):
        self.id = standard_id
        self.name = name
        self.tube_count = int(tube_count)
        self.fibers_per_tube = int(fibers_per_tube)
        self.color_sequence = list(color_sequence)

    @property
    def fiber_count(self):
        return self.tube_count * self.fibers_per_tube

    def tube_of(self, number):
        """Índice de tubo (1..tube_count) de un número de fibra."""
        return tube_of(number, self.fibers_per_tube)

    def tube_color(self, tube_index):
        """Color de la cubierta del tubo (1..tube_count)."""
        return self.color_sequence[(tube_index - 1) % len(self.color_sequence)]

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'tubeCount': self.tube_count,
            'fibersPerTube': self.fibers_per_tube,
            'fiberCount': self.fiber_count,
            'colorSequence': list(self.color_sequence),
            'tubeColors': [self.tube_color(t) for t in range(1, self.tube_count + 1)],
        }

    def __repr__(self):
        return f"FiberStandard({self.id!r}, {self.tube_count}x{self.fibers_per_tube})"


def tube_of(number, fibers_per_tube):
    return int(math.ceil(number / float(fibers_per_tube)))


def _from_config(standard_id, config):
    return FiberStandard(standard_id, config['name'], config['tubes'],
                         config['fibers_per_tube'], config['colors'])


def list_standards():
    """Devuelve el catálogo completo, en el orden de definición."""
    return [_from_config(sid, cfg) for sid, cfg in STANDARD_CONFIGS.items()]


def _parse_custom(standard_id):
    # CUSTOM_<n>_<tubos>x<fpt>
    match = re.match(r'^CUSTOM_(\d+)_(\d+)x(\d+)$', standard_id or '')
    if not match:
        return None
    tubes, fpt = int(match.group(2)), int(match.group(3))
    if tubes * fpt != int(match.group(1)) or tubes < 1 or fpt < 1:
        return None
    return FiberStandard(standard_id, f"Custom {tubes * fpt} FO", tubes, fpt, CLR_STD_12)


def is_known_standard(standard_id):
    return get_standard_config(standard_id) is not None or _parse_custom(standard_id) is not None


def get_standard(standard_id):
    """Obtiene un estándar por ID.

    Un ID desconocido (o vacío) devuelve el estándar por defecto
    STD_12_1x12; nunca lanza excepción.
    """
    config = get_standard_config(standard_id)
    if config is None:
        custom = _parse_custom(standard_id)
        if custom is not None:
            return custom
        if standard_id:
            logger.warning(f"Estándar '{standard_id}' desconocido, usando '{DEFAULT_STANDARD_ID}'")
        return _from_config(DEFAULT_STANDARD_ID, STANDARD_CONFIGS[DEFAULT_STANDARD_ID])
    return _from_config(standard_id, config)


def infer_structure(fiber_count):
    """Analiza la estructura de tubos probable para un número de fibras.

    Returns:
        dict: {'tubes', 'fibers_per_tube', 'type'}
    """
    n = int(fiber_count)
    if n <= 6:
        return {'tubes': 1, 'fibers_per_tube': 6, 'type': 'Drop Cable / Last Mile'}
    if n == 8:
        return {'tubes': 1, 'fibers_per_tube': 8, 'type': 'Spécial (8 FO)'}
    if n <= 12:
        return {'tubes': 1, 'fibers_per_tube': 12, 'type': 'Monotube Standard'}
    if n == 18:
        return {'tubes': 3, 'fibers_per_tube': 6, 'type': 'Multitube (3x6)'}
    if n == 24:
        return {'tubes': 2, 'fibers_per_tube': 12, 'type': 'Multitube (2x12) ou (4x6)'}
    if n in (36, 48, 72, 96):
        return {'tubes': n // 12, 'fibers_per_tube': 12, 'type': f'Multitube ({n // 12}x12)'}
    if n == 144:
        return {'tubes': 12, 'fibers_per_tube': 12, 'type': 'Gros porteur (12x12)'}
    return {'tubes': int(math.ceil(n / 12.0)), 'fibers_per_tube': 12, 'type': 'Custom / Hébergé'}


def standard_for_fiber_count(fiber_count):
    """Primer estándar del catálogo con ese número de fibras, o uno ad hoc.

    El estándar ad hoc conserva fiber_count == tubos x fibras por tubo:
    múltiplos de 12 y de 6 se reparten en tubos, el resto va en monotubo.
    """
    n = int(fiber_count)
    for standard in list_standards():
        if standard.fiber_count == n:
            return standard
    if n % 12 == 0:
        tubes, fpt = n // 12, 12
    elif n % 6 == 0:
        tubes, fpt = n // 6, 6
    else:
        tubes, fpt = 1, n
    structure = infer_structure(n)
    return FiberStandard(f'CUSTOM_{n}_{tubes}x{fpt}', f"{structure['type']} {n} FO",
                         tubes, fpt, CLR_STD_12)


def color_hex(color_name):
    return COLOR_HEX.get(color_name, DEFAULT_COLOR_HEX)


def _assignment_map(service_assignments):
    assignments = {}
    for item in service_assignments or []:
        number = item.get('number', item.get('idx'))
        if number is None:
            continue
        assignments[int(number)] = item
    return assignments


def generate_strands(standard, service_assignments=None, id_prefix=None, color_scheme=None):
    """Genera la lista de brins de un estándar.

    Args:
        standard: FiberStandard o ID de estándar
        service_assignments: lista de dicts {'number', 'service_name', 'client', 'color_code'};
            los brins asignados quedan IN_USE, el resto FREE
        id_prefix: prefijo de IDs ("<prefix>-<n>"), normalmente el ID del tramo
        color_scheme: esquema opcional (STANDARD / SPECIAL_MENGWA) que sustituye
            la paleta y el módulo de agrupación

    Returns:
        list: FiberStrand ordenados por número, len == fiber_count
    """
    if not isinstance(standard, FiberStandard):
        standard = get_standard(standard)

    colors = standard.color_sequence
    modulus = standard.fibers_per_tube
    scheme = get_color_scheme(color_scheme) if color_scheme else None
    if scheme:
        colors, modulus = scheme

    assignments = _assignment_map(service_assignments)
    prefix = id_prefix or standard.id
    strands = []
    for i in range(standard.fiber_count):
        number = i + 1
        default_color = colors[(i % modulus) % len(colors)]
        assigned = assignments.get(number)
        if assigned:
            strands.append(FiberStrand(
                f"{prefix}-{number}", number,
                tube=standard.tube_of(number),
                color_code=assigned.get('color_code') or default_color,
                status=STRAND_IN_USE,
                service_name=assigned.get('service_name', assigned.get('name')),
                client=assigned.get('client'),
                color_override=bool(assigned.get('color_code')),
            ))
        else:
            strands.append(FiberStrand(
                f"{prefix}-{number}", number,
                tube=standard.tube_of(number),
                color_code=default_color,
                status=STRAND_FREE,
            ))
    logger.debug(f"Generados {len(strands)} brins para estándar {standard.id} (prefijo {prefix})")
    return strands
