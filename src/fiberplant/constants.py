#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Constantes y configuraciones predefinidas para el motor de planta de fibra.
Este archivo contiene las paletas de colores, el catálogo de estándares de
cable y los valores por defecto usados por el modelo.
"""

# Paletas de colores
CLR_STD_12 = ["Bleu", "Orange", "Vert", "Marron", "Gris", "Blanc",
              "Rouge", "Noir", "Jaune", "Violet", "Rose", "Aqua"]
CLR_SPEC_MENGWA = ["Bleu", "Rouge", "Vert", "Jaune", "Violet", "Blanc"]
CLR_STD_6 = CLR_STD_12[:6]

COLOR_HEX = {
    'Bleu': '#3b82f6', 'Orange': '#f97316', 'Vert': '#22c55e', 'Marron': '#854d0e',
    'Gris': '#94a3b8', 'Blanc': '#f8fafc', 'Rouge': '#ef4444', 'Noir': '#000000',
    'Jaune': '#eab308', 'Violet': '#a855f7', 'Rose': '#ec4899', 'Aqua': '#06b6d4'
}
DEFAULT_COLOR_HEX = '#ffffff'

# Esquemas de color seleccionables por tramo: (paleta, módulo de agrupación)
COLOR_SCHEME_STANDARD = 'STANDARD'
COLOR_SCHEME_SPECIAL_MENGWA = 'SPECIAL_MENGWA'
COLOR_SCHEMES = {
    COLOR_SCHEME_STANDARD: (CLR_STD_12, 12),
    COLOR_SCHEME_SPECIAL_MENGWA: (CLR_SPEC_MENGWA, 6),
}

# Catálogo de estándares de cable
DEFAULT_STANDARD_ID = 'STD_12_1x12'

STANDARD_CONFIGS = {
    # Estándares ITU-T / IEC genéricos
    'STD_12_1x12': {"name": "Standard 12 FO (Monotube)", "tubes": 1, "fibers_per_tube": 12, "colors": CLR_STD_12},
    'STD_24_2x12': {"name": "Standard 24 FO (2 Tubes x 12)", "tubes": 2, "fibers_per_tube": 12, "colors": CLR_STD_12},
    'STD_48_4x12': {"name": "Standard 48 FO (4 Tubes x 12)", "tubes": 4, "fibers_per_tube": 12, "colors": CLR_STD_12},
    'STD_72_6x12': {"name": "Standard 72 FO (6 Tubes x 12)", "tubes": 6, "fibers_per_tube": 12, "colors": CLR_STD_12},
    'STD_96_8x12': {"name": "Standard 96 FO (8 Tubes x 12)", "tubes": 8, "fibers_per_tube": 12, "colors": CLR_STD_12},
    'STD_144_12x12': {"name": "Standard 144 FO (12 Tubes x 12)", "tubes": 12, "fibers_per_tube": 12, "colors": CLR_STD_12},
    # Estándares específicos
    'STD_24_4x6_CAM': {"name": "Standard 24 FO (4 Tubes x 6) - B,O,V,M,G,B", "tubes": 4, "fibers_per_tube": 6, "colors": CLR_STD_6},
    'SPEC_MENGWA_18': {"name": "Spécial Mengbwa 18 FO (3 Tubes x 6) - Code Spécial", "tubes": 3, "fibers_per_tube": 6, "colors": CLR_SPEC_MENGWA},
    # Acceso / última milla
    'DROP_6_1x6': {"name": "Drop Cable 6 FO (Accès)", "tubes": 1, "fibers_per_tube": 6, "colors": CLR_STD_6},
    'DROP_8_1x8': {"name": "Drop Cable 8 FO (Spécial)", "tubes": 1, "fibers_per_tube": 8, "colors": CLR_STD_12[:8]},
}

# Estados de brin
STRAND_FREE = 'FREE'
STRAND_IN_USE = 'IN_USE'
STRAND_CUT = 'CUT'
STRAND_STATUSES = (STRAND_FREE, STRAND_IN_USE, STRAND_CUT)

SPLICE_STATUS_SPLICED = 'SPLICED'

# Categorías de puntos de infraestructura
CATEGORY_ARTERE = 'ARTERE'
CATEGORY_SEMI_ARTERE = 'SEMI_ARTERE'
CATEGORY_STANDARD = 'STANDARD'
POINT_CATEGORIES = (CATEGORY_ARTERE, CATEGORY_SEMI_ARTERE, CATEGORY_STANDARD)
SEMI_ARTERE_MIN_OUTGOING = 2

# Tipos físicos de punto
POINT_TYPE_CHAMBRE = 'CHAMBRE'
POINT_TYPE_MANCHON = 'MANCHON'
POINT_TYPE_MANCHON_ENTERRE = 'MANCHON_ENTERRE'
POINT_TYPES = (POINT_TYPE_CHAMBRE, POINT_TYPE_MANCHON, POINT_TYPE_MANCHON_ENTERRE)

# Sitios
SITE_CTT = 'CTT'
SITE_TRANSMISSION_CENTER = 'TRANSMISSION_CENTER'
SITE_TOWER = 'TOWER'
SITE_JUNCTION = 'JUNCTION'
SITE_TECHNICAL_ROOM = 'TECHNICAL_ROOM'
CORE_SITE_TYPES = (SITE_CTT, SITE_TRANSMISSION_CENTER)

# Redes (liaisons)
NETWORK_BACKBONE = 'BACKBONE'
NETWORK_LAST_MILE = 'LAST_MILE'
NETWORK_CATEGORIES = (NETWORK_BACKBONE, NETWORK_LAST_MILE)
NETWORK_OPERATIONAL = 'OPERATIONAL'
NETWORK_FAULTY = 'FAULTY'
NETWORK_MAINTENANCE = 'MAINTENANCE'

# Valores por defecto de edición
DEFAULT_CABLE_TYPE = 'Standard Souterrain'
DEFAULT_SECTION_NAME = 'Nouveau Tronçon {n}'
DEFAULT_POINT_NAME = 'Nouvelle Chambre'
UNKNOWN_POINT_LABEL = 'Point Distant/Inconnu'
SPLIT_PART1_SUFFIX = ' (Part 1)'
SPLIT_PART2_SUFFIX = ' (Part 2)'

EARTH_RADIUS_KM = 6371.0

# Pesos de la heurística de cable entrante por defecto
SCORE_PER_SERVICE = 5
SCORE_CORE_SITE_BONUS = 10
SCORE_ARRIVING_BONUS = 10
SCORE_FIBER_DIVISOR = 10.0

# Códigos de advertencia
WARN_STRANDS_REGENERATED = 'strands_regenerated'
WARN_DANGLING_CONNECTIONS = 'dangling_connections'
WARN_CATEGORY_INCOMPLETE = 'category_incomplete'
WARN_UNKNOWN_STANDARD = 'unknown_standard'
WARN_MISSING_COORDINATES = 'missing_coordinates'


def get_standard_config(standard_id):
    """Obtiene la configuración de un estándar de cable.

    Args:
        standard_id (str): ID del estándar

    Returns:
        dict: Configuración del estándar o None si no existe
    """
    if standard_id in STANDARD_CONFIGS:
        return STANDARD_CONFIGS[standard_id]
    return None


def get_color_scheme(scheme_id):
    """Devuelve (paleta, módulo) para un esquema de color, o None."""
    return COLOR_SCHEMES.get(scheme_id)
