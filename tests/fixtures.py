#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Datos de prueba: sitios y redes reducidas del backbone sur (Mbalmayo).
"""

from fiberplant.constants import (
    SITE_CTT, SITE_TOWER, SITE_TECHNICAL_ROOM, SITE_TRANSMISSION_CENTER,
    NETWORK_BACKBONE, NETWORK_LAST_MILE, CATEGORY_ARTERE, POINT_TYPE_MANCHON_ENTERRE
)
from fiberplant.model.entities import CableSection, InfrastructurePoint, Site
from fiberplant.model.network_model import NetworkModel
from fiberplant.model.standards import generate_strands, get_standard

MBALMAYO = (3.517095, 11.501273)
AKONO = (3.505, 11.330)
ZOATOUPSI = (3.459933, 11.513630)


def sample_sites():
    return {
        'ctt-mbalmayo': Site('ctt-mbalmayo', 'CTT Mbalmayo', SITE_CTT, MBALMAYO),
        'site-akono': Site('site-akono', 'Akono', SITE_TOWER, AKONO),
        'site-ebanga': Site('site-ebanga', 'Ebanga-Ngoulou', SITE_TECHNICAL_ROOM, (3.125470, 11.409178)),
        'site-sangmelima': Site('site-sangmelima', 'Sangmelima', SITE_TRANSMISSION_CENTER, (2.9333, 11.9833)),
    }


def make_section(section_id, standard_id, start=None, end=None, length_km=0.0,
                 start_coordinate=None, end_coordinate=None, services=None, name=None,
                 is_hosted=False):
    standard = get_standard(standard_id)
    return CableSection(
        section_id, name or f"Tronçon {section_id}",
        fiber_count=standard.fiber_count,
        standard_id=standard.id,
        length_km=length_km,
        start_point_id=start,
        end_point_id=end,
        start_coordinate=start_coordinate,
        end_coordinate=end_coordinate,
        strands=generate_strands(standard, services, id_prefix=section_id),
        is_hosted=is_hosted,
    )


def akono_network():
    """Liaison Mbalmayo-Akono: un único tramo de 22.5 km con coordenadas."""
    section = make_section('sec-mbyo-akono', 'STD_24_4x6_CAM', 'ctt-mbalmayo', 'site-akono',
                           length_km=22.5, start_coordinate=MBALMAYO, end_coordinate=AKONO,
                           services=[{'number': 1, 'service_name': 'Services Akono'}])
    return NetworkModel('bb-mbyo-akono', 'Liaison Mbalmayo-Akono', category=NETWORK_LAST_MILE,
                        sections=[section], manual_distance_km=22.5, sites=sample_sites())


def zoatoupsi_networks():
    """Backbone con un manchon en Zoatoupsi y una red hermana que sale del mismo punto."""
    manchon = InfrastructurePoint('ch-zoa', 'Manchon Zoatoupsi (PK 8.6)',
                                  point_type=POINT_TYPE_MANCHON_ENTERRE,
                                  category=CATEGORY_ARTERE, coordinates=ZOATOUPSI)
    incoming = make_section('sec-mbyo-zoa', 'STD_48_4x12', 'ctt-mbalmayo', 'ch-zoa', length_km=8.6,
                            services=[{'number': 1, 'service_name': 'Backbone Sud'},
                                      {'number': 2, 'service_name': 'Protection'}])
    to_ebanga = make_section('sec-zoa-eba', 'STD_24_4x6_CAM', 'ch-zoa', 'site-ebanga', length_km=37.0)
    backbone = NetworkModel('bb-mbyo-ebolowa', 'Backbone Mbalmayo-Ebolowa', category=NETWORK_BACKBONE,
                            sections=[incoming, to_ebanga], points=[manchon], sites=sample_sites())

    to_sang = make_section('sec-zoa-sang', 'STD_12_1x12', 'ch-zoa', 'site-sangmelima', length_km=110.0)
    sibling = NetworkModel('bb-mbyo-sangmelima', 'Backbone Mbalmayo-Sangmelima',
                           category=NETWORK_BACKBONE, sections=[to_sang], sites=sample_sites())
    return backbone, sibling
