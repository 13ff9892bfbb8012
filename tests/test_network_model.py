#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import unittest

from fiberplant.constants import UNKNOWN_POINT_LABEL
from fiberplant.model.entities import SplicingConnection
from fiberplant.model.network_model import NetworkModel, build_topology_graph
from tests.fixtures import (
    akono_network, zoatoupsi_networks, make_section, sample_sites, MBALMAYO, AKONO
)


class TestNetworkModel(unittest.TestCase):
    """Pruebas del agregado de red."""

    def setUp(self):
        """Preparar entorno de prueba."""
        self.network, self.sibling = zoatoupsi_networks()

    def test_distance_excludes_hosted_sections(self):
        """La distancia suma los tramos propios; los alojados no cuentan."""
        self.assertAlmostEqual(self.network.distance_km, 8.6 + 37.0)
        hosted = make_section('sec-hosted', 'STD_12_1x12', 'ch-zoa', 'site-sangmelima',
                              length_km=110.0, is_hosted=True)
        self.network.put_section(hosted)
        self.assertAlmostEqual(self.network.distance_km, 8.6 + 37.0)

    def test_distance_falls_back_to_manual_value(self):
        """Sin tramos se usa la distancia manual."""
        network = NetworkModel('bb-vide', 'Liaison vide', manual_distance_km=12.5)
        self.assertEqual(network.distance_km, 12.5)

    def test_derived_endpoint_coordinates(self):
        """Las coordenadas de la red salen del primer y último tramo."""
        network = akono_network()
        self.assertEqual(network.derived_start_coordinates(), MBALMAYO)
        self.assertEqual(network.derived_end_coordinates(), AKONO)
        # Tramo sin coordenadas propias: se resuelven por el sitio de referencia
        self.assertEqual(self.network.derived_start_coordinates(), MBALMAYO)

    def test_resolve_point_label(self):
        """Puntos y sitios se resuelven por nombre; lo demás es 'Point Distant/Inconnu'."""
        self.assertEqual(self.network.resolve_point_label('ch-zoa'), 'Manchon Zoatoupsi (PK 8.6)')
        self.assertEqual(self.network.resolve_point_label('ctt-mbalmayo'), 'CTT Mbalmayo')
        self.assertEqual(self.network.resolve_point_label('infra-borrado'), UNKNOWN_POINT_LABEL)
        self.assertEqual(self.network.resolve_point_label(None), UNKNOWN_POINT_LABEL)

    def test_copy_on_write_snapshot(self):
        """Un lector con una instantánea anterior no ve las mutaciones."""
        snapshot = self.network.sections
        self.network.remove_section('sec-zoa-eba')
        self.assertIn('sec-zoa-eba', snapshot)
        self.assertNotIn('sec-zoa-eba', self.network.sections)

    def test_replace_section_keeps_position(self):
        """replace_section inserta las partes en la posición original."""
        part1 = make_section('sec-a', 'STD_48_4x12', 'ctt-mbalmayo', 'ch-mid')
        part2 = make_section('sec-b', 'STD_48_4x12', 'ch-mid', 'ch-zoa')
        self.assertTrue(self.network.replace_section('sec-mbyo-zoa', [part1, part2]))
        self.assertEqual(self.network.section_ids(), ['sec-a', 'sec-b', 'sec-zoa-eba'])
        self.assertFalse(self.network.replace_section('sec-inexistente', [part1]))

    def test_sections_at_point(self):
        ids = {s.id for s in self.network.sections_at_point('ch-zoa')}
        self.assertEqual(ids, {'sec-mbyo-zoa', 'sec-zoa-eba'})

    def test_topology_graph_and_groups(self):
        """El grafo une puntos y sitios; las redes hermanas se añaden bajo demanda."""
        graph = self.network.get_topology_graph()
        self.assertEqual(graph.number_of_edges(), 2)
        self.assertIs(graph, self.network.get_topology_graph())
        self.assertEqual(self.network.connected_groups(),
                         [['ch-zoa', 'ctt-mbalmayo', 'site-ebanga']])

        merged = self.network.get_topology_graph([self.sibling])
        self.assertEqual(merged.number_of_edges(), 3)
        self.assertEqual(merged.get_edge_data('ch-zoa', 'site-sangmelima')['sec-zoa-sang']['network_id'],
                         'bb-mbyo-sangmelima')

    def test_graph_cache_invalidated_on_mutation(self):
        graph = self.network.get_topology_graph()
        self.network.remove_section('sec-zoa-eba')
        self.assertIsNot(graph, self.network.get_topology_graph())
        self.assertEqual(self.network.get_topology_graph().number_of_edges(), 1)

    def test_open_endpoints_are_synthetic_nodes(self):
        """Un tramo sin extremos no une nada con el resto."""
        loose = make_section('sec-loose', 'STD_12_1x12')
        graph = build_topology_graph([NetworkModel('x', 'x', sections=[loose])])
        self.assertIn(('open', 'sec-loose', 'start'), graph)
        self.assertIn(('open', 'sec-loose', 'end'), graph)

    def test_shortest_route(self):
        self.assertEqual(self.network.shortest_route('ctt-mbalmayo', 'site-ebanga'),
                         ['sec-mbyo-zoa', 'sec-zoa-eba'])
        self.assertIsNone(self.network.shortest_route('ctt-mbalmayo', 'site-sangmelima'))

    def test_to_dict_from_dict(self):
        """El registro serializado reconstruye tramos, brins y empalmes."""
        point = self.network.get_point('ch-zoa')
        self.network.put_point(point.copy(connections=[
            SplicingConnection('sec-mbyo-zoa-1', 'sec-zoa-eba-1')]))
        record = self.network.to_dict()
        self.assertAlmostEqual(record['distanceKm'], 45.6)
        self.assertEqual(record['startCoordinates'], {'lat': MBALMAYO[0], 'lng': MBALMAYO[1]})
        self.assertIn('timestamp', record)

        restored = NetworkModel.from_dict(record, sites=sample_sites())
        self.assertEqual(restored.section_ids(), self.network.section_ids())
        section = restored.get_section('sec-mbyo-zoa')
        self.assertEqual(section.fiber_count, 48)
        self.assertEqual(section.strand_by_number(1).service_name, 'Backbone Sud')
        self.assertEqual(restored.get_point('ch-zoa').connections,
                         [SplicingConnection('sec-mbyo-zoa-1', 'sec-zoa-eba-1')])
        self.assertEqual(restored.get_point('ch-zoa').coordinates, point.coordinates)


if __name__ == '__main__':
    unittest.main()
