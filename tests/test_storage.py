#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
import unittest
import tempfile
import shutil

from fiberplant.model.network_model import NetworkModel
from fiberplant.model.storage import NetworkStorage
from fiberplant.model.topology_editor import TopologyEditor
from tests.fixtures import akono_network, sample_sites


class TestNetworkStorage(unittest.TestCase):
    """Pruebas del almacenamiento SQLite de redes."""

    def setUp(self):
        """Preparar entorno de prueba."""
        # Crear directorio temporal para tests
        self.test_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.test_dir, 'data', 'test_networks.db')
        self.storage = NetworkStorage(self.db_path)

    def tearDown(self):
        """Limpiar después de las pruebas."""
        self.storage.close()
        shutil.rmtree(self.test_dir)

    def test_creates_database_directory(self):
        self.assertTrue(os.path.exists(self.db_path))

    def test_save_load_list_delete(self):
        network = akono_network()
        self.assertTrue(self.storage.save_network(network.to_dict()))
        self.assertTrue(self.storage.network_exists('bb-mbyo-akono'))

        record = self.storage.load_network('bb-mbyo-akono')
        restored = NetworkModel.from_dict(record, sites=sample_sites())
        self.assertEqual(restored.section_ids(), ['sec-mbyo-akono'])
        self.assertAlmostEqual(restored.distance_km, 22.5)

        listed = self.storage.list_networks()
        self.assertEqual([n['id'] for n in listed], ['bb-mbyo-akono'])
        self.assertEqual(listed[0]['name'], 'Liaison Mbalmayo-Akono')

        self.assertTrue(self.storage.delete_network('bb-mbyo-akono'))
        self.assertIsNone(self.storage.load_network('bb-mbyo-akono'))
        self.assertFalse(self.storage.delete_network('bb-mbyo-akono'))

    def test_save_replaces_existing_record(self):
        network = akono_network()
        self.storage.save_network(network.to_dict())
        network.name = 'Liaison Mbalmayo-Akono (rev. 2)'
        self.storage.save_network(network.to_dict())
        self.assertEqual(len(self.storage.list_networks()), 1)
        self.assertEqual(self.storage.load_network('bb-mbyo-akono')['name'],
                         'Liaison Mbalmayo-Akono (rev. 2)')

    def test_topology_history_filters(self):
        self.storage.log_topology_change('bb-1', 'split_section', 'sec-a', 'detalle',
                                         timestamp='2026-01-01T10:00:00')
        self.storage.log_topology_change('bb-1', 'delete_point', 'ch-b',
                                         timestamp='2026-01-02T10:00:00')
        self.storage.log_topology_change('bb-2', 'split_section', 'sec-c')

        history = self.storage.get_topology_history('bb-1')
        self.assertEqual([h['action'] for h in history], ['delete_point', 'split_section'])
        self.assertEqual(len(self.storage.get_topology_history(action='split_section')), 2)
        self.assertEqual(len(self.storage.get_topology_history('bb-1', limit=1)), 1)

    def test_editor_commit_writes_record_and_change_log(self):
        """commit() guarda la red y vacía el registro de cambios pendiente."""
        network = akono_network()
        editor = TopologyEditor(network, storage=self.storage)
        editor.create_point((3.46, 11.45), name='Chambre Nkolmebanga')
        editor.delete_section('sec-mbyo-akono', confirmed=True)

        success, message = editor.commit()
        self.assertTrue(success, message)
        self.assertEqual(editor.pending_changes, [])
        record = self.storage.load_network('bb-mbyo-akono')
        self.assertEqual(record['sections'], [])
        self.assertEqual(len(record['infrastructurePoints']), 1)
        actions = {h['action'] for h in self.storage.get_topology_history('bb-mbyo-akono')}
        self.assertEqual(actions, {'create_point', 'delete_section'})


if __name__ == '__main__':
    unittest.main()
