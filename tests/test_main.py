#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import io
import json
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from fiberplant import config
from fiberplant.main import main, network_summary
from fiberplant.model.storage import NetworkStorage
from tests.fixtures import akono_network


class TestCommandLine(unittest.TestCase):
    """Pruebas del diagnóstico por línea de comandos."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.env = mock.patch.dict(os.environ, {'FIBERPLANT_DATA_DIR': self.test_dir})
        self.env.start()
        self.db_path = os.path.join(self.test_dir, 'cli.db')
        storage = NetworkStorage(self.db_path)
        storage.save_network(akono_network().to_dict())
        storage.log_topology_change('bb-mbyo-akono', 'split_section', 'sec-mbyo-akono')

    def tearDown(self):
        self.env.stop()
        shutil.rmtree(self.test_dir)

    def _run(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(['--db', self.db_path] + list(argv))
        return code, out.getvalue()

    def test_data_dir_from_environment(self):
        self.assertEqual(str(config.data_dir()), os.path.realpath(self.test_dir))
        self.assertTrue(config.db_path().endswith('fiberplant.db'))

    def test_list(self):
        code, output = self._run('list')
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(output)[0]['id'], 'bb-mbyo-akono')

    def test_summary(self):
        code, output = self._run('summary', 'bb-mbyo-akono')
        self.assertEqual(code, 0)
        summary = json.loads(output)
        self.assertEqual(summary['distanceKm'], 22.5)
        # Sin contexto de sitios los extremos no se resuelven
        self.assertEqual(summary['sections'][0]['from'], 'Point Distant/Inconnu')

    def test_summary_missing_network(self):
        code, _ = self._run('summary', 'bb-inexistente')
        self.assertEqual(code, 2)

    def test_history_and_standards(self):
        code, output = self._run('history', 'bb-mbyo-akono')
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(output)[0]['action'], 'split_section')
        code, output = self._run('standards')
        self.assertEqual(len(json.loads(output)), 10)

    def test_network_summary_resolves_sites(self):
        summary = network_summary(akono_network())
        self.assertEqual(summary['sections'][0]['from'], 'CTT Mbalmayo')
        self.assertEqual(summary['sections'][0]['to'], 'Akono')
        self.assertEqual(summary['groups'], [['ctt-mbalmayo', 'site-akono']])


if __name__ == '__main__':
    unittest.main()
