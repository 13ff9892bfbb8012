#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import sqlite3
import os
import json
from datetime import datetime

logger = logging.getLogger(__name__)


class NetworkStorage:
    """Persistencia de redes (agregados serializados) usando SQLite, indexada por ID de red."""

    def __init__(self, db_path):
        """Inicializa el almacenamiento.

        Args:
            db_path: Ruta al archivo SQLite
        """
        self.db_path = db_path

        # Asegurar que el directorio existe
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        self._init_db()

        logger.info(f"Almacenamiento configurado en: {db_path}")

    def _connect(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Para acceder a columnas por nombre
        return conn

    def _init_db(self):
        """Inicializa la estructura de la base de datos."""
        try:
            conn = self._connect()
            cursor = conn.cursor()
            self._create_schema(cursor)
            conn.commit()
            conn.close()
            logger.info("Base de datos inicializada correctamente")
        except Exception as e:
            logger.error(f"Error inicializando base de datos: {e}")
            raise

    def _create_schema(self, cursor):
        """Crea el esquema de la base de datos si no existe."""
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS networks (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                category TEXT,
                data TEXT NOT NULL,
                created TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                modified TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        # Registro de cambios estructurales (corte, borrado en cascada...)
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS topology_change_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                network_id TEXT NOT NULL,
                action TEXT NOT NULL,
                target_id TEXT,
                detail TEXT
            )
        ''')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_change_network ON topology_change_log(network_id)')

    def save_network(self, record):
        """Guarda (inserta o reemplaza) el registro serializado de una red.

        Args:
            record: dict producido por NetworkModel.to_dict()

        Returns:
            bool: True si se guardó correctamente
        """
        network_id = record.get('id')
        try:
            data_json = json.dumps(record, default=str)
            conn = self._connect()
            cursor = conn.cursor()
            cursor.execute('SELECT created FROM networks WHERE id = ?', (network_id,))
            row = cursor.fetchone()
            created = row['created'] if row else datetime.now().isoformat()
            cursor.execute('''
                INSERT OR REPLACE INTO networks (id, name, category, data, created, modified)
                VALUES (?, ?, ?, ?, ?, datetime('now'))
            ''', (network_id, record.get('name', ''), record.get('category'), data_json, created))
            conn.commit()
            conn.close()
            logger.info(f"Red '{network_id}' guardada correctamente")
            return True
        except Exception as e:
            logger.error(f"Error guardando red '{network_id}': {e}")
            return False

    def load_network(self, network_id):
        """Carga el registro de una red.

        Returns:
            dict: Registro de la red o None si no se encuentra
        """
        try:
            conn = self._connect()
            cursor = conn.cursor()
            cursor.execute('SELECT data FROM networks WHERE id = ?', (network_id,))
            row = cursor.fetchone()
            conn.close()
            if row:
                return json.loads(row['data'])
            logger.warning(f"Red '{network_id}' no encontrada")
            return None
        except Exception as e:
            logger.error(f"Error cargando red '{network_id}': {e}")
            return None

    def list_networks(self):
        """Lista las redes guardadas.

        Returns:
            list: dicts con id, name, category, created, modified
        """
        try:
            conn = self._connect()
            cursor = conn.cursor()
            cursor.execute('''
                SELECT id, name, category, created, modified FROM networks
                ORDER BY modified DESC, id
            ''')
            networks = [dict(row) for row in cursor.fetchall()]
            conn.close()
            return networks
        except Exception as e:
            logger.error(f"Error listando redes: {e}")
            return []

    def network_exists(self, network_id):
        try:
            conn = self._connect()
            cursor = conn.cursor()
            cursor.execute('SELECT 1 FROM networks WHERE id = ?', (network_id,))
            exists = cursor.fetchone() is not None
            conn.close()
            return exists
        except Exception as e:
            logger.error(f"Error comprobando red '{network_id}': {e}")
            return False

    def delete_network(self, network_id):
        """Elimina una red y su historial de cambios."""
        try:
            conn = self._connect()
            cursor = conn.cursor()
            cursor.execute('DELETE FROM networks WHERE id = ?', (network_id,))
            deleted = cursor.rowcount > 0
            cursor.execute('DELETE FROM topology_change_log WHERE network_id = ?', (network_id,))
            conn.commit()
            conn.close()
            if deleted:
                logger.info(f"Red '{network_id}' eliminada")
            return deleted
        except Exception as e:
            logger.error(f"Error eliminando red '{network_id}': {e}")
            return False

    def log_topology_change(self, network_id, action, target_id=None, detail=None, timestamp=None):
        """Registra un cambio estructural de la topología."""
        try:
            conn = self._connect()
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO topology_change_log (timestamp, network_id, action, target_id, detail)
                VALUES (?, ?, ?, ?, ?)
            ''', (timestamp or datetime.now().isoformat(), network_id, action, target_id, detail))
            conn.commit()
            conn.close()
            return True
        except Exception as e:
            logger.error(f"Error registrando cambio de topología: {e}")
            return False

    def get_topology_history(self, network_id=None, action=None, limit=100):
        """Consulta el historial de cambios de topología.

        Args:
            network_id: ID de la red (opcional)
            action: tipo de cambio (opcional)
            limit: máximo de registros a devolver
        Returns:
            Lista de dicts ordenados por timestamp descendente.
        """
        try:
            conn = self._connect()
            cursor = conn.cursor()
            query = "SELECT * FROM topology_change_log WHERE 1=1"
            params = []
            if network_id:
                query += " AND network_id = ?"
                params.append(network_id)
            if action:
                query += " AND action = ?"
                params.append(action)
            query += " ORDER BY timestamp DESC, id DESC LIMIT ?"
            params.append(limit)
            cursor.execute(query, params)
            rows = cursor.fetchall()
            conn.close()
            return [dict(row) for row in rows]
        except Exception as e:
            logger.error(f"Error consultando historial de topología: {e}")
            return []

    def close(self):
        """Cierra cualquier recurso pendiente."""
        # Cada operación abre y cierra su propia conexión
        pass
