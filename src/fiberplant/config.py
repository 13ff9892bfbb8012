#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Ajustes de ejecución: directorio de datos y proveedores externos.
Cada valor puede sobrescribirse con una variable de entorno, p. ej.:
    export FIBERPLANT_DATA_DIR="$HOME/fiberplant_data"
    export FIBERPLANT_HTTP_TIMEOUT=10
"""

import os
from pathlib import Path


def _default_data_dir():
    return Path.home() / ".fiberplant"


def _env_float(name, default):
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def data_dir():
    """Directorio de datos (base SQLite y fichero de log). Se crea si no existe."""
    env = os.environ.get("FIBERPLANT_DATA_DIR")
    path = Path(os.path.expanduser(env)) if env else _default_data_dir()
    path = path.resolve()
    path.mkdir(parents=True, exist_ok=True)
    return path


def db_path():
    return str(data_dir() / "fiberplant.db")


def log_path():
    return str(data_dir() / "fiberplant.log")


def provider_settings():
    """Configuración de los proveedores de ruta y de búsqueda de lugares."""
    return {
        "osrm_url": os.environ.get(
            "FIBERPLANT_OSRM_URL", "https://router.project-osrm.org/route/v1/driving"
        ),
        "nominatim_url": os.environ.get(
            "FIBERPLANT_NOMINATIM_URL", "https://nominatim.openstreetmap.org"
        ),
        "timeout": _env_float("FIBERPLANT_HTTP_TIMEOUT", 5.0),
        "user_agent": os.environ.get("FIBERPLANT_USER_AGENT", "fiberplant"),
    }


__all__ = ["data_dir", "db_path", "log_path", "provider_settings"]
