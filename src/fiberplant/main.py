#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import argparse
import json
import logging
import sys

from fiberplant import config
from fiberplant.model.network_model import NetworkModel
from fiberplant.model.standards import list_standards
from fiberplant.model.storage import NetworkStorage

logger = logging.getLogger(__name__)


def setup_logging(level=logging.INFO, log_file=None):
    """Configuración de logging: consola + fichero en el directorio de datos."""
    handlers = [logging.StreamHandler()]
    if log_file is not False:
        handlers.append(logging.FileHandler(log_file or config.log_path(), mode='a'))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def network_summary(network):
    """Resumen de diagnóstico de una red."""
    record = network.to_dict()
    return {
        'id': network.id,
        'name': network.name,
        'category': network.category,
        'status': network.status,
        'distanceKm': round(network.distance_km, 3),
        'startCoordinates': record['startCoordinates'],
        'endCoordinates': record['endCoordinates'],
        'sections': [
            {
                'id': s.id,
                'name': s.name,
                'fiberCount': s.fiber_count,
                'lengthKm': s.length_km,
                'isHosted': s.is_hosted,
                'from': network.resolve_point_label(s.start_point_id),
                'to': network.resolve_point_label(s.end_point_id),
            }
            for s in network.sections.values()
        ],
        'points': [
            {'id': p.id, 'name': p.name, 'category': p.category, 'connections': len(p.connections)}
            for p in network.points.values()
        ],
        'groups': network.connected_groups(),
    }


def _build_parser():
    parser = argparse.ArgumentParser(prog='fiberplant',
                                     description='Diagnóstico de redes de planta de fibra')
    parser.add_argument('--db', default=None, help='Ruta de la base SQLite')
    parser.add_argument('-v', '--verbose', action='store_true')
    sub = parser.add_subparsers(dest='command')
    sub.add_parser('list', help='Lista las redes guardadas')
    sub.add_parser('standards', help='Muestra el catálogo de estándares')
    summary = sub.add_parser('summary', help='Resumen de una red')
    summary.add_argument('network_id')
    history = sub.add_parser('history', help='Historial de cambios de una red')
    history.add_argument('network_id')
    history.add_argument('--limit', type=int, default=50)
    return parser


def main(argv=None):
    """Función principal del diagnóstico por línea de comandos."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == 'standards':
        print(json.dumps([s.to_dict() for s in list_standards()], indent=2, ensure_ascii=False))
        return 0

    try:
        storage = NetworkStorage(args.db or config.db_path())
    except Exception as e:
        logger.error(f"Error crítico abriendo almacenamiento: {e}")
        return 1

    try:
        if args.command == 'list':
            output = storage.list_networks()
        elif args.command == 'history':
            output = storage.get_topology_history(args.network_id, limit=args.limit)
        else:
            record = storage.load_network(args.network_id)
            if record is None:
                print(f"Red '{args.network_id}' no encontrada", file=sys.stderr)
                return 2
            output = network_summary(NetworkModel.from_dict(record))
        print(json.dumps(output, indent=2, ensure_ascii=False, default=str))
        return 0
    finally:
        storage.close()


if __name__ == "__main__":
    sys.exit(main())
