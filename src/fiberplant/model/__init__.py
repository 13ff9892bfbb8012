#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Paquete del modelo: catálogo de estándares, entidades, agregado de red,
editor de topología y motor de empalmes.
"""

from fiberplant.model.entities import (
    FiberStrand, CableSection, InfrastructurePoint, SplicingConnection, Site
)
from fiberplant.model.network_model import NetworkModel
from fiberplant.model.results import EditResult
from fiberplant.model.splicing import SpliceSession
from fiberplant.model.standards import FiberStandard, get_standard, generate_strands
from fiberplant.model.storage import NetworkStorage
from fiberplant.model.topology_editor import TopologyEditor

__all__ = [
    'FiberStrand', 'CableSection', 'InfrastructurePoint', 'SplicingConnection', 'Site',
    'NetworkModel', 'EditResult', 'SpliceSession', 'FiberStandard', 'get_standard',
    'generate_strands', 'NetworkStorage', 'TopologyEditor',
]
