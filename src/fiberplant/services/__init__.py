#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Colaboradores externos: proveedores de ruta y de búsqueda de lugares.
"""
