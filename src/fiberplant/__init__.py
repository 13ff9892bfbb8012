#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Motor de topología de planta de fibra y gestión de empalmes.
"""

__version__ = "1.0.0"
