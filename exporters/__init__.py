#!/usr/bin/env python3
"""
Exporters Module
Component source exporters (React Three Fiber JSX/TSX)
"""

from .base_exporter import BaseExporter
from .jsx_exporter import JSXExporter

__all__ = [
    'BaseExporter',
    'JSXExporter',
]
