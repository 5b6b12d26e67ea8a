#!/usr/bin/env python3
"""
Base Reader Module
Abstract interface for loading 3D scene files into an AssetGraph
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict

from core.scene_data import AssetGraph


class BaseReader(ABC):
    """Abstract base class for scene file readers

    Provides a consistent interface for reading different 3D file formats.
    Readers do all the parsing; the compiler only ever sees the AssetGraph.
    """

    def __init__(self, file_path: str):
        """Initialize reader with file path

        Args:
            file_path: Path to the scene file
        """
        self.file_path = Path(file_path)
        self._asset_cache = None

    @abstractmethod
    def get_format_name(self) -> str:
        """Return human-readable format name (e.g., 'glTF')"""
        pass

    @abstractmethod
    def read_asset(self) -> AssetGraph:
        """Parse the file into a complete AssetGraph

        Returns:
            AssetGraph: Scene roots plus every shared entity
        """
        pass

    def get_asset(self) -> AssetGraph:
        """Read the asset ONCE and share it across callers (cached)"""
        if self._asset_cache is None:
            self._asset_cache = self.read_asset()
        return self._asset_cache

    def extract_provenance(self) -> Dict[str, str]:
        """Extract author/license/source metadata

        Returns:
            dict: Provenance fields, empty if the format has none
        """
        return {}  # Default implementation - override if supported
