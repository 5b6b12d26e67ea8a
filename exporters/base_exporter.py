#!/usr/bin/env python3
"""
Base Exporter Module
Abstract base class ensuring consistent interface across exporters

Exporters receive an AssetGraph and never touch the reader that produced it.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.scene_data import AssetGraph


class BaseExporter(ABC):
    """Abstract base class for all format exporters

    Provides consistent interface and common utilities for all exporters.

    Key principles:
    - Single Responsibility: Each exporter handles ONE format
    - Pure compile step: compile() builds text only, export() does the file I/O
    - Shared Utilities: Common functionality (logging, path validation) provided here
    """

    def __init__(self, progress_callback=None):
        """Initialize exporter

        Args:
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress/status message

        Args:
            message: Message to log
        """
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    @abstractmethod
    def compile(self, asset: 'AssetGraph') -> str:
        """Compile an asset graph into source text without touching the disk

        Args:
            asset: Fully loaded AssetGraph

        Returns:
            str: Generated source
        """
        pass

    @abstractmethod
    def export(self, asset: 'AssetGraph', output_file):
        """Compile an asset graph and write the result

        Args:
            asset: Fully loaded AssetGraph
            output_file: Destination file path (Path object or string)

        Returns:
            dict: Export results with at least:
                  - 'success': bool
                  - 'files': list of created file paths
                  - 'message': str status message
        """
        pass

    @abstractmethod
    def get_format_name(self):
        """Return human-readable format name"""
        pass

    @abstractmethod
    def get_file_extension(self):
        """Return primary file extension for this format, without dot"""
        pass

    def validate_output_path(self, output_path):
        """Validate and create output directory if needed

        Args:
            output_path: Directory path to validate

        Returns:
            Path: Validated Path object

        Raises:
            ValueError: If path is invalid
        """
        path = Path(output_path)

        # Create directory if it doesn't exist
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ValueError(f"Cannot create output directory {path}: {e}")

        # Verify we can write to the directory
        if not path.is_dir():
            raise ValueError(f"Output path is not a directory: {path}")

        return path

    def get_export_summary(self, result):
        """Generate human-readable summary of export results

        Args:
            result: Export result dict from export() method

        Returns:
            str: Formatted summary text
        """
        lines = []
        status = "✓" if result.get('success') else "✗"
        lines.append(f"{status} {self.get_format_name()} Export")

        files = result.get('files', [])
        if files:
            lines.append(f"  Files created: {len(files)}")
            for file_path in files:
                lines.append(f"    - {Path(file_path).name}")

        if 'message' in result:
            lines.append(f"  {result['message']}")

        return "\n".join(lines)
