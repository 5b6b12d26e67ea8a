#!/usr/bin/env python3
"""
glTF to JSX Converter - Main Orchestrator Module
Coordinates the conversion using the modular reader and exporter

Readers extract everything into a format-agnostic AssetGraph, the exporter
works only with the AssetGraph (no direct reader access).
"""

from dataclasses import replace
from pathlib import Path

# Import readers module
from readers import create_reader, get_file_type

# Import exporters
from exporters.jsx_exporter import JSXExporter, GENERATOR

from core.scene_data import CompileOptions


class GLTFToJSXConverter:
    """glTF to React Three Fiber component converter (orchestrator/facade)

    This class coordinates the conversion process:
    1. Read input file ONCE (via readers module)
    2. Compile the asset graph (walk, deduplicate, prune, emit)
    3. Write the component file
    """

    def __init__(self, progress_callback=None):
        """Initialize converter

        Args:
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress updates to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    def default_output(self, input_file, options=None):
        """<input stem>.jsx next to the input, .tsx when emitting types"""
        options = options or CompileOptions()
        extension = ".tsx" if options.types else ".jsx"
        return Path(input_file).with_suffix(extension)

    def convert(self, input_file, output_file=None, options=None):
        """Convert a glTF/GLB file into a component source file

        Args:
            input_file: Path to input scene file (.gltf, .glb)
            output_file: Destination path (None = <input stem>.jsx/.tsx)
            options: CompileOptions (None = defaults; file_name is taken from
                     the input name when left at its default)

        Returns:
            dict: Results with keys:
                - 'success': bool
                - 'jsx_file': Written path (on success)
                - 'files': List of created files
                - 'message': Summary message
        """
        options = options or CompileOptions()
        try:
            input_path = Path(input_file)
            if options.file_name == CompileOptions.file_name:
                options = replace(options, file_name=input_path.name)
            output_path = Path(output_file) if output_file else self.default_output(input_path, options)

            self.log(f"\n{'='*60}")
            self.log(f"{GENERATOR}")
            self.log(f"{'='*60}")
            self.log(f"Input: {input_file} ({get_file_type(str(input_path))})")
            self.log(f"Output: {output_path}")
            self.log(f"{'='*60}\n")

            # Step 1: Read input file ONCE
            self.log("Step 1/3: Reading scene file...")
            reader = create_reader(str(input_path))
            asset = reader.get_asset()

            self.log(f"  - Nodes: {sum(1 for _ in asset.iter_nodes())}")
            self.log(f"  - Geometries: {len(asset.geometries)}")
            self.log(f"  - Materials: {len(asset.materials)}")
            self.log(f"  - Animations: {len(asset.animations)}")

            # Step 2 + 3: Compile and write
            self.log("\nStep 2/3: Compiling component tree...")
            exporter = JSXExporter(options, self.progress_callback)
            result = exporter.export(asset, output_path)

            self.log("\nStep 3/3: Summary")
            if options.debug and exporter.stats:
                stats = exporter.stats
                self.log(f"  - Nodes visited: {stats['nodes']}")
                self.log(f"  - Groups pruned: {stats['pruned']}")
                self.log(f"  - Instanced classes: {stats['instanced']}")
                self.log(f"  - Materials referenced: {stats['materials']}")
                self.log(f"  - Geometries referenced: {stats['geometries']} ({stats['vertices']} vertices)")
                if stats['skins']:
                    self.log(f"  - Skins: {stats['skins']} ({stats['joints']} joints)")
                for line in stats['instancing_summary'].splitlines():
                    self.log(f"    {line}")
            self.log(exporter.get_export_summary(result))
            self.log(f"{'='*60}\n")

            return result

        except Exception as e:
            self.log(f"\nERROR: {str(e)}")
            if options.debug:
                import traceback
                self.log(traceback.format_exc())
            return {
                'success': False,
                'files': [],
                'message': f"Conversion failed: {str(e)}"
            }
