#!/usr/bin/env python3
"""
gltf2jsx - Command Line Version
Turns a glTF/GLB asset into a reusable React Three Fiber component
"""

import argparse
import os
import sys
from pathlib import Path

# Import the converter class from the orchestrator module
from gltf_converter import GLTFToJSXConverter
from core.scene_data import CompileOptions, InstancingMode

# Supported file extensions
VALID_EXTENSIONS = {'.gltf', '.glb'}


def build_parser():
    parser = argparse.ArgumentParser(
        prog='gltf2jsx',
        description='Convert glTF (.gltf/.glb) files into React Three Fiber components',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Model.jsx next to the input
  python g2j.py model.glb

  # TypeScript with shadows, instancing every repeated mesh
  python g2j.py model.glb -o src/Model.tsx --types --shadows --instanceall

  # Asset served from public/models/model.glb
  python g2j.py public/models/model.glb --root public

Instancing:
  --instance     repeated geometry is shared, materials may differ per placement
  --instanceall  geometry and material must both match
        """
    )

    parser.add_argument('input', type=str, help='Input scene file (.gltf, .glb)')
    parser.add_argument('--output', '-o', type=str,
                        help='Output file (default: <input stem>.jsx, .tsx with --types)')
    parser.add_argument('--keepnames', '-k', action='store_true',
                        help='Keep original names as name props')
    parser.add_argument('--keeporiginalnames', action=argparse.BooleanOptionalAction, default=True,
                        help='Name instances entries after their source meshes (default: on)')
    parser.add_argument('--keepgroups', '-K', action='store_true',
                        help='Keep (empty) groups, disable pruning')
    parser.add_argument('--meta', '-m', action='store_true',
                        help='Include metadata (as userData)')
    parser.add_argument('--types', '-t', action='store_true',
                        help='Add TypeScript definitions')
    parser.add_argument('--shadows', '-s', action='store_true',
                        help='Let meshes cast and receive shadows')
    parser.add_argument('--precision', '-p', type=int, default=2,
                        help='Number of fractional digits (default: 2)')
    parser.add_argument('--printwidth', '-w', type=int, default=120,
                        help='Prettier-like print width (default: 120)')
    parser.add_argument('--instance', '-i', action='store_true',
                        help='Instance re-occuring geometry')
    parser.add_argument('--instanceall', '-I', action='store_true',
                        help='Instance every geometry (for cheaper re-use)')
    parser.add_argument('--root', '-r', type=str,
                        help='Directory the asset is served from (sets the asset URL)')
    parser.add_argument('--debug', '-D', action='store_true',
                        help='Debug output')
    return parser


def options_from_args(args):
    """CompileOptions for the parsed command line"""
    input_path = Path(args.input)
    if args.root:
        file_name = Path(os.path.relpath(input_path, args.root)).as_posix()
    else:
        file_name = input_path.name

    if args.instanceall:
        instancing = InstancingMode.ALL
    elif args.instance:
        instancing = InstancingMode.SELECTIVE
    else:
        instancing = InstancingMode.NONE

    return CompileOptions(
        keep_original_names=args.keeporiginalnames,
        keep_names=args.keepnames,
        keep_groups=args.keepgroups,
        meta=args.meta,
        types=args.types,
        shadows=args.shadows,
        precision=args.precision,
        print_width=args.printwidth,
        instancing=instancing,
        file_name=file_name,
        debug=args.debug,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Validate input file exists
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    # Validate file extension
    file_ext = input_path.suffix.lower()
    if file_ext not in VALID_EXTENSIONS:
        print(f"Error: Unsupported file format: {file_ext}", file=sys.stderr)
        print(f"Supported formats: {', '.join(sorted(VALID_EXTENSIONS))}", file=sys.stderr)
        sys.exit(1)

    try:
        options = options_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    converter = GLTFToJSXConverter()
    result = converter.convert(str(input_path), args.output, options)

    if result.get('success'):
        print("✓ Conversion completed successfully!")
        print(f"✓ Component file: {result['jsx_file']}")
    else:
        print(f"\n✗ {result.get('message', 'Conversion failed')}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
