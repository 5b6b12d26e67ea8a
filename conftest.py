"""Shared builders for asset graphs and compile runs."""

import pytest

from core.scene_data import AssetGraph, SceneNode, Geometry, Material, NodeKind, CompileOptions
from exporters.jsx_exporter import JSXExporter


def _mesh(name, geometry="box", material="steel", kind=NodeKind.MESH, **kwargs):
    return SceneNode(name=name, kind=kind, geometry=geometry, material=material, **kwargs)


def _group(name, children=(), **kwargs):
    return SceneNode(name=name, kind=NodeKind.GROUP, children=list(children), **kwargs)


def _asset(roots, **kwargs):
    """AssetGraph whose geometry/material indexes cover every reference"""
    asset = AssetGraph(roots=list(roots), **kwargs)
    for node in asset.iter_nodes():
        if node.geometry and node.geometry not in asset.geometries:
            asset.geometries[node.geometry] = Geometry(key=node.geometry, name=node.geometry)
        if node.material and node.material not in asset.materials:
            asset.materials[node.material] = Material(key=node.material, name=node.material.capitalize())
    return asset


@pytest.fixture
def mesh():
    return _mesh


@pytest.fixture
def group():
    return _group


@pytest.fixture
def build_asset():
    return _asset


@pytest.fixture
def compile_jsx():
    def compile_jsx(asset, **options):
        return JSXExporter(CompileOptions(**options)).compile(asset)
    return compile_jsx
