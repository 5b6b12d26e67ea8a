#!/usr/bin/env python3
"""
Compile errors raised by the scene compiler.

All of them are raised synchronously from the single compile call; nothing
is emitted when one is raised.
"""


class SceneCompileError(Exception):
    """Base class for compile failures tied to one node of an asset"""

    def __init__(self, message, node_name="", asset_path=""):
        self.node_name = node_name
        self.asset_path = asset_path
        where = f" (node '{node_name}' in {asset_path or '<memory>'})"
        super().__init__(message + where)


class UnsupportedNodeKind(SceneCompileError):
    """The emitter met a node kind it has no element for"""

    def __init__(self, kind, node_name="", asset_path=""):
        self.kind = kind
        super().__init__(f"Unsupported node kind: {kind!r}", node_name, asset_path)


class MalformedTransform(SceneCompileError):
    """A transform component is NaN or infinite"""

    def __init__(self, component, node_name="", asset_path=""):
        self.component = component
        super().__init__(f"Non-finite {component} in transform", node_name, asset_path)


class AmbiguousIdentifier(Exception):
    """Identifier registered twice in one scope. Indicates an allocator bug."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Identifier already assigned in scope: {name}")
