#!/usr/bin/env python3
"""
Identifier Allocator Module
Produces unique, JavaScript-safe identifiers for the declarations of one
compile pass, and reproduces the object names the three.js loader assigns so
lookups into the loaded nodes/materials maps hit the right keys.
"""

import re
from typing import Dict

from core.errors import AmbiguousIdentifier

# Base names used when the source name cannot (or may not) be kept
KIND_BASES = {
    'geometry': 'nodes',
    'material': 'materials',
}

JS_IDENTIFIER = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')

RESERVED_WORDS = frozenset("""
    abstract any arguments as async await boolean break byte case catch char
    class const constructor continue debugger declare default delete do double
    else enum eval export extends false final finally float for from function
    get goto if implements import in infer instanceof int interface is keyof
    let long module namespace native never new null number object of package
    private protected public readonly require return set short static string
    super switch symbol synchronized this throw throws transient true try type
    typeof undefined unique unknown var void volatile while with yield
""".split())


def sanitize(name):
    """Reduce a raw name to a valid identifier, or '' if nothing survives"""
    if not name:
        return ""
    sanitized = re.sub(r'\s+', '_', name.strip())
    sanitized = re.sub(r'[^A-Za-z0-9_$]', '', sanitized)
    if sanitized and sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    return sanitized


def is_identifier(name):
    """True when name can follow a dot in a member access"""
    return bool(name) and JS_IDENTIFIER.match(name) is not None


def runtime_name(name):
    """Object name three.js derives from a source name

    Whitespace becomes '_' and the characters PropertyBinding reserves
    ([ ] . : /) are removed.
    """
    return re.sub(r'[\[\].:/]', '', re.sub(r'\s', '_', name or ""))


class RuntimeNames:
    """Unique object names in the order the loader hands them out

    The first claim of a sanitized name keeps it, later claims get _1, _2 and
    so on. Generated suffixed names are not recorded, exactly like
    GLTFParser.createUniqueName. Unnamed objects are never claimed.
    """

    def __init__(self):
        self._used: Dict[str, int] = {}

    def claim(self, name):
        if not name:
            return ""
        sanitized = runtime_name(name)
        if sanitized in self._used:
            self._used[sanitized] += 1
            return f"{sanitized}_{self._used[sanitized]}"
        self._used[sanitized] = 0
        return sanitized


class IdentifierAllocator:
    """Unique identifiers within one declaration scope

    Policy:
    - keep_original_names: the sanitized candidate is returned verbatim when
      it is non-empty, not reserved and not yet used
    - otherwise a base derived from the entity kind gets a numeric suffix,
      starting at 1 and skipping taken values

    Allocation always succeeds; the suffix space is unbounded.
    """

    def __init__(self, keep_original_names=True):
        self.keep_original_names = keep_original_names
        self.registry: Dict[str, str] = {}  # assigned identifier -> raw candidate
        self._counters: Dict[str, int] = {}

    def __contains__(self, name):
        return name in self.registry

    def allocate(self, candidate, kind='node'):
        """Return a fresh identifier for a raw candidate name

        Args:
            candidate: Source name (may be empty or contain illegal characters)
            kind: Entity kind, selects the fallback base

        Returns:
            str: Identifier unique in this scope
        """
        sanitized = sanitize(candidate)
        if self.keep_original_names and self._is_free(sanitized):
            return self._register(sanitized, candidate)

        base = KIND_BASES.get(kind) or sanitize(kind) or 'node'
        counter = self._counters.get(base, 1)
        while not self._is_free(f"{base}{counter}"):
            counter += 1
        self._counters[base] = counter + 1
        return self._register(f"{base}{counter}", candidate)

    def _is_free(self, name):
        return bool(name) and name not in RESERVED_WORDS and name not in self.registry

    def _register(self, name, candidate):
        if name in self.registry:
            raise AmbiguousIdentifier(name)
        self.registry[name] = candidate or ""
        return name
