#!/usr/bin/env python3
"""
JSX Writer Module
Line buffer with an indentation cursor for generated JSX/TSX source.
"""


class JSXWriter:
    """Accumulates indented lines of generated source

    Elements whose single-line form would exceed print_width are broken one
    prop per line.
    """

    def __init__(self, print_width=120, indent="  ", depth=0):
        self.print_width = print_width
        self.indent_unit = indent
        self.depth = depth
        self.lines = []

    def line(self, text=""):
        """Append one line at the current depth (blank lines stay empty)"""
        self.lines.append(f"{self.indent_unit * self.depth}{text}" if text else "")

    def extend(self, lines):
        for text in lines:
            self.line(text)

    def indent(self):
        self.depth += 1

    def dedent(self):
        self.depth = max(0, self.depth - 1)

    def self_closing(self, tag, props):
        """Write <tag props />"""
        self._tag(tag, props, "/>")

    def open_element(self, tag, props):
        """Write <tag props> and indent for its children"""
        self._tag(tag, props, ">")
        self.indent()

    def close_element(self, tag):
        self.dedent()
        self.line(f"</{tag}>")

    def _tag(self, tag, props, end):
        joined = " ".join(props)
        opening = f"<{tag} {joined}" if joined else f"<{tag}"
        single = f"{opening} {end}" if end == "/>" else f"{opening}{end}"
        if not props or len(self.indent_unit * self.depth) + len(single) <= self.print_width:
            self.line(single)
            return

        self.line(f"<{tag}")
        self.indent()
        for prop in props:
            self.line(prop)
        self.dedent()
        self.line(end)

    def getvalue(self):
        """Return the buffered source, newline terminated"""
        return "\n".join(self.lines) + "\n"
