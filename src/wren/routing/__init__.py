"""Routing: compiled route table with O(path-depth) matching.

Routes are built from view declarations when the app freezes and
compiled into an immutable lookup structure.
"""

from wren.routing.route import PathTemplate, Route
from wren.routing.router import Router

__all__ = ["PathTemplate", "Route", "Router"]
