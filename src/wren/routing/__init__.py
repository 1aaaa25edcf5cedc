"""Routing — ordered route table with first-match-wins dispatch.

Routes are registered during setup, compiled once at registration,
and matched in registration order at request time.
"""

from wren.routing.pattern import PathPattern, compile_pattern
from wren.routing.route import ANY, METHODS, Route, RouteMatch
from wren.routing.router import Router

__all__ = ["ANY", "METHODS", "PathPattern", "Route", "RouteMatch", "Router", "compile_pattern"]
