"""
Name registry and trigger graph accumulated while walking a board.
Both are owned by a single SceneBuilder and never shared between parses.
"""
from typing import Dict, Optional, Set

from pingball_jax.data_model import Gadget, GADGET_TYPES
from pingball_jax.errors import DuplicateNameError, UnresolvedReferenceError


class GadgetRegistry:
    """name → gadget, with unique names enforced on insertion."""

    def __init__(self):
        self._gadgets: Dict[str, Gadget] = {}

    def __contains__(self, name):
        return name in self._gadgets

    def __len__(self):
        return len(self._gadgets)

    def register(self, gadget: Gadget, line: Optional[int] = None,
                 text: Optional[str] = None):
        if not isinstance(gadget, GADGET_TYPES):
            raise TypeError(f"Only gadgets can be registered, got {type(gadget).__name__}")
        if gadget.name in self._gadgets:
            raise DuplicateNameError(gadget.name, line=line, text=text)
        self._gadgets[gadget.name] = gadget

    def lookup(self, name: str, line: Optional[int] = None,
               text: Optional[str] = None) -> Gadget:
        try:
            return self._gadgets[name]
        except KeyError:
            raise UnresolvedReferenceError(name, line=line, text=text) from None


class TriggerGraph:
    """gadget → set of gadgets it fires. Resolves `fire` lines by name."""

    def __init__(self, registry: GadgetRegistry):
        self._registry = registry
        self._edges: Dict[Gadget, Set[Gadget]] = {}

    def add_gadget(self, gadget: Gadget):
        self._edges.setdefault(gadget, set())

    def connect(self, trigger: str, action: str, line: Optional[int] = None,
                text: Optional[str] = None):
        src = self._registry.lookup(trigger, line, text)
        dst = self._registry.lookup(action, line, text)
        # Repeated fire lines collapse into one edge
        self._edges[src].add(dst)

    def edges(self) -> Dict[Gadget, frozenset]:
        return {g: frozenset(acts) for g, acts in self._edges.items()}
