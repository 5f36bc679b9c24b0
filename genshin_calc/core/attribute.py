"""
Genshin Calc - Attribute Graph
==============================
Holds every attribute of one build and the derived relationships between them.

Each attribute has a store-level (composed) value:

    composed = (base + flat) * (1 + percentage)

and a resolved value:

    value = composed + sum(edge contributions targeting the attribute)

Edges are plain data. The forward function and its exact derivative are
selected from tables keyed by EdgeRule, so every edge can be enumerated and
checked numerically without closures.

Lifecycle: register base values and edges first (mutation phase). The first
read resolves every value in topological order and freezes the graph; any
mutation after that raises RuntimeError.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import AttributeName
from .exceptions import AttributeCycleError

logger = logging.getLogger(__name__)


# =============================================================================
# EDGE RULES
# =============================================================================

class EdgeRule(Enum):
    """
    Functional form of an edge contribution.

    s0, s1 are resolved source values, t is the target's composed value,
    c is the edge coefficient.
    """
    # c * s0
    LINEAR = "linear"

    # clamp(c * (s0 - offset), 0, cap)
    # e.g. "ATK +28% of recharge above 100%, up to 80%"
    CLAMPED_LINEAR = "clamped_linear"

    # c * s0 * s1
    PRODUCT = "product"

    # c * s0 * t
    SELF_SCALED = "self_scaled"


RULE_ARITY: Dict[EdgeRule, int] = {
    EdgeRule.LINEAR: 1,
    EdgeRule.CLAMPED_LINEAR: 1,
    EdgeRule.PRODUCT: 2,
    EdgeRule.SELF_SCALED: 1,
}


@dataclass(frozen=True)
class Edge:
    """A derived contribution from one or two source attributes to a target."""
    sources: Tuple[AttributeName, ...]
    target: AttributeName
    rule: EdgeRule
    coefficient: float
    label: str
    offset: float = 0.0
    cap: Optional[float] = None

    def __post_init__(self):
        expected = RULE_ARITY[self.rule]
        if len(self.sources) != expected:
            raise ValueError(
                f"Edge '{self.label}': {self.rule.value} takes {expected} source(s), "
                f"got {len(self.sources)}"
            )

    def forward(self, source_values: Sequence[float], target_value: float) -> float:
        """Contribution of this edge to its target."""
        return _FORWARD[self.rule](self, source_values, target_value)

    def backward(
        self,
        grad: float,
        source_values: Sequence[float],
        target_value: float,
    ) -> Tuple[Tuple[float, ...], float]:
        """
        Chain an upstream gradient through this edge.

        Returns:
            (gradient per source, gradient on the target's composed value)
        """
        return _BACKWARD[self.rule](self, grad, source_values, target_value)

    def __repr__(self):
        names = ", ".join(s.value for s in self.sources)
        return f"Edge({names} -> {self.target.value}, {self.rule.value}, '{self.label}')"


def _linear_forward(edge: Edge, s: Sequence[float], t: float) -> float:
    return edge.coefficient * s[0]


def _linear_backward(edge: Edge, grad: float, s: Sequence[float], t: float):
    return (grad * edge.coefficient,), 0.0


def _clamped_raw(edge: Edge, s: Sequence[float]) -> float:
    return edge.coefficient * (s[0] - edge.offset)


def _clamped_forward(edge: Edge, s: Sequence[float], t: float) -> float:
    value = max(_clamped_raw(edge, s), 0.0)
    if edge.cap is not None:
        value = min(value, edge.cap)
    return value


def _clamped_backward(edge: Edge, grad: float, s: Sequence[float], t: float):
    raw = _clamped_raw(edge, s)
    active = raw > 0 and (edge.cap is None or raw < edge.cap)
    return (grad * edge.coefficient if active else 0.0,), 0.0


def _product_forward(edge: Edge, s: Sequence[float], t: float) -> float:
    return edge.coefficient * s[0] * s[1]


def _product_backward(edge: Edge, grad: float, s: Sequence[float], t: float):
    c = edge.coefficient
    return (grad * c * s[1], grad * c * s[0]), 0.0


def _self_scaled_forward(edge: Edge, s: Sequence[float], t: float) -> float:
    return edge.coefficient * s[0] * t


def _self_scaled_backward(edge: Edge, grad: float, s: Sequence[float], t: float):
    c = edge.coefficient
    return (grad * c * t,), grad * c * s[0]


_FORWARD: Dict[EdgeRule, Callable] = {
    EdgeRule.LINEAR: _linear_forward,
    EdgeRule.CLAMPED_LINEAR: _clamped_forward,
    EdgeRule.PRODUCT: _product_forward,
    EdgeRule.SELF_SCALED: _self_scaled_forward,
}

_BACKWARD: Dict[EdgeRule, Callable] = {
    EdgeRule.LINEAR: _linear_backward,
    EdgeRule.CLAMPED_LINEAR: _clamped_backward,
    EdgeRule.PRODUCT: _product_backward,
    EdgeRule.SELF_SCALED: _self_scaled_backward,
}


# =============================================================================
# ATTRIBUTE STORE
# =============================================================================

@dataclass
class StoreEntry:
    """Store-level inputs of one attribute."""
    base: float = 0.0
    flat: float = 0.0
    percentage: float = 0.0

    def composed(self) -> float:
        return (self.base + self.flat) * (1 + self.percentage)


# =============================================================================
# ATTRIBUTE GRAPH
# =============================================================================

class AttributeGraph:
    """
    Attribute store plus edges, with forward resolution and reverse-mode
    gradient propagation.

    One graph belongs to one build evaluation and is never shared.
    """

    def __init__(self):
        self._entries: Dict[AttributeName, StoreEntry] = {}
        self._edges: List[Edge] = []
        self._edges_into: Dict[AttributeName, List[Edge]] = {}
        self._edges_from: Dict[AttributeName, List[Edge]] = {}

        # Filled on first query
        self._order: Optional[List[AttributeName]] = None
        self._values: Dict[AttributeName, float] = {}

    # -------------------------------------------------------------------------
    # Mutation phase
    # -------------------------------------------------------------------------

    @property
    def is_frozen(self) -> bool:
        return self._order is not None

    def _check_mutable(self):
        if self.is_frozen:
            raise RuntimeError("Must register attributes and edges before the first query")

    def _entry(self, name: AttributeName) -> StoreEntry:
        if name not in self._entries:
            self._entries[name] = StoreEntry()
        return self._entries[name]

    def set_base(self, name: AttributeName, value: float) -> None:
        self._check_mutable()
        self._entry(name).base = value

    def add_flat(self, name: AttributeName, delta: float) -> None:
        self._check_mutable()
        self._entry(name).flat += delta

    def add_percentage(self, name: AttributeName, delta: float) -> None:
        self._check_mutable()
        self._entry(name).percentage += delta

    def add_edge(
        self,
        sources: Sequence[AttributeName],
        target: AttributeName,
        rule: EdgeRule,
        coefficient: float,
        label: str,
        offset: float = 0.0,
        cap: Optional[float] = None,
    ) -> Edge:
        """
        Register a derived contribution to `target`.

        Several edges may target the same attribute; their contributions sum.

        Raises:
            AttributeCycleError: if the edge would close a dependency cycle
            RuntimeError: if the graph has already been queried
        """
        self._check_mutable()
        edge = Edge(
            sources=tuple(sources),
            target=target,
            rule=rule,
            coefficient=coefficient,
            label=label,
            offset=offset,
            cap=cap,
        )

        cycle = self._find_cycle_through(edge)
        if cycle is not None:
            raise AttributeCycleError(cycle)

        self._edges.append(edge)
        self._edges_into.setdefault(target, []).append(edge)
        for source in set(edge.sources):
            self._edges_from.setdefault(source, []).append(edge)

        logger.debug("Registered %r", edge)
        return edge

    def add_linear_edge(
        self,
        source: AttributeName,
        target: AttributeName,
        coefficient: float,
        label: str,
    ) -> Edge:
        """Shorthand for the common "X% of source adds to target" edge."""
        return self.add_edge((source,), target, EdgeRule.LINEAR, coefficient, label)

    def _find_cycle_through(self, edge: Edge) -> Optional[List[str]]:
        """
        Labels of a cycle the new edge would close, or None.

        A cycle exists when some source of the new edge is reachable from its
        target through edges already registered.
        """
        if edge.target in edge.sources:
            return [edge.label]

        sources = set(edge.sources)
        # Depth-first walk from the target, remembering the edge used to reach each node
        stack: List[Tuple[AttributeName, List[str]]] = [(edge.target, [])]
        seen = {edge.target}
        while stack:
            node, path = stack.pop()
            for out in self._edges_from.get(node, []):
                next_path = path + [out.label]
                if out.target in sources:
                    return next_path + [edge.label]
                if out.target not in seen:
                    seen.add(out.target)
                    stack.append((out.target, next_path))
        return None

    # -------------------------------------------------------------------------
    # Query phase
    # -------------------------------------------------------------------------

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    def edges_into(self, name: AttributeName) -> List[Edge]:
        return list(self._edges_into.get(name, []))

    def get_composed(self, name: AttributeName) -> float:
        """Store-level value: (base + flat) * (1 + percentage), no edges."""
        entry = self._entries.get(name)
        return entry.composed() if entry is not None else 0.0

    def get_entry(self, name: AttributeName) -> StoreEntry:
        """Copy of the store inputs for `name`."""
        entry = self._entries.get(name, StoreEntry())
        return StoreEntry(entry.base, entry.flat, entry.percentage)

    def get_value(self, name: AttributeName) -> float:
        """Fully resolved value of `name`, including all edge contributions."""
        self._resolve()
        return self._values[name]

    def snapshot(self) -> Dict[AttributeName, float]:
        """All resolved values."""
        self._resolve()
        return dict(self._values)

    def _topological_order(self) -> List[AttributeName]:
        """Kahn's algorithm over all attribute names."""
        indegree = {name: 0 for name in AttributeName}
        for edge in self._edges:
            indegree[edge.target] += len(edge.sources)

        ready = [name for name in AttributeName if indegree[name] == 0]
        order: List[AttributeName] = []
        while ready:
            node = ready.pop()
            order.append(node)
            for edge in self._edges_from.get(node, []):
                indegree[edge.target] -= edge.sources.count(node)
                if indegree[edge.target] == 0:
                    ready.append(edge.target)

        if len(order) != len(indegree):
            stuck = [e.label for e in self._edges if indegree[e.target] > 0]
            raise AttributeCycleError(stuck)
        return order

    def _resolve(self) -> None:
        if self._order is not None:
            return

        order = self._topological_order()
        values: Dict[AttributeName, float] = {}
        for name in order:
            composed = self.get_composed(name)
            # fsum keeps the result independent of edge registration order
            terms = [composed] + [
                edge.forward([values[s] for s in edge.sources], composed)
                for edge in self._edges_into.get(name, [])
            ]
            values[name] = math.fsum(terms)

        self._values = values
        self._order = order

    def propagate_gradient(
        self,
        target: AttributeName,
        seed: float = 1.0,
    ) -> Dict[AttributeName, float]:
        """
        Reverse-mode sensitivity of one resolved attribute.

        Walks edges backward from `target`, multiplying the upstream gradient
        by each edge's local derivative. Attributes fed through several paths
        accumulate their contributions additively.

        Args:
            target: Attribute whose sensitivity is wanted
            seed: Upstream gradient on the target's resolved value

        Returns:
            {attribute: d(seed * value(target)) / d(composed value of attribute)}
            for every attribute that reaches `target`, `target` included
        """
        return self.backward({target: seed})

    def backward(self, seeds: Dict[AttributeName, float]) -> Dict[AttributeName, float]:
        """
        Reverse-mode sensitivity of a weighted sum of resolved attributes.

        Args:
            seeds: {attribute: upstream gradient on its resolved value}

        Returns:
            {attribute: gradient on its composed value}
        """
        self._resolve()

        # Contributions per attribute, summed with fsum once all have arrived
        adjoint: Dict[AttributeName, List[float]] = {}
        for name, seed in seeds.items():
            adjoint.setdefault(name, []).append(seed)

        result: Dict[AttributeName, float] = {}
        for name in reversed(self._order):
            if name not in adjoint:
                continue
            grad = math.fsum(adjoint[name])
            composed = self.get_composed(name)
            composed_terms = [grad]
            for edge in self._edges_into.get(name, []):
                source_values = [self._values[s] for s in edge.sources]
                source_grads, self_grad = edge.backward(grad, source_values, composed)
                composed_terms.append(self_grad)
                for source, source_grad in zip(edge.sources, source_grads):
                    adjoint.setdefault(source, []).append(source_grad)
            result[name] = math.fsum(composed_terms)

        return result

    def component_gradient(
        self,
        gradient: Dict[AttributeName, float],
        name: AttributeName,
    ) -> Dict[str, float]:
        """
        Split a composed-value gradient into its store components.

        Formula:
            d/d base = d/d flat = g * (1 + percentage)
            d/d percentage      = g * (base + flat)
        """
        g = gradient.get(name, 0.0)
        entry = self._entries.get(name, StoreEntry())
        return {
            'base': g * (1 + entry.percentage),
            'flat': g * (1 + entry.percentage),
            'percentage': g * (entry.base + entry.flat),
        }

    def describe(self, name: AttributeName) -> str:
        """Return formatted breakdown of one attribute with edge provenance."""
        self._resolve()
        entry = self._entries.get(name, StoreEntry())
        lines = [
            f"{name.value}",
            f"  Base:          {entry.base:,.4f}",
            f"  + Flat:        {entry.flat:,.4f}",
            f"  x Percentage:  {1 + entry.percentage:.4f}",
        ]
        composed = entry.composed()
        for edge in self._edges_into.get(name, []):
            source_values = [self._values[s] for s in edge.sources]
            lines.append(f"  + {edge.label}: {edge.forward(source_values, composed):,.4f}")
        lines.append(f"  = Total:       {self._values[name]:,.4f}")
        return "\n".join(lines)


def merge_gradients(gradients: Iterable[Dict[AttributeName, float]]) -> Dict[AttributeName, float]:
    """Sum several attribute gradients key by key."""
    total: Dict[AttributeName, float] = {}
    for gradient in gradients:
        for name, value in gradient.items():
            total[name] = total.get(name, 0.0) + value
    return total


__all__ = [
    'EdgeRule',
    'RULE_ARITY',
    'Edge',
    'StoreEntry',
    'AttributeGraph',
    'merge_gradients',
]
