"""
Scalar Automatic Differentiation (Autograd)

Reverse-mode automatic differentiation over single floating-point values.
Every operation on a Value records its operands as parents and binds a backward
closure holding the operation's local derivative. Calling backward() on a result
walks the graph in reverse topological order and accumulates gradients into
every node it can reach.

Key Features:
- Computation graph construction during the forward pass
- Gradient accumulation through shared subexpressions
- Operator overloading for natural syntax
- no_grad() for evaluation passes that should not build a graph
"""

import math
from collections.abc import Callable, Iterable
from numbers import Real

# Global flag to disable graph construction
_grad_enabled = True


def is_grad_enabled() -> bool:
    """Check if graph construction is enabled."""
    return _grad_enabled


class no_grad:
    """Context manager to disable graph construction."""

    def __enter__(self):
        global _grad_enabled
        self._prev = _grad_enabled
        _grad_enabled = False
        return self

    def __exit__(self, *args):
        global _grad_enabled
        _grad_enabled = self._prev


class enable_grad:
    """Context manager to enable graph construction."""

    def __enter__(self):
        global _grad_enabled
        self._prev = _grad_enabled
        _grad_enabled = True
        return self

    def __exit__(self, *args):
        global _grad_enabled
        _grad_enabled = self._prev


def _noop():
    pass


class Value:
    """
    A scalar node in a dynamic computation graph.

    Holds the forward value, the accumulated gradient, references to the
    operands that produced it and the backward rule bound at construction.
    Leaves (inputs, constants, parameters) have no parents and a no-op rule.

    Example:
        >>> x = Value(2.0)
        >>> y = x * x + 3 * x
        >>> y.backward()
        >>> x.grad
        7.0
    """

    def __init__(self, data: float, _children: Iterable["Value"] = (), _op: str = ""):
        """
        Args:
            data: The scalar value (anything convertible with float())
            _children: Operands this node was computed from
            _op: Label of the operation that produced this node
        """
        if isinstance(data, Value):
            data = data.data
        self.data = float(data)
        self.grad = 0.0
        self._backward: Callable[[], None] = _noop
        # Ordered de-duplication keeps traversal reproducible across runs
        self._prev = tuple(dict.fromkeys(_children))
        self._op = _op

    @property
    def parents(self) -> frozenset:
        """Operands this node was computed from."""
        return frozenset(self._prev)

    @property
    def op(self) -> str:
        """Label of the operation that produced this node ('' for leaves)."""
        return self._op

    @property
    def is_leaf(self) -> bool:
        """A node is a leaf if it was not produced by an operation."""
        return not self._prev

    def item(self) -> float:
        """Get the scalar value."""
        return self.data

    def zero_grad(self):
        """Reset the gradient accumulator."""
        self.grad = 0.0

    def backward(self):
        """
        Compute gradients via reverse-mode automatic differentiation.

        Seeds this node's gradient with 1 and runs every reachable node's
        backward rule in reverse topological order, so each rule fires only
        after all of its consumers have contributed.

        Gradients accumulate. Leaves reused across passes (parameters) must be
        zeroed by the caller before each independent backward pass, otherwise
        the new contributions are added to the stale ones. Nodes that cannot
        be reached from this one are left untouched.
        """
        topo = topological_order(self)

        self.grad = 1.0
        for node in reversed(topo):
            node._backward()

    def __repr__(self):
        op_str = f", op={self._op!r}" if self._op else ""
        return f"Value(data={self.data}, grad={self.grad}{op_str})"

    def __float__(self):
        return self.data

    # ========================================================================
    # Operator Overloading
    # ========================================================================

    def __add__(self, other):
        return add(self, other)

    def __radd__(self, other):
        return add(other, self)

    def __sub__(self, other):
        return sub(self, other)

    def __rsub__(self, other):
        return sub(other, self)

    def __mul__(self, other):
        return mul(self, other)

    def __rmul__(self, other):
        return mul(other, self)

    def __truediv__(self, other):
        return div(self, other)

    def __rtruediv__(self, other):
        return div(other, self)

    def __pow__(self, exponent):
        return pow(self, exponent)

    def __neg__(self):
        return neg(self)

    # Activation methods
    def relu(self):
        return relu(self)

    def sigmoid(self):
        return sigmoid(self)

    def tanh(self):
        return tanh(self)

    def exp(self):
        return exp(self)

    def log(self):
        return log(self)

    def clamp(self, min_val=None, max_val=None):
        return clamp(self, min_val, max_val)


# ============================================================================
# Graph Traversal
# ============================================================================


def topological_order(root: Value) -> list[Value]:
    """
    Order every node reachable from root so that parents come first.

    Depth-first traversal keyed by node identity: each distinct node is
    visited once and appended only after all of its parents have been
    appended, so for every node n and parent p, index(n) > index(p).
    Iterating the result from the end gives a valid backward schedule.

    Uses an explicit stack so long chains do not hit the recursion limit.
    """
    topo = []
    visited = set()
    stack = [(root, False)]

    while stack:
        node, expanded = stack.pop()
        if expanded:
            topo.append(node)
            continue
        if node in visited:
            continue
        visited.add(node)
        stack.append((node, True))
        for parent in reversed(node._prev):
            if parent not in visited:
                stack.append((parent, False))

    return topo


def _ensure_value(x) -> Value:
    """Lift a raw number to a constant leaf. Existing Values are returned as-is."""
    if isinstance(x, Value):
        return x  # Preserve identity in the computation graph
    return Value(x)


def _make_node(
    data: float, inputs: tuple[Value, ...], op: str, backward_fn: Callable[[], None]
) -> Value:
    """
    Create the result node of an operation.

    When graph construction is disabled the result is a plain leaf with no
    parents and no backward rule.
    """
    if not _grad_enabled:
        return Value(data)
    out = Value(data, inputs, op)
    out._backward = backward_fn
    return out


# ============================================================================
# Arithmetic Operations
# ============================================================================


def add(a, b) -> Value:
    """Addition: a + b"""
    a = _ensure_value(a)
    b = _ensure_value(b)

    def backward():
        a.grad += out.grad
        b.grad += out.grad

    out = _make_node(a.data + b.data, (a, b), "+", backward)
    return out


def mul(a, b) -> Value:
    """Multiplication: a * b"""
    a = _ensure_value(a)
    b = _ensure_value(b)

    # Save for backward
    a_data, b_data = a.data, b.data

    def backward():
        a.grad += b_data * out.grad
        b.grad += a_data * out.grad

    out = _make_node(a_data * b_data, (a, b), "*", backward)
    return out


def pow(a, exponent) -> Value:
    """Power: a ** exponent (exponent is a constant int or float)"""
    if isinstance(exponent, Value) or not isinstance(exponent, Real):
        raise TypeError(
            f"pow only supports constant int/float exponents, got {type(exponent).__name__}"
        )
    a = _ensure_value(a)

    a_data = a.data
    k = float(exponent)

    def backward():
        # d/da (a^k) = k * a^(k-1), and a^0 is constant
        if k == 0:
            return
        a.grad += k * a_data ** (k - 1) * out.grad

    out = _make_node(a_data**k, (a,), f"**{exponent}", backward)
    return out


def neg(a) -> Value:
    """Negation: -a, defined as a * -1"""
    return mul(a, -1.0)


def sub(a, b) -> Value:
    """Subtraction: a - b, defined as a + (b * -1)"""
    return add(a, mul(b, -1.0))


def div(a, b) -> Value:
    """Division: a / b, defined as a * b**-1"""
    return mul(a, pow(b, -1))


# ============================================================================
# Activation Functions
# ============================================================================


def relu(a) -> Value:
    """ReLU activation: max(0, a)"""
    a = _ensure_value(a)

    a_data = a.data
    local_grad = 1.0 if a_data > 0 else 0.0

    def backward():
        a.grad += local_grad * out.grad

    out = _make_node(a_data if a_data > 0 else 0.0, (a,), "ReLU", backward)
    return out


def sigmoid(a) -> Value:
    """Sigmoid activation: 1 / (1 + exp(-a))"""
    a = _ensure_value(a)

    x = a.data
    # Evaluate on the side that cannot overflow
    if x >= 0:
        result = 1.0 / (1.0 + math.exp(-x))
    else:
        z = math.exp(x)
        result = z / (1.0 + z)

    def backward():
        a.grad += result * (1.0 - result) * out.grad

    out = _make_node(result, (a,), "sigmoid", backward)
    return out


def tanh(a) -> Value:
    """Tanh activation: (exp(2a) - 1) / (exp(2a) + 1)"""
    a = _ensure_value(a)

    result = math.tanh(a.data)

    def backward():
        a.grad += (1.0 - result**2) * out.grad

    out = _make_node(result, (a,), "tanh", backward)
    return out


def exp(a) -> Value:
    """Exponential: exp(a)"""
    a = _ensure_value(a)

    result = math.exp(a.data)

    def backward():
        a.grad += result * out.grad

    out = _make_node(result, (a,), "exp", backward)
    return out


def log(a) -> Value:
    """Natural logarithm: log(a), defined for a > 0"""
    a = _ensure_value(a)

    a_data = a.data
    if a_data <= 0:
        raise ValueError(f"log is undefined for non-positive values, got {a_data}")

    def backward():
        a.grad += out.grad / a_data

    out = _make_node(math.log(a_data), (a,), "log", backward)
    return out


def clamp(a, min_val=None, max_val=None) -> Value:
    """Clamp a into [min_val, max_val]; gradient passes only inside the interval"""
    a = _ensure_value(a)

    a_data = a.data
    result = a_data
    if min_val is not None:
        result = max(result, min_val)
    if max_val is not None:
        result = min(result, max_val)

    mask = 1.0
    if min_val is not None and a_data < min_val:
        mask = 0.0
    if max_val is not None and a_data > max_val:
        mask = 0.0

    def backward():
        a.grad += mask * out.grad

    out = _make_node(result, (a,), "clamp", backward)
    return out


ACTIVATIONS: dict[str, Callable[[Value], Value]] = {
    "relu": relu,
    "sigmoid": sigmoid,
    "tanh": tanh,
}


def get_activation(name: str) -> Callable[[Value], Value]:
    """Look up an activation function by name."""
    try:
        return ACTIVATIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown activation {name!r}, expected one of {sorted(ACTIVATIONS)}"
        ) from None
