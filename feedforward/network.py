"""
network.py
~~~~~~~~~~

A fully-connected feedforward network of sigmoid units trained by online
(single-sample) backpropagation.

The network is built from a list of layer sizes, e.g. ``[2, 4, 1]``: two
inputs, one hidden layer of four units and a single output unit. The first
entry is the input width and does not become a layer.

Every unit caches its last activation in ``output`` and its last
backpropagated error in ``delta``. ``train`` relies on those cached values:
deltas are computed from the outputs of the forward pass, and the weight
update reads each preceding layer's cached outputs rather than re-running the
forward pass.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from feedforward import model_persistence
from feedforward.config import DEFAULT_LEARNING_RATE, WEIGHT_RANGE
from feedforward.errors import ShapeMismatchError

logger = logging.getLogger(__name__)


def sigmoid(z: float) -> float:
    """The logistic function, with ``z`` clipped so ``exp`` cannot overflow."""
    return float(1.0 / (1.0 + np.exp(-np.clip(z, -500, 500))))


class Unit:
    """
    A single sigmoid perceptron.

    Attributes:
        weights: One weight per input, fixed length
        bias: Bias term
        output: Activation from the most recent ``activate`` call
        delta: Error signal from the most recent backward pass
    """

    def __init__(self, input_size: int, rng: np.random.Generator):
        low, high = WEIGHT_RANGE
        self.weights = rng.uniform(low, high, size=input_size)
        self.bias = float(rng.uniform(low, high))
        self.output = 0.0
        self.delta = 0.0

    def activate(self, inputs: np.ndarray) -> float:
        """Compute ``sigmoid(bias + inputs . weights)`` and cache it."""
        total = self.bias + float(np.dot(inputs, self.weights))
        self.output = sigmoid(total)
        return self.output

    def sigmoid_derivative(self) -> float:
        # Expressed in terms of the activation, so only valid after activate()
        return self.output * (1.0 - self.output)

    def __repr__(self) -> str:
        return f"Unit(inputs={len(self.weights)}, bias={self.bias!r})"


class Layer:
    """An ordered group of units that all read the same input vector."""

    def __init__(self, size: int, input_size: int, rng: np.random.Generator):
        self.units = [Unit(input_size, rng) for _ in range(size)]

    def __len__(self) -> int:
        return len(self.units)

    @property
    def input_size(self) -> int:
        return len(self.units[0].weights)

    @property
    def outputs(self) -> np.ndarray:
        """Cached outputs of every unit, in unit order."""
        return np.array([unit.output for unit in self.units])

    @property
    def deltas(self) -> np.ndarray:
        """Cached deltas of every unit, in unit order."""
        return np.array([unit.delta for unit in self.units])

    def feed_forward(self, inputs: np.ndarray) -> np.ndarray:
        return np.array([unit.activate(inputs) for unit in self.units])


class Network:
    """
    A stack of dense sigmoid layers.

    Args:
        sizes: Layer sizes, input width first; at least two positive ints
        rng: Source of randomness for the initial weights. A fresh
            ``numpy.random.default_rng()`` is used when omitted.
        learning_rate: Scale applied to every gradient step

    Raises:
        ValueError: If ``sizes`` or ``learning_rate`` is invalid

    Example:
        >>> net = Network([2, 4, 1], rng=np.random.default_rng(7))
        >>> net.train([0.0, 1.0], [1.0])
        >>> net.predict([0.0, 1.0]).shape
        (1,)
    """

    def __init__(
        self,
        sizes: Sequence[int],
        rng: Optional[np.random.Generator] = None,
        learning_rate: float = DEFAULT_LEARNING_RATE
    ):
        sizes = list(sizes)
        if len(sizes) < 2:
            raise ValueError(
                f"Network needs at least an input and an output size, "
                f"got {sizes}"
            )
        for size in sizes:
            if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
                raise ValueError(f"Layer sizes must be integers, got {sizes}")
            if size < 1:
                raise ValueError(f"Layer sizes must be positive, got {sizes}")
        if learning_rate <= 0:
            raise ValueError(
                f"Learning rate must be positive, got {learning_rate}"
            )

        if rng is None:
            rng = np.random.default_rng()

        self.sizes: List[int] = [int(size) for size in sizes]
        self.learning_rate = float(learning_rate)
        self.layers: List[Layer] = [
            Layer(size, input_size, rng)
            for input_size, size in zip(self.sizes[:-1], self.sizes[1:])
        ]

        logger.debug(
            f"Initialized network {self.sizes} "
            f"with learning rate {self.learning_rate}"
        )

    def __repr__(self) -> str:
        return f"Network({self.sizes}, learning_rate={self.learning_rate})"

    @property
    def input_size(self) -> int:
        return self.sizes[0]

    @property
    def output_size(self) -> int:
        return self.sizes[-1]

    def _as_vector(self, values, what: str, expected: int) -> np.ndarray:
        vector = np.asarray(values, dtype=float)
        if vector.ndim != 1 or vector.shape[0] != expected:
            actual = vector.shape[0] if vector.ndim == 1 else vector.size
            raise ShapeMismatchError(what, expected, actual)
        return vector

    def feed_forward(self, inputs) -> np.ndarray:
        """
        Propagate an input vector through every layer.

        Args:
            inputs: Vector of length ``input_size``

        Returns:
            np.ndarray: Output vector of length ``output_size``, values in (0, 1)

        Raises:
            ShapeMismatchError: If ``inputs`` has the wrong length
        """
        activations = self._as_vector(inputs, 'inputs', self.input_size)
        for layer in self.layers:
            activations = layer.feed_forward(activations)
        return activations

    def predict(self, inputs) -> np.ndarray:
        """Same as ``feed_forward``; never changes weights."""
        return self.feed_forward(inputs)

    def train(self, inputs, targets) -> None:
        """
        Apply one online gradient-descent step for a single sample.

        Squared-error loss with sigmoid outputs. Deltas are computed from the
        output layer backwards, then weights are updated from the first layer
        forwards using the outputs cached during the forward pass.

        Args:
            inputs: Vector of length ``input_size``
            targets: Vector of length ``output_size``

        Raises:
            ShapeMismatchError: If either vector has the wrong length. The
                network is not modified in that case.
        """
        inputs = self._as_vector(inputs, 'inputs', self.input_size)
        targets = self._as_vector(targets, 'targets', self.output_size)

        outputs = self.feed_forward(inputs)

        output_layer = self.layers[-1]
        for unit, target, output in zip(output_layer.units, targets, outputs):
            unit.delta = float(target - output) * unit.sigmoid_derivative()

        for index in range(len(self.layers) - 2, -1, -1):
            next_units = self.layers[index + 1].units
            for i, unit in enumerate(self.layers[index].units):
                error = sum(
                    next_unit.weights[i] * next_unit.delta
                    for next_unit in next_units
                )
                unit.delta = float(error) * unit.sigmoid_derivative()

        prev_outputs = inputs
        for index, layer in enumerate(self.layers):
            if index > 0:
                prev_outputs = self.layers[index - 1].outputs
            for unit in layer.units:
                step = self.learning_rate * unit.delta
                unit.weights += step * prev_outputs
                unit.bias += step

    def save(self, path: str) -> None:
        """Write the weights to ``path`` in the text weight format."""
        model_persistence.save_weights(self, path)

    def load(self, path: str) -> None:
        """Overwrite the weights from a file written by ``save``."""
        model_persistence.load_weights(self, path)
