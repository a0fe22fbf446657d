"""
model_persistence.py
~~~~~~~~~~~~~~~~~~~~

Plain-text persistence for network weights.

Each layer is written as one line per unit followed by a separator line::

    w1 w2 ... wK B bias
    w1 w2 ... wK B bias
    ---

Numbers are written with ``repr(float)``, which is the shortest decimal that
parses back to the identical float, so a save/load round trip is exact.

Loading writes into an existing network of the same shape. The whole file is
parsed and checked against the network before any unit is touched, so a bad
file never leaves the network half-updated.
"""

import logging
from typing import List, Tuple

from feedforward.config import BIAS_MARKER, LAYER_SEPARATOR
from feedforward.errors import PersistenceFormatError

# Configure module logger
logger = logging.getLogger(__name__)

# (weights, bias) for one unit
UnitRecord = Tuple[List[float], float]


def _format_number(value: float) -> str:
    return repr(float(value))


def _parse_number(token: str, line_number: int, line: str) -> float:
    try:
        return float(token)
    except ValueError:
        raise PersistenceFormatError(
            f"'{token}' is not a valid number", line_number, line
        ) from None


def dumps_weights(network) -> str:
    """
    Encode a network's weights and biases as text.

    Args:
        network: Network whose layers are serialized

    Returns:
        str: The weight file contents, newline-terminated
    """
    lines = []
    for layer in network.layers:
        for unit in layer.units:
            weights = ' '.join(_format_number(w) for w in unit.weights)
            lines.append(
                f"{weights} {BIAS_MARKER} {_format_number(unit.bias)}"
            )
        lines.append(LAYER_SEPARATOR)
    return '\n'.join(lines) + '\n'


def _parse_unit_line(line: str, line_number: int) -> UnitRecord:
    tokens = line.split()
    markers = tokens.count(BIAS_MARKER)
    if markers == 0:
        raise PersistenceFormatError(
            f"missing '{BIAS_MARKER}' marker between weights and bias",
            line_number, line
        )
    if markers > 1:
        raise PersistenceFormatError(
            f"more than one '{BIAS_MARKER}' marker", line_number, line
        )

    split = tokens.index(BIAS_MARKER)
    bias_tokens = tokens[split + 1:]
    if len(bias_tokens) != 1:
        raise PersistenceFormatError(
            f"expected exactly one bias value after '{BIAS_MARKER}', "
            f"got {len(bias_tokens)}",
            line_number, line
        )

    weights = [
        _parse_number(token, line_number, line) for token in tokens[:split]
    ]
    bias = _parse_number(bias_tokens[0], line_number, line)
    return weights, bias


def parse_weights(text: str) -> List[List[UnitRecord]]:
    """
    Parse weight file text into per-layer unit records.

    Blank lines are ignored. Every block of unit lines must be closed by a
    separator line.

    Args:
        text: Weight file contents

    Returns:
        list: One list of ``(weights, bias)`` tuples per layer

    Raises:
        PersistenceFormatError: If a line is malformed or the last block is
            not terminated
    """
    layers: List[List[UnitRecord]] = []
    current: List[UnitRecord] = []
    last_data_line = None

    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped == LAYER_SEPARATOR:
            layers.append(current)
            current = []
            continue
        current.append(_parse_unit_line(line, line_number))
        last_data_line = line_number

    if current:
        raise PersistenceFormatError(
            f"layer block is not terminated by '{LAYER_SEPARATOR}'",
            last_data_line
        )
    return layers


def _check_shape(network, layers: List[List[UnitRecord]]) -> None:
    if len(layers) != len(network.layers):
        raise PersistenceFormatError(
            f"weight file has {len(layers)} layer(s), network {network.sizes} "
            f"has {len(network.layers)}"
        )
    for layer_index, (records, layer) in enumerate(zip(layers, network.layers)):
        if len(records) != len(layer.units):
            raise PersistenceFormatError(
                f"layer {layer_index} has {len(records)} unit(s) in the "
                f"weight file, network {network.sizes} expects "
                f"{len(layer.units)}"
            )
        for unit_index, (weights, _) in enumerate(records):
            expected = len(layer.units[unit_index].weights)
            if len(weights) != expected:
                raise PersistenceFormatError(
                    f"layer {layer_index} unit {unit_index} has "
                    f"{len(weights)} weight(s) in the weight file, "
                    f"network {network.sizes} expects {expected}"
                )


def loads_weights(network, text: str) -> None:
    """
    Overwrite a network's weights and biases from weight file text.

    Args:
        network: Network to update; must match the file's shape
        text: Weight file contents

    Raises:
        PersistenceFormatError: If the text is malformed or its shape does not
            match the network. The network is left unchanged.
    """
    layers = parse_weights(text)
    _check_shape(network, layers)

    for records, layer in zip(layers, network.layers):
        for (weights, bias), unit in zip(records, layer.units):
            unit.weights[:] = weights
            unit.bias = bias


def save_weights(network, path: str) -> None:
    """
    Write a network's weights to a file.

    Args:
        network: Network to save
        path: Destination file, overwritten if it exists

    Example:
        >>> net = Network([2, 3, 1])
        >>> save_weights(net, "weights.txt")
    """
    text = dumps_weights(network)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    logger.info(f"Saved weights for network {network.sizes} to '{path}'")


def load_weights(network, path: str) -> None:
    """
    Read weights from a file into an existing network.

    Args:
        network: Network to update; must match the file's shape
        path: Weight file written by ``save_weights``

    Raises:
        PersistenceFormatError: If the file is malformed or does not match
            the network's shape
        OSError: If the file cannot be read
    """
    with open(path, 'r', encoding='utf-8') as f:
        text = f.read()

    try:
        loads_weights(network, text)
    except PersistenceFormatError as e:
        logger.error(f"Could not load weights from '{path}': {e}")
        raise

    logger.info(f"Loaded weights for network {network.sizes} from '{path}'")
