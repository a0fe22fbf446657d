"""
dataset.py
~~~~~~~~~~

Loading of training samples from whitespace-separated text files.

Each non-blank line holds one sample: ``input_size`` input values followed by
``output_size`` target values, e.g. for XOR with a ``[2, 4, 1]`` network::

    0 0 0
    0 1 1
    1 0 1
    1 1 0
"""

import logging
from typing import Iterator, Tuple

import numpy as np

from feedforward.errors import DatasetFormatError

logger = logging.getLogger(__name__)


class Dataset:
    """
    An ordered collection of (input vector, target vector) samples.

    Attributes:
        inputs: Array of shape ``(samples, input_size)``
        targets: Array of shape ``(samples, output_size)``
    """

    def __init__(self, inputs: np.ndarray, targets: np.ndarray):
        if len(inputs) != len(targets):
            raise ValueError(
                f"Got {len(inputs)} input rows but {len(targets)} target rows"
            )
        self.inputs = inputs
        self.targets = targets

    def __len__(self) -> int:
        return len(self.inputs)

    def __iter__(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        return zip(self.inputs, self.targets)

    @property
    def input_size(self) -> int:
        return self.inputs.shape[1]

    @property
    def output_size(self) -> int:
        return self.targets.shape[1]


def parse_dataset(text: str, input_size: int, output_size: int) -> Dataset:
    """
    Parse dataset text into a ``Dataset``.

    Args:
        text: Dataset contents, one sample per line
        input_size: Number of input values per sample
        output_size: Number of target values per sample

    Returns:
        Dataset: The parsed samples, in file order

    Raises:
        DatasetFormatError: If a row has the wrong field count, a field is not
            a number, or there are no samples at all
    """
    width = input_size + output_size
    rows = []

    for line_number, line in enumerate(text.splitlines(), start=1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) != width:
            raise DatasetFormatError(
                f"expected {width} values ({input_size} inputs + "
                f"{output_size} targets), got {len(fields)}",
                line_number
            )
        try:
            rows.append([float(field) for field in fields])
        except ValueError as e:
            raise DatasetFormatError(str(e), line_number) from None

    if not rows:
        raise DatasetFormatError("dataset contains no samples")

    data = np.array(rows, dtype=float)
    return Dataset(data[:, :input_size], data[:, input_size:])


def load_dataset(path: str, input_size: int, output_size: int) -> Dataset:
    """
    Load a dataset file sized for a network's input and output widths.

    Example:
        >>> data = load_dataset("xor.txt", net.input_size, net.output_size)
        >>> len(data)
        4
    """
    with open(path, 'r', encoding='utf-8') as f:
        text = f.read()

    dataset = parse_dataset(text, input_size, output_size)
    logger.info(f"Loaded {len(dataset)} sample(s) from '{path}'")
    return dataset
