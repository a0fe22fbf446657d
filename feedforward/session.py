"""
session.py
~~~~~~~~~~

Session state for a command front end.

A ``Session`` holds the current network and dataset and exposes the
operations a front end dispatches to: create a network, load data, load and
save weights, train for a number of epochs, and predict. Every operation
checks its prerequisites and raises ``UninitializedStateError`` instead of
acting on missing state.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from feedforward.config import DEFAULT_LEARNING_RATE, DEFAULT_REPORT_INTERVAL
from feedforward.dataset import Dataset, load_dataset
from feedforward.errors import UninitializedStateError
from feedforward.network import Network

logger = logging.getLogger(__name__)

EpochCallback = Callable[[Dict[str, Any]], None]


def sum_squared_error(network: Network, dataset: Dataset) -> float:
    """Total squared error of the network's predictions over a dataset."""
    total = 0.0
    for inputs, targets in dataset:
        outputs = network.predict(inputs)
        total += float(np.sum((targets - outputs) ** 2))
    return total


class Session:
    """
    Holds the network and dataset a front end is working with.

    Args:
        rng: Randomness for new networks; a fresh generator when omitted
        learning_rate: Learning rate given to networks this session creates
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        learning_rate: float = DEFAULT_LEARNING_RATE
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.learning_rate = learning_rate
        self.network: Optional[Network] = None
        self.dataset: Optional[Dataset] = None

    @property
    def network_initialized(self) -> bool:
        return self.network is not None

    @property
    def data_loaded(self) -> bool:
        return self.dataset is not None

    def _require_network(self) -> Network:
        if self.network is None:
            logger.warning("Operation requires a network; none created yet")
            raise UninitializedStateError("Create a network first")
        return self.network

    def _require_dataset(self) -> Dataset:
        if self.dataset is None:
            logger.warning("Operation requires a dataset; none loaded yet")
            raise UninitializedStateError("Load a dataset first")
        return self.dataset

    def create_network(self, sizes: Sequence[int]) -> Network:
        """
        Create a fresh network, replacing any current one.

        A loaded dataset is kept only if its row widths still fit the new
        network's input and output sizes.
        """
        self.network = Network(sizes, rng=self.rng,
                               learning_rate=self.learning_rate)
        if self.dataset is not None and (
            self.dataset.input_size != self.network.input_size
            or self.dataset.output_size != self.network.output_size
        ):
            logger.info("Dropped loaded dataset: widths do not fit new network")
            self.dataset = None
        logger.info(f"Created network with architecture {self.network.sizes}")
        return self.network

    def load_data(self, path: str) -> Dataset:
        network = self._require_network()
        self.dataset = load_dataset(
            path, network.input_size, network.output_size
        )
        return self.dataset

    def load_weights(self, path: str) -> None:
        self._require_network().load(path)

    def save_weights(self, path: str) -> None:
        self._require_network().save(path)

    def train(
        self,
        epochs: int,
        on_epoch_complete: Optional[EpochCallback] = None,
        report_every: int = DEFAULT_REPORT_INTERVAL
    ) -> float:
        """
        Train on the loaded dataset for a number of epochs.

        Each epoch trains on every sample in order, one update per sample,
        and accumulates the squared error of the prediction made right after
        each update. Every ``report_every`` epochs, and on the final epoch,
        the epoch's error is logged and passed to ``on_epoch_complete``.

        Args:
            epochs: Number of passes over the dataset, at least 1
            on_epoch_complete: Called with ``{'epoch', 'total_epochs',
                'error'}`` on reporting epochs
            report_every: Reporting interval in epochs

        Returns:
            float: Total squared error of the final epoch

        Raises:
            UninitializedStateError: If no network or no dataset is set up
            ValueError: If ``epochs`` or ``report_every`` is not a positive int
        """
        network = self._require_network()
        dataset = self._require_dataset()

        if isinstance(epochs, bool) or not isinstance(epochs, int) or epochs < 1:
            raise ValueError(f"Epochs must be a positive integer, got {epochs!r}")
        if report_every < 1:
            raise ValueError(
                f"Report interval must be positive, got {report_every}"
            )

        logger.info(
            f"Training {network.sizes} on {len(dataset)} sample(s) "
            f"for {epochs} epoch(s)"
        )

        total_error = 0.0
        for epoch in range(1, epochs + 1):
            total_error = 0.0
            for inputs, targets in dataset:
                network.train(inputs, targets)
                outputs = network.predict(inputs)
                total_error += float(np.sum((targets - outputs) ** 2))

            if epoch % report_every == 0 or epoch == epochs:
                logger.info(f"Epoch {epoch}, error: {round(total_error, 6)}")
                if on_epoch_complete is not None:
                    on_epoch_complete({
                        'epoch': epoch,
                        'total_epochs': epochs,
                        'error': total_error
                    })

        return total_error

    def predict_dataset(self) -> List[Tuple[np.ndarray, np.ndarray]]:
        """Predict every sample of the loaded dataset, as (inputs, outputs)."""
        network = self._require_network()
        dataset = self._require_dataset()
        return [(inputs, network.predict(inputs)) for inputs, _ in dataset]

    def predict(self, values: Sequence[float]) -> np.ndarray:
        return self._require_network().predict(values)

    def status(self) -> Dict[str, Any]:
        network, dataset = self.network, self.dataset
        return {
            'network_initialized': network is not None,
            'data_loaded': dataset is not None,
            'architecture': network.sizes if network is not None else None,
            'samples': len(dataset) if dataset is not None else 0
        }
