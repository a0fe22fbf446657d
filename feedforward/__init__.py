"""
feedforward package
~~~~~~~~~~~~~~~~~~~

Feedforward sigmoid network with online backpropagation training.
Contains the network implementation, the plain-text weight format,
dataset loading and the session object a front end drives.
"""

from feedforward.dataset import Dataset, load_dataset
from feedforward.errors import (
    DatasetFormatError,
    NetworkError,
    PersistenceFormatError,
    ShapeMismatchError,
    UninitializedStateError
)
from feedforward.network import Layer, Network, Unit
from feedforward.session import Session

__version__ = "1.0.0"
