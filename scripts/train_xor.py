#!/usr/bin/env python3
"""
Train a small network on XOR and save its weights.

Usage:
    python scripts/train_xor.py

The script will:
1. Write the XOR dataset to data/xor.txt
2. Create a [2, 4, 1] network and train it for 5000 epochs
3. Print its predictions for the four XOR inputs
4. Save the weights to data/xor_weights.txt and check they reload exactly
"""

import os
import sys

import numpy as np

from feedforward import Network, Session
from feedforward.config import configure_logging

XOR_ROWS = [
    "0 0 0",
    "0 1 1",
    "1 0 1",
    "1 1 0",
]

EPOCHS = 5000
SEED = 42


def write_dataset(filepath: str) -> None:
    """Write the XOR samples in the dataset text format."""
    print(f"📂 Writing XOR dataset to: {filepath}")
    with open(filepath, 'w', encoding='utf-8') as f:
        f.write('\n'.join(XOR_ROWS) + '\n')


def verify_weights(session: Session, weights_path: str) -> bool:
    """
    Reload saved weights into a fresh network and compare them.

    Returns:
        bool: True if every weight and bias matches exactly
    """
    print(f"\n🔍 Verifying saved weights...")

    reloaded = Network(session.network.sizes)
    reloaded.load(weights_path)

    for original, restored in zip(session.network.layers, reloaded.layers):
        for unit, other in zip(original.units, restored.units):
            assert np.array_equal(unit.weights, other.weights), \
                "Weights don't match!"
            assert unit.bias == other.bias, "Biases don't match!"

    print("✅ Verification passed! Weights are identical.")
    return True


def main():
    """Train on XOR and save the result."""
    configure_logging()

    print("=" * 60)
    print("XOR training example")
    print("=" * 60)

    script_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(script_dir)
    data_dir = os.path.join(project_root, 'data')
    os.makedirs(data_dir, exist_ok=True)

    dataset_path = os.path.join(data_dir, 'xor.txt')
    weights_path = os.path.join(data_dir, 'xor_weights.txt')

    try:
        write_dataset(dataset_path)

        session = Session(rng=np.random.default_rng(SEED))
        session.create_network([2, 4, 1])
        session.load_data(dataset_path)

        print(f"\n🏋️  Training for {EPOCHS} epochs...")
        error = session.train(EPOCHS)
        print(f"✅ Final error: {round(error, 6)}")

        print(f"\n📝 Predictions:")
        for inputs, outputs in session.predict_dataset():
            values = ' '.join(f"{v:g}" for v in inputs)
            rounded = ', '.join(f"{round(float(o), 4)}" for o in outputs)
            print(f"   {values} → [{rounded}]")

        print(f"\n💾 Saving weights to: {weights_path}")
        session.save_weights(weights_path)

        verify_weights(session, weights_path)

    except Exception as e:
        print(f"\n❌ Error during training: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
