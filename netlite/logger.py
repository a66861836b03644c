"""
NetLite Logging

Two kinds of logging:

- setup_logging(): console logging for the library's `logging` messages
- TrainingLogger: a plain-text training log with the network's values at
  epoch boundaries (inputs, outputs, loss, weights and their last change)
"""

import logging
import os
import sys
from datetime import datetime

import numpy as np


def setup_logging(level=logging.INFO):
    """
    Configure the root logger to write to stdout.

    Format: "timestamp - logger name - level - message".
    """
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def _format_array(arr, max_values=10):
    """Format an array (or tensor) for pretty printing."""
    if isinstance(arr, (int, float)):
        return f"{arr:.6f}"

    flat = np.asarray(getattr(arr, 'data', arr)).flatten()

    if len(flat) <= max_values:
        values_str = ", ".join([f"{v:.6f}" for v in flat])
    else:
        first_part = ", ".join([f"{v:.6f}" for v in flat[:max_values//2]])
        last_part = ", ".join([f"{v:.6f}" for v in flat[-max_values//2:]])
        values_str = f"{first_part}, ..., {last_part}"

    return f"[{values_str}]"


def _format_shape(arr):
    return tuple(np.asarray(getattr(arr, 'data', arr)).shape)


def _format_timestamp():
    """Get current timestamp string."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]


class TrainingLogger:
    """
    Logger for training runs.

    Appends to <log_dir>/<name>.training.log. Each run starts with a header;
    each logged epoch records:
    - the sample input and the network's output
    - the loss
    - every trainable layer's weights, bias and previous weight change

    Args:
        name: Base name for log file (will create <name>.training.log)
        log_dir: Directory for log files (created if missing)
    """

    def __init__(self, name="training", log_dir="."):
        self.name = name
        self.log_dir = log_dir
        self.log_path = os.path.join(log_dir, f"{name}.training.log")
        os.makedirs(log_dir, exist_ok=True)

        # Start new run section
        with open(self.log_path, 'a') as f:
            f.write("\n" + "=" * 80 + "\n")
            f.write(f"RUN: {_format_timestamp()}\n")
            f.write("=" * 80 + "\n\n")

    def log_epoch(self, epoch, inputs, outputs, loss, layers=()):
        """
        Log one epoch boundary.

        Args:
            epoch: Epoch number
            inputs: Sample input (Tensor or array)
            outputs: Network output for that input
            loss: Loss value for the epoch
            layers: Layers to record; those without parameters are skipped
        """
        with open(self.log_path, 'a') as f:
            f.write(f"[EPOCH {epoch}]\n")
            f.write(f"Timestamp: {_format_timestamp()}\n\n")

            f.write("Input:\n")
            f.write(f"  Shape: {_format_shape(inputs)}\n")
            f.write(f"  Values: {_format_array(inputs)}\n\n")

            f.write("Output:\n")
            f.write(f"  Shape: {_format_shape(outputs)}\n")
            f.write(f"  Values: {_format_array(outputs)}\n\n")

            f.write(f"Loss: {float(loss):.6f}\n\n")

            trainable = [(index, layer) for index, layer in enumerate(layers) if layer.parameters()]
            if trainable:
                f.write("Parameters:\n")
                for index, layer in trainable:
                    f.write(f"\n  layer{index} ({layer.layer_type}):\n")
                    f.write(f"    Weights shape: {_format_shape(layer.weights)}\n")
                    f.write(f"    Weights: {_format_array(layer.weights)}\n")
                    f.write(f"    Bias: {_format_array(layer.bias)}\n")
                    f.write(f"    Previous update: {_format_array(layer.prev_update)}\n")

            f.write("\n" + "-" * 80 + "\n\n")
