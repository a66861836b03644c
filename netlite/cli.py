"""
Command line demos for NetLite.

    python -m netlite xor --epochs 5000 --seed 1 --save outputs/xor.json
    python -m netlite autoencoder --config training.toml --plot outputs/loss.png
"""

import argparse
import dataclasses
import logging

import numpy as np

from .autoencoder import AutoEncoder
from .config import TrainingConfiguration
from .logger import TrainingLogger, setup_logging
from .network import Network
from .nn import Dense
from .serialization import save_autoencoder, save_network
from .training import Trainer
from .visualize import plot_training_history

XOR_SAMPLES = [
    ([0, 0], [0]),
    ([0, 1], [1]),
    ([1, 0], [1]),
    ([1, 1], [0]),
]

AUTOENCODER_SAMPLES = [
    [0, 0, 1, 1],
    [0, 1, 1, 0],
]


def build_parser():
    parser = argparse.ArgumentParser(prog="netlite", description="Train a NetLite demo network")
    parser.add_argument("demo", choices=["xor", "autoencoder"], help="Which problem to train on")
    parser.add_argument("--config", help="TOML file with a [training] table")
    parser.add_argument("--epochs", type=int, help="Override the number of epochs")
    parser.add_argument("--seed", type=int, help="Override the random seed")
    parser.add_argument("--save", help="Write the trained model to this JSON file")
    parser.add_argument("--plot", help="Write the loss history plot to this image file")
    parser.add_argument("--log", action="store_true", help="Write a training log to the configured log_dir")
    parser.add_argument("--verbose", action="store_true", help="Show debug messages")
    return parser


def load_configuration(args):
    """Configuration from --config (or defaults), with command line overrides applied"""
    config = TrainingConfiguration.load(args.config) if args.config else TrainingConfiguration()
    overrides = {}
    if args.epochs is not None:
        overrides["epochs"] = args.epochs
    if args.seed is not None:
        overrides["seed"] = args.seed
    return dataclasses.replace(config, **overrides)


def run_xor(config, rng, training_logger=None):
    """Train a 2-2-1 sigmoid network on XOR and print its predictions"""
    network = Network(
        Dense(2, 2, "sigmoid", rng=rng),
        Dense(2, 1, "sigmoid", rng=rng),
    )
    trainer = Trainer(network, config, rng=rng, training_logger=training_logger)
    trainer.fit(XOR_SAMPLES)

    for inputs, targets in XOR_SAMPLES:
        prediction = network.predict(inputs).get(0, 0, 0)
        print(f"  {inputs} -> {prediction:.4f} (target {targets[0]})")
    return network, trainer.losses


def run_autoencoder(config, rng, training_logger=None):
    """Train a 4-2-4 sigmoid autoencoder and print codes and reconstructions"""
    autoencoder = AutoEncoder(4, rng=rng).add_coding_layer(2, "sigmoid").add_decoding_layer("sigmoid")
    trainer = Trainer(autoencoder, config, rng=rng, training_logger=training_logger)
    trainer.fit(AUTOENCODER_SAMPLES)

    for inputs in AUTOENCODER_SAMPLES:
        code = autoencoder.encode(inputs)
        decoded = autoencoder.decode(code)
        print(f"  {inputs} -> code {np.round(code.data[0, 0], 4).tolist()} "
              f"-> {np.round(decoded.data[0, 0], 4).tolist()}")
    return autoencoder, trainer.losses


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = load_configuration(args)
    rng = np.random.default_rng(config.seed)
    training_logger = TrainingLogger(name=f"{config.name}_{args.demo}", log_dir=config.log_dir) if args.log else None

    print(f"Training {args.demo} demo...")
    if args.demo == "xor":
        model, losses = run_xor(config, rng, training_logger)
        if args.save:
            save_network(model, args.save)
    else:
        model, losses = run_autoencoder(config, rng, training_logger)
        if args.save:
            save_autoencoder(model, args.save)

    if args.plot:
        plot_training_history(losses, title=f"NetLite {args.demo} Training Loss", filename=args.plot, log_scale=True)

    return 0
