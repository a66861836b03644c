"""
NetLite Training Loop

Networks learn one example at a time; Trainer repeats that over a data set
for a number of epochs and keeps the loss history.
"""

import logging

import numpy as np

from .autoencoder import AutoEncoder
from .errors import InvalidArgument
from .network import as_tensor

logger = logging.getLogger(__name__)


class Trainer:
    """
    Train a Network or an AutoEncoder on a list of samples.

    For a Network each sample is an (inputs, targets) pair; for an
    AutoEncoder each sample is just the inputs.

    Args:
        model: Network or AutoEncoder
        config: TrainingConfiguration (learning rate, momentum, epochs, ...)
        rng: numpy Generator for the sample order (default: seeded from config.seed)
        training_logger: Optional TrainingLogger written every log_interval epochs
    """

    def __init__(self, model, config, rng=None, training_logger=None):
        self.model = model
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.training_logger = training_logger
        self.losses = []

    def _is_autoencoder(self):
        return isinstance(self.model, AutoEncoder)

    def _split(self, sample):
        if self._is_autoencoder():
            return sample, sample
        inputs, targets = sample
        return inputs, targets

    def _train_step(self, sample):
        inputs, targets = self._split(sample)
        if self._is_autoencoder():
            return self.model.train(inputs, self.config.learning_rate, self.config.momentum)
        return self.model.train(inputs, targets, self.config.learning_rate, self.config.momentum)

    def _output(self, inputs):
        if self._is_autoencoder():
            return self.model.reconstruct(inputs)
        return self.model.predict(inputs)

    def fit(self, samples):
        """
        Train for config.epochs epochs.

        Every epoch visits each sample once, in a fresh random order.

        Returns:
            List of mean losses, one per epoch
        """
        samples = list(samples)
        if not samples:
            raise InvalidArgument("cannot train on an empty sample list")

        epochs = self.config.epochs
        logger.info("Training %r for %d epochs on %d samples", self.model, epochs, len(samples))

        for epoch in range(epochs):
            order = self.rng.permutation(len(samples))
            loss = float(np.mean([self._train_step(samples[i]) for i in order]))
            self.losses.append(loss)

            if epoch % self.config.log_interval == 0 or epoch == epochs - 1:
                logger.info("Epoch %d: loss = %.6f", epoch, loss)
                if self.training_logger is not None:
                    inputs, _ = self._split(samples[order[0]])
                    self.training_logger.log_epoch(
                        epoch, as_tensor(inputs), self._output(inputs), loss, self.model.layers
                    )

        logger.info("Final loss: %.6f", self.losses[-1])
        return self.losses

    def evaluate(self, samples):
        """Mean squared error of the model's outputs over `samples`"""
        errors = []
        for sample in samples:
            inputs, targets = self._split(sample)
            outputs = self._output(inputs)
            errors.append(np.mean((as_tensor(targets).data - outputs.data) ** 2))
        if not errors:
            raise InvalidArgument("cannot evaluate on an empty sample list")
        return float(np.mean(errors))
