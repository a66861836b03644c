"""Tests for the Trainer loop and the training log file."""
import numpy as np
import pytest

from netlite import AutoEncoder, Dense, Network
from netlite.config import TrainingConfiguration
from netlite.errors import InvalidArgument
from netlite.logger import TrainingLogger, _format_array
from netlite.training import Trainer

XOR = [([0, 0], [0]), ([0, 1], [1]), ([1, 0], [1]), ([1, 1], [0])]
OR = [([0, 0], [0]), ([0, 1], [1]), ([1, 0], [1]), ([1, 1], [1])]


@pytest.fixture
def config():
    """Provide a short training configuration."""
    return TrainingConfiguration(epochs=20, seed=3, log_interval=5)


class TestTrainer:
    """Tests for Trainer.fit / evaluate."""

    def test_one_loss_per_epoch(self, config, rng):
        network = Network(Dense(2, 3, "sigmoid", rng=rng), Dense(3, 1, "sigmoid", rng=rng))
        losses = Trainer(network, config, rng=rng).fit(XOR)
        assert len(losses) == config.epochs
        assert all(loss >= 0 for loss in losses)

    def test_training_lowers_loss(self, rng):
        network = Network(Dense(2, 4, "sigmoid", rng=rng), Dense(4, 1, "sigmoid", rng=rng))
        trainer = Trainer(network, TrainingConfiguration(epochs=300), rng=rng)
        before = trainer.evaluate(OR)
        trainer.fit(OR)
        assert trainer.evaluate(OR) < before

    def test_autoencoder_samples_are_inputs(self, config, rng):
        autoencoder = AutoEncoder(4, rng=rng).add_coding_layer(2, "sigmoid")
        trainer = Trainer(autoencoder, config, rng=rng)
        losses = trainer.fit([[0, 0, 1, 1], [0, 1, 1, 0]])
        assert len(losses) == config.epochs
        assert trainer.evaluate([[0, 0, 1, 1]]) >= 0

    def test_rng_defaults_to_config_seed(self, config):
        a = Trainer(Network(), config)
        b = Trainer(Network(), config)
        assert a.rng.permutation(10).tolist() == b.rng.permutation(10).tolist()

    def test_empty_samples(self, config, rng):
        trainer = Trainer(Network(Dense(2, 1, "sigmoid", rng=rng)), config, rng=rng)
        with pytest.raises(InvalidArgument):
            trainer.fit([])
        with pytest.raises(InvalidArgument):
            trainer.evaluate([])

    def test_writes_training_log(self, config, rng, tmp_path):
        training_logger = TrainingLogger(name="xor", log_dir=str(tmp_path / "logs"))
        network = Network(Dense(2, 2, "sigmoid", rng=rng), Dense(2, 1, "sigmoid", rng=rng))
        Trainer(network, config, rng=rng, training_logger=training_logger).fit(XOR)

        text = (tmp_path / "logs" / "xor.training.log").read_text()
        # Epochs 0, 5, 10, 15 and the last one
        assert text.count("[EPOCH") == 5
        assert "[EPOCH 19]" in text
        assert "Previous update:" in text


class TestTrainingLogger:
    """Tests for the plain-text training log."""

    def test_header_written_on_creation(self, tmp_path):
        training_logger = TrainingLogger(name="run", log_dir=str(tmp_path))
        with open(training_logger.log_path) as f:
            assert "RUN:" in f.read()

    def test_layers_without_parameters_skipped(self, tmp_path):
        training_logger = TrainingLogger(name="run", log_dir=str(tmp_path))
        dense = Dense(1, 1, "relu", weights=[[2]], bias=[0])
        training_logger.log_epoch(0, np.array([1.0]), np.array([2.0]), 0.25, layers=[dense])

        with open(training_logger.log_path) as f:
            text = f.read()
        assert "layer0 (dense)" in text
        assert "Loss: 0.250000" in text

    def test_format_array_truncates(self):
        text = _format_array(np.arange(20, dtype=float), max_values=4)
        assert text == "[0.000000, 1.000000, ..., 18.000000, 19.000000]"
