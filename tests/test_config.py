"""Tests for the training configuration."""
import pytest

from netlite.config import TrainingConfiguration
from netlite.errors import InvalidArgument


class TestTrainingConfiguration:
    """Tests for TrainingConfiguration defaults, validation and loading."""

    def test_defaults(self):
        config = TrainingConfiguration()
        assert config.learning_rate == 0.3
        assert config.momentum == 0.5
        assert config.epochs == 1000
        assert config.seed is None
        assert config.log_interval == 100

    @pytest.mark.parametrize("field,value", [
        ("learning_rate", -0.1),
        ("momentum", -1),
        ("epochs", 0),
        ("log_interval", 0),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(InvalidArgument):
            TrainingConfiguration(**{field: value})

    def test_load_from_toml(self, tmp_path):
        path = tmp_path / "training.toml"
        path.write_text(
            "[training]\n"
            "learning_rate = 0.1\n"
            "epochs = 50\n"
            "seed = 7\n"
            'name = "xor"\n'
        )
        config = TrainingConfiguration.load(str(path))
        assert config.learning_rate == 0.1
        assert config.epochs == 50
        assert config.seed == 7
        assert config.name == "xor"
        # Missing fields keep their defaults
        assert config.momentum == 0.5

    def test_load_without_training_table(self, tmp_path):
        path = tmp_path / "empty.toml"
        path.write_text("[other]\nvalue = 1\n")
        assert TrainingConfiguration.load(str(path)) == TrainingConfiguration()

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TrainingConfiguration.load(str(tmp_path / "missing.toml"))

    def test_load_validates(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[training]\nepochs = -5\n")
        with pytest.raises(InvalidArgument):
            TrainingConfiguration.load(str(path))
