"""Tests for the command line demos."""
import matplotlib

matplotlib.use("Agg")

from netlite.cli import build_parser, load_configuration, main
from netlite.serialization import load_autoencoder, load_network


class TestCli:
    """Tests for argument handling and the demo runs."""

    def test_overrides_apply_on_top_of_config(self, tmp_path):
        path = tmp_path / "training.toml"
        path.write_text("[training]\nepochs = 10\nlearning_rate = 0.1\n")
        args = build_parser().parse_args(["xor", "--config", str(path), "--epochs", "3"])
        config = load_configuration(args)
        assert config.epochs == 3
        assert config.learning_rate == 0.1

    def test_xor_demo(self, tmp_path, capsys):
        model_path = tmp_path / "xor.json"
        plot_path = tmp_path / "loss.png"
        code = main(["xor", "--epochs", "2", "--seed", "1",
                     "--save", str(model_path), "--plot", str(plot_path)])

        assert code == 0
        assert load_network(str(model_path)).layer_count() == 2
        assert plot_path.exists()
        assert "Training xor demo" in capsys.readouterr().out

    def test_autoencoder_demo(self, tmp_path):
        model_path = tmp_path / "ae.json"
        assert main(["autoencoder", "--epochs", "2", "--seed", "1", "--save", str(model_path)]) == 0
        loaded = load_autoencoder(str(model_path))
        assert loaded.layer_count() == 2
        assert loaded.closed

    def test_training_log(self, tmp_path):
        path = tmp_path / "training.toml"
        path.write_text(f'[training]\nlog_dir = "{tmp_path / "logs"}"\nepochs = 2\n')
        assert main(["xor", "--config", str(path), "--log"]) == 0
        assert (tmp_path / "logs" / "netlite_xor.training.log").exists()
