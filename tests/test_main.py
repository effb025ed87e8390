"""Command-line interface."""

from __future__ import annotations

from spectraforge.main import main


class TestCLI:
    def test_list(self, capsys):
        assert main(["--list"]) == 0
        out = capsys.readouterr().out
        assert "Polygon Nebula" in out
        assert "backdrop > fluid > scanline" in out
        assert "1280x720" in out

    def test_render_one(self, tmp_path):
        code = main(["--style", "Synthwave Horizon", "--palette", "Jade Circuit",
                     "--resolution", "720x1280", "--seed-time", "0", "--output", str(tmp_path)])
        assert code == 0
        files = list(tmp_path.glob("*.png"))
        assert len(files) == 1
        assert files[0].name.startswith("synthwave-horizon-")

    def test_reproducible_bytes(self, tmp_path):
        args = ["--style", "Synthwave Horizon", "--resolution", "1280x720", "--seed-time", "9"]
        assert main(args + ["--output", str(tmp_path / "a")]) == 0
        assert main(args + ["--output", str(tmp_path / "b")]) == 0
        a = next((tmp_path / "a").glob("*.png")).read_bytes()
        b = next((tmp_path / "b").glob("*.png")).read_bytes()
        assert a == b

    def test_invalid_style(self, tmp_path, capsys):
        assert main(["--style", "Cubism", "--output", str(tmp_path)]) == 2
        assert "Unknown style" in capsys.readouterr().err

    def test_lenient_style(self, tmp_path):
        code = main(["--style", "Cubism", "--lenient", "--resolution", "1280x720",
                     "--seed-time", "1", "--output", str(tmp_path)])
        assert code == 0
        assert next(tmp_path.glob("*.png")).name.startswith("cubism-")
