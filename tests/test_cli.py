"""CLI tests using typer's CliRunner."""

import zipfile

import pytest
from typer.testing import CliRunner

from term_epub.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_build_epub(aggregate_dir, tmp_path):
    out = tmp_path / "book.epub"
    result = runner.invoke(app, ["build", "-i", str(aggregate_dir), "-o", str(out), "--no-progress"])
    assert result.exit_code == 0, result.output
    with zipfile.ZipFile(out) as zf:
        assert "OEBPS/chapter2.xhtml" in zf.namelist()


def test_build_with_dotlist_override(term_files_dir, tmp_path):
    out = tmp_path / "book.html"
    result = runner.invoke(
        app,
        ["build", "-i", str(term_files_dir), "-o", str(out), "--no-progress", "format=html", "workers=2"],
    )
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8").endswith("</body></html>")


def test_build_missing_input_exits_1(tmp_path):
    result = runner.invoke(app, ["build", "-i", str(tmp_path / "missing"), "--no-progress"])
    assert result.exit_code == 1


def test_build_invalid_format_exits_1(aggregate_dir):
    result = runner.invoke(app, ["build", "-i", str(aggregate_dir), "--format", "pdf"])
    assert result.exit_code == 1


def test_sample_then_build(tmp_path):
    data = tmp_path / "data"
    result = runner.invoke(app, ["sample", str(data / "all_terms.json"), "--count", "10"])
    assert result.exit_code == 0, result.output
    out = tmp_path / "book.epub"
    result = runner.invoke(app, ["build", "-i", str(data), "-o", str(out), "--no-progress"])
    assert result.exit_code == 0, result.output
    with zipfile.ZipFile(out) as zf:
        assert "OEBPS/chapter10.xhtml" in zf.namelist()


def test_config_init_and_show(tmp_path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "configs" / "base.yaml").exists()

    (tmp_path / "configs" / "base.yaml").write_text("title: Custom Title\n")
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "Custom Title" in result.output
