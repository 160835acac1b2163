from __future__ import annotations

import textwrap
from pathlib import Path

from specmark.cli import cli


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def test_extract_prints_specification(cli_runner, tmp_path):
    target = _write(
        tmp_path,
        "lib.rs",
        """
        //~ hello
        //~ spec:startcode
        let x = 1;
        //~ spec:endcode
        //~~ nested
        """,
    )

    result = cli_runner.invoke(cli, ["extract", str(target)])

    assert result.exit_code == 0
    assert result.output == "hello\n```rs\nlet x = 1;\n```\n\tnested\n"


def test_extract_indent_override(cli_runner, tmp_path):
    target = _write(tmp_path, "lib.py", "#~~ nested\n")

    result = cli_runner.invoke(cli, ["extract", "--indent-chars", "  ", str(target)])

    assert result.exit_code == 0
    assert result.output == "  nested\n"


def test_extract_reads_project_config(cli_runner, tmp_path):
    _write(tmp_path, "pyproject.toml", "[tool.specmark]\nindent_spaces = 3\n")
    target = _write(tmp_path, "lib.rs", "//~~ nested\n")

    result = cli_runner.invoke(cli, ["extract", str(target)])

    assert result.output == "   nested\n"


def test_extract_renders_diagnostic(cli_runner, tmp_path):
    target = _write(tmp_path, "lib.rs", "//~ spec:endcode\n")

    result = cli_runner.invoke(cli, ["extract", str(target)])

    assert result.exit_code == 1
    assert "error: Error parsing file" in result.output
    assert f"--> {target}:1:10" in result.output
    assert "help: missing a startcode instruction before the endcode" in result.output


def test_extract_rejects_file_without_extension(cli_runner, tmp_path):
    target = _write(tmp_path, "Makefile", "//~ hi\n")

    result = cli_runner.invoke(cli, ["extract", str(target)])

    assert result.exit_code == 1
    assert "has no extension" in result.output


def test_extract_rejects_invalid_size_env(cli_runner, tmp_path, monkeypatch):
    monkeypatch.setenv("SPECMARK_MAX_FILE_SIZE", "lots")
    target = _write(tmp_path, "lib.rs", "//~ hi\n")

    result = cli_runner.invoke(cli, ["extract", str(target)])

    assert result.exit_code != 0
    assert "SPECMARK_MAX_FILE_SIZE" in result.output


def test_extract_respects_size_env(cli_runner, tmp_path, monkeypatch):
    monkeypatch.setenv("SPECMARK_MAX_FILE_SIZE", "4")
    target = _write(tmp_path, "lib.rs", "//~ hello\n")

    result = cli_runner.invoke(cli, ["extract", str(target)])

    assert result.exit_code == 1
    assert "exceeds the maximum allowed size" in result.output


def test_new_init_and_build(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["new", "consensus"])
    assert result.exit_code == 0
    spec_dir = tmp_path / "consensus"

    _write(spec_dir, "src/overview.rs", "//~ The overview.\n")
    manifest = spec_dir / "Specification.toml"
    manifest.write_text(
        manifest.read_text(encoding="utf-8") + 'overview = "src/overview.rs"\n', encoding="utf-8"
    )
    template = spec_dir / "specification_template.md"
    template.write_text(
        template.read_text(encoding="utf-8") + "\n{{ sections.overview }}", encoding="utf-8"
    )
    output = tmp_path / "out.md"

    result = cli_runner.invoke(
        cli, ["build", "--specification-path", str(manifest), "--output-file", str(output)]
    )

    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8") == (
        "# Consensus\n\n My specification\n\nThe overview.\n"
    )


def test_build_html_format(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert cli_runner.invoke(cli, ["init", "--name", "ledger"]).exit_code == 0

    result = cli_runner.invoke(cli, ["-v", "build", "--output-format", "html"])

    assert result.exit_code == 0, result.output
    html = (tmp_path / "specification.html").read_text(encoding="utf-8")
    assert "<h1>Ledger</h1>" in html


def test_build_reports_missing_manifest(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["build"])

    assert result.exit_code == 1
    assert "could not read manifest" in result.output


def test_build_renders_section_diagnostic(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert cli_runner.invoke(cli, ["init"]).exit_code == 0
    _write(tmp_path, "bad.rs", "//~ spec:startcode\nfn main() {}\n")
    manifest = tmp_path / "Specification.toml"
    manifest.write_text(
        manifest.read_text(encoding="utf-8") + 'bad = "bad.rs"\n', encoding="utf-8"
    )

    result = cli_runner.invoke(cli, ["build"])

    assert result.exit_code == 1
    assert "missing an endcode instruction" in result.output
    assert "1 | //~ spec:startcode" in result.output


def test_init_refuses_existing_specification(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert cli_runner.invoke(cli, ["init"]).exit_code == 0

    result = cli_runner.invoke(cli, ["init"])

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_init_with_multiline_name_builds(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert cli_runner.invoke(cli, ["init", "spec", "--name", "line1\nline2"]).exit_code == 0
    monkeypatch.chdir(tmp_path / "spec")

    result = cli_runner.invoke(cli, ["build"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "spec" / "specification.md").read_text(encoding="utf-8").startswith(
        "# Line1\nline2\n"
    )


def test_build_watch_hands_off_to_watcher(cli_runner, tmp_path, monkeypatch):
    calls = []

    def fake_watch(manifest, output_file, output_format, config, report):
        calls.append((manifest, output_file, output_format))
        report("error: section missing")

    monkeypatch.setattr("specmark.cli.watch_specification", fake_watch)
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["build", "--watch", "--output-format", "html"])

    assert result.exit_code == 0
    assert calls == [(Path("Specification.toml"), None, "html")]
    assert "error: section missing" in result.output
