"""Tests for generate and record commands."""

import json
import zipfile
from pathlib import Path

import pytest

import skillforge.__main__ as cli_module
from skillforge.__main__ import cli
from skillforge.errors import CapturePermissionDenied, EmptyResponseError

API_ENV = {"GEMINI_API_KEY": "test-key"}


@pytest.fixture
def gateway(monkeypatch, fake_gateway, analysis_result, invoice_package):
    fake = fake_gateway(analysis_result(invoice_package))
    monkeypatch.setattr(cli_module, "_create_gateway", lambda settings: fake)
    return fake


@pytest.fixture
def recording(tmp_path: Path) -> Path:
    path = tmp_path / "demo.webm"
    path.write_bytes(b"\x1a\x45\xdf\xa3frames")
    return path


def _history(skillforge_home: Path) -> list[dict]:
    payload = json.loads((skillforge_home / "history.json").read_text(encoding="utf-8"))
    return payload["skills"]


def test_generate_from_file(cli_runner, gateway, recording, skillforge_home) -> None:
    result = cli_runner.invoke(cli, ["generate", str(recording)], env=API_ENV)

    assert result.exit_code == 0, result.output
    assert "invoice-sorter" in result.output
    assert "scripts/sort.py" in result.output
    assert gateway.calls[0][1] == "video/webm"
    skills = _history(skillforge_home)
    assert [item["skillPackage"]["slug"] for item in skills] == ["invoice-sorter"]


def test_generate_passes_notes(cli_runner, gateway, recording) -> None:
    result = cli_runner.invoke(
        cli, ["generate", str(recording), "--notes", "vendor only"], env=API_ENV
    )

    assert result.exit_code == 0, result.output
    assert gateway.calls[0][2] == "vendor only"


def test_generate_with_export(cli_runner, gateway, recording, tmp_path: Path) -> None:
    out = tmp_path / "exports"
    result = cli_runner.invoke(
        cli, ["generate", str(recording), "--export", str(out)], env=API_ENV
    )

    assert result.exit_code == 0, result.output
    assert "Archive written" in result.output
    with zipfile.ZipFile(out / "invoice-sorter.zip") as zf:
        assert zf.read("invoice-sorter/scripts/sort.py") == b"print('x')"


def test_generate_analysis_failure_exits_1(
    cli_runner, monkeypatch, fake_gateway, recording, skillforge_home
) -> None:
    fake = fake_gateway(EmptyResponseError("Analysis response is not JSON"))
    monkeypatch.setattr(cli_module, "_create_gateway", lambda settings: fake)

    result = cli_runner.invoke(cli, ["generate", str(recording)], env=API_ENV)

    assert result.exit_code == 1
    assert "analysis failed" in result.output
    assert not (skillforge_home / "history.json").exists()


def test_generate_requires_api_key(cli_runner, gateway, recording) -> None:
    result = cli_runner.invoke(cli, ["generate", str(recording)])

    assert result.exit_code != 0
    assert "GEMINI_API_KEY" in result.output
    assert gateway.calls == []


def test_generate_rejects_unsupported_file(cli_runner, gateway, tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")

    result = cli_runner.invoke(cli, ["generate", str(path)], env=API_ENV)

    assert result.exit_code != 0
    assert "Unsupported media type" in result.output
    assert gateway.calls == []


def test_generate_rejects_oversized_file(cli_runner, gateway, recording) -> None:
    env = dict(API_ENV, SKILLFORGE_MAX_INLINE_BYTES="4")
    result = cli_runner.invoke(cli, ["generate", str(recording)], env=env)

    assert result.exit_code != 0
    assert "limit" in result.output


def test_generate_mime_type_override(cli_runner, gateway, tmp_path: Path) -> None:
    path = tmp_path / "capture.bin"
    path.write_bytes(b"frames")

    result = cli_runner.invoke(
        cli, ["generate", str(path), "--mime-type", "video/mp4"], env=API_ENV
    )

    assert result.exit_code == 0, result.output
    assert gateway.calls[0][1] == "video/mp4"


def test_record_until_enter(
    cli_runner, monkeypatch, gateway, fake_capture_source, skillforge_home
) -> None:
    source = fake_capture_source()
    monkeypatch.setattr(cli_module, "_create_capture_factory", lambda settings: lambda: source)

    result = cli_runner.invoke(cli, ["record"], input="\n", env=API_ENV)

    assert result.exit_code == 0, result.output
    assert "Press Enter to stop recording." in result.output
    assert source.finished
    assert source.release_count == 1
    assert gateway.calls[0][0] == source.artifact.data
    assert len(_history(skillforge_home)) == 1


def test_record_cancelled_by_user(
    cli_runner, monkeypatch, gateway, fake_capture_source
) -> None:
    source = fake_capture_source(open_error=CapturePermissionDenied("cancelled"))
    monkeypatch.setattr(cli_module, "_create_capture_factory", lambda settings: lambda: source)

    result = cli_runner.invoke(cli, ["record"], env=API_ENV)

    assert result.exit_code == 0, result.output
    assert "cancelled" in result.output
    assert gateway.calls == []


def test_verbose_flag_is_accepted(cli_runner, gateway, recording) -> None:
    result = cli_runner.invoke(cli, ["--verbose", "generate", str(recording)], env=API_ENV)
    assert result.exit_code == 0, result.output


def test_main_returns_1_when_analysis_fails(monkeypatch, fake_gateway, recording) -> None:
    fake = fake_gateway(EmptyResponseError("Analysis response is not JSON"))
    monkeypatch.setattr(cli_module, "_create_gateway", lambda settings: fake)
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setattr("sys.argv", ["skillforge", "generate", str(recording)])

    assert cli_module.main() == 1
