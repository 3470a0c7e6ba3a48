from __future__ import annotations

from pathlib import Path

import pytest

from romburner import cli
from romburner.config import ProgrammerConfig
from romburner.hardware.simulated import simulated_board


def _run(*args: str) -> int:
    _, retcode = cli.RomBurnerCLI.run(["romburner", *args], exit=False)
    return retcode


@pytest.fixture
def small_control_config(tmp_path: Path) -> Path:
    path = tmp_path / "programmer.json"
    ProgrammerConfig(variant="control", device_size=0x800).save(str(path))
    return path


def test_image_writes_binary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "control.bin"
    assert _run("image", "-o", str(path), "control") == 0
    assert path.stat().st_size == 0x2000
    assert path.read_bytes()[0] == 0x03
    assert "Wrote 8192 bytes" in capsys.readouterr().out


def test_image_ihex(tmp_path: Path) -> None:
    path = tmp_path / "display.hex"
    assert _run("image", "-f", "ihex", "-o", str(path), "display") == 0
    assert path.read_text().startswith(":")


def test_listing(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run("listing") == 0
    out = capsys.readouterr().out
    assert out.startswith("@00  ADD @nnnn")
    assert "PC_OUT MAR_IN" in out
    assert "@77  HLT" in out


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run() == 1
    assert "romburner" in capsys.readouterr().out


def test_simulate_then_check(
    tmp_path: Path,
    small_control_config: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert _run("simulate", "-c", str(small_control_config), "control") == 0
    output = capsys.readouterr().out
    assert output.startswith("Programming....\nFinished\n03 03 03")

    dump_file = tmp_path / "dump.txt"
    dump_file.write_text(output)
    assert _run("check", "-c", str(small_control_config), "-i", str(dump_file), "control") == 0
    assert "OK: 2048 bytes checked, 0 differences" in capsys.readouterr().out

    dump_file.write_text(output.replace("03 03 03", "03 07 03", 1))
    assert _run("check", "-c", str(small_control_config), "-i", str(dump_file), "control") == 1
    report = capsys.readouterr().out
    assert "0x0001: expected 03, read 07" in report
    assert "MISMATCH: 2048 bytes checked, 1 differences" in report


def test_check_needs_a_source(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run("check", "control") == 1
    assert "--port" in capsys.readouterr().err


def test_program_uses_gpio_backend(
    monkeypatch: pytest.MonkeyPatch,
    small_control_config: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(cli, "RPiGpioPins", lambda: simulated_board(0x800))
    assert _run("program", "-c", str(small_control_config), "control") == 0
    assert "Finished" in capsys.readouterr().out


def test_program_without_gpio_backend(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def missing():
        raise ImportError("No module named 'RPi'")

    monkeypatch.setattr(cli, "RPiGpioPins", missing)
    assert _run("program", "control") == 1
    assert "GPIO backend unavailable" in capsys.readouterr().err


def test_image_with_hex_string_config(tmp_path: Path) -> None:
    config = tmp_path / "programmer.json"
    config.write_text('{"device_size": "0x800"}')
    path = tmp_path / "control.bin"
    assert _run("image", "-c", str(config), "-o", str(path), "control") == 0
    assert path.stat().st_size == 0x800


def test_image_with_bad_config_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "programmer.json"
    config.write_text('{"device_size": "lots"}')
    path = tmp_path / "control.bin"
    assert _run("image", "-c", str(config), "-o", str(path), "control") == 1
    assert "Error:" in capsys.readouterr().err
    assert not path.exists()


def test_program_base_is_not_a_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run("_ProgramCommand", "control") == 1
    assert "Unknown command" in capsys.readouterr().err
    with pytest.raises(NotImplementedError):
        cli._ProgramCommand("romburner").open_pins(ProgrammerConfig())
