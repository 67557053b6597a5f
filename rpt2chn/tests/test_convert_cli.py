"""End-to-end tests: RPT file -> convert() / CLI -> CHN file.

Covers:
- Reference conversion, byte for byte
- Idempotence (same input -> identical output)
- No output file on parse/validation errors
- CLI argument handling and exit codes
"""

from __future__ import annotations

import struct
from pathlib import Path

import pytest

from rpt2chn.cli import main
from rpt2chn.config import ConverterConfig, log_level_from_env
from rpt2chn.convert import convert
from rpt2chn.errors import FormatError, MissingArgumentError, ValidationError
from rpt2chn.ingest.readers_chn import ChnReader


HEADER = "Spectrum report 01-06-2020 13:45:30 GeHP-1\nLive time: 100.0\nReal time: 120.0\n"


def _write_rpt(path: Path, n_lines: int = 4, per_line: int = 16) -> Path:
    rows = []
    for i in range(n_lines):
        rows.append(" ".join([str(i * per_line)] + [str(10 * (i * per_line + k)) for k in range(per_line)]))
    path.write_text(HEADER + "\n".join(rows) + "\n", encoding="utf-8")
    return path


def test_reference_conversion(tmp_path: Path) -> None:
    src = _write_rpt(tmp_path / "in.rpt")
    dst = tmp_path / "out.chn"

    report = convert(ConverterConfig(input_path=src, output_path=dst))
    data = dst.read_bytes()

    assert report.n_channels == 64
    assert len(data) == 32 + 4 * 64
    assert data[:32] == struct.pack("<hhh2sii12shH", -1, 1, 1, b"30", 6000, 5000, b"01JUN2011345", 0, 64)
    assert list(struct.unpack("<64I", data[32:])) == [10 * k for k in range(64)]

    spec = ChnReader().read(dst)
    assert spec.n_channels == report.n_channels
    assert spec.live_time == pytest.approx(100.0)
    assert spec.real_time == pytest.approx(120.0)


def test_conversion_is_idempotent(tmp_path: Path) -> None:
    src = _write_rpt(tmp_path / "in.rpt", n_lines=8, per_line=4)
    a = tmp_path / "a.chn"
    b = tmp_path / "b.chn"
    convert(ConverterConfig(input_path=src, output_path=a))
    convert(ConverterConfig(input_path=src, output_path=b))
    convert(ConverterConfig(input_path=src, output_path=a))
    assert a.read_bytes() == b.read_bytes()


def test_validation_error_writes_nothing(tmp_path: Path) -> None:
    src = _write_rpt(tmp_path / "in.rpt", n_lines=3, per_line=1)
    dst = tmp_path / "out.chn"
    with pytest.raises(ValidationError):
        convert(ConverterConfig(input_path=src, output_path=dst))
    assert not dst.exists()


def test_format_error_keeps_existing_output(tmp_path: Path) -> None:
    src = tmp_path / "in.rpt"
    src.write_text("Spectrum report 01-13-2020 13:45:30\nLive 1\nReal 1\n0 1\n", encoding="utf-8")
    dst = tmp_path / "out.chn"
    dst.write_bytes(b"previous")
    with pytest.raises(FormatError, match="month out of range"):
        convert(ConverterConfig(input_path=src, output_path=dst))
    assert dst.read_bytes() == b"previous"


def test_missing_input(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        convert(ConverterConfig(input_path=tmp_path / "none.rpt", output_path=tmp_path / "out.chn"))
    assert not (tmp_path / "out.chn").exists()


# -----------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------


def test_config_from_args_rejects_empty_values() -> None:
    with pytest.raises(MissingArgumentError, match="--if"):
        ConverterConfig.from_args("", "out.chn")
    with pytest.raises(MissingArgumentError, match="--of"):
        ConverterConfig.from_args("in.rpt", None)
    cfg = ConverterConfig.from_args("in.rpt", "out.chn")
    assert cfg.input_path == Path("in.rpt")
    assert cfg.output_path == Path("out.chn")


def test_log_level_from_env() -> None:
    assert log_level_from_env({}) == 30
    assert log_level_from_env({"RPT2CHN_LOG_LEVEL": "debug"}) == 10
    assert log_level_from_env({"RPT2CHN_LOG_LEVEL": "INFO"}) == 20
    assert log_level_from_env({"RPT2CHN_LOG_LEVEL": "chatty"}) == 30


# -----------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------


def test_cli_success(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = _write_rpt(tmp_path / "in.rpt")
    dst = tmp_path / "out.chn"
    assert main(["--if", str(src), "--of", str(dst)]) == 0
    assert dst.stat().st_size == 32 + 4 * 64
    assert capsys.readouterr().err == ""


def test_cli_single_dash_flags(tmp_path: Path) -> None:
    src = _write_rpt(tmp_path / "in.rpt")
    dst = tmp_path / "out.chn"
    assert main(["-if", str(src), "-of", str(dst)]) == 0
    assert dst.exists()


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["--if", "in.rpt"],
        ["--of", "out.chn"],
        ["--if", "", "--of", "out.chn"],
        ["--if", "in.rpt", "--of", ""],
        ["--if", "in.rpt", "--of", "out.chn", "extra"],
        ["--if", "in.rpt", "--of", "out.chn", "--verbose"],
    ],
)
def test_cli_usage_errors(argv, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(argv) == 1
    err = capsys.readouterr().err
    assert err.startswith("usage: rpt2chn")


def test_cli_power_of_two_message(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = _write_rpt(tmp_path / "in.rpt", n_lines=1, per_line=3)
    dst = tmp_path / "out.chn"
    assert main(["--if", str(src), "--of", str(dst)]) == 1
    err = capsys.readouterr().err
    assert err == "rpt2chn: number of channels is not a power of two\n"
    assert not dst.exists()


def test_cli_missing_input_one_line(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    missing = tmp_path / "missing.rpt"
    assert main(["--if", str(missing), "--of", str(tmp_path / "out.chn")]) == 1
    err = capsys.readouterr().err
    assert err.count("\n") == 1
    assert str(missing) in err


def test_cli_format_error_one_line(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = tmp_path / "in.rpt"
    src.write_text("bad header\n", encoding="utf-8")
    assert main(["--if", str(src), "--of", str(tmp_path / "out.chn")]) == 1
    err = capsys.readouterr().err
    assert err == "rpt2chn: line 1: acquisition date: expected at least 4 fields, got 2\n"


def test_cli_paths_starting_with_dash(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_rpt(tmp_path / "-scan.rpt")
    monkeypatch.chdir(tmp_path)

    # The '=' form hands the value to the flag verbatim.
    assert main(["--if=-scan.rpt", "-of=-scan.chn"]) == 0
    assert (tmp_path / "-scan.chn").stat().st_size == 32 + 4 * 64

    # The separated form reads '-scan.rpt' as another flag.
    assert main(["--if", "-scan.rpt", "--of", "out.chn"]) == 1
    assert capsys.readouterr().err.startswith("usage: rpt2chn")
    assert not (tmp_path / "out.chn").exists()
