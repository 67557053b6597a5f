"""Command-line entry point: ``rpt2chn --if report.rpt --of spectrum.chn``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Optional, Sequence

from rpt2chn.config import ConverterConfig, log_level_from_env
from rpt2chn.convert import convert
from rpt2chn.errors import MissingArgumentError, Rpt2ChnError


class _ArgumentParser(argparse.ArgumentParser):
    # argparse exits with status 2 on its own; route its errors to the single handler in main().
    def error(self, message: str) -> NoReturn:
        raise MissingArgumentError(message)


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="rpt2chn",
        description="Convert an RPT spectrum report to a CHN spectrum file.",
        epilog="Paths starting with '-' must be attached with '=', e.g. --if=-scan.rpt.",
        allow_abbrev=False,
    )
    p.add_argument("-if", "--if", dest="in_file", metavar="PATH", default=None, help="RPT file to read from")
    p.add_argument("-of", "--of", dest="out_file", metavar="PATH", default=None, help="CHN file to write to")
    return p


def _describe(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.filename is not None and exc.strerror:
        return f"{exc.strerror}: {exc.filename}"
    return str(exc)


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=log_level_from_env(), format="%(levelname)s %(name)s: %(message)s")

    p = build_parser()
    try:
        ns = p.parse_args(list(argv) if argv is not None else None)
        cfg = ConverterConfig.from_args(ns.in_file, ns.out_file)
    except MissingArgumentError as e:
        p.print_usage(sys.stderr)
        print(f"rpt2chn: {e}", file=sys.stderr)
        return 1

    try:
        convert(cfg)
    except (Rpt2ChnError, OSError) as e:
        print(f"rpt2chn: {_describe(e)}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
