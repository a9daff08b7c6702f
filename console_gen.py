#!/usr/bin/env python3
"""Generate console_args.py and console.sol from the console.log catalogue.

- Enumerates every overloaded log(...) signature and derives its selector.
- Renders both artifacts in memory, then writes them (or, with --check,
  compares them against the files already on disk).
"""
from __future__ import annotations

import os
import sys
import json
import time
import argparse
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from console_selectors import CONSOLE_ADDRESS, GenerationError, SelectorCollisionError, build_model
from console_templates import OUTPUTS, render_all

DEFAULT_OUT_DIR = os.getenv("CONSOLE_GEN_OUT_DIR", ".")

__all__ = ["write_outputs", "stale_outputs", "parse_args", "main"]


# --- file helpers ----------------------------------------------------------


def write_outputs(out_dir: Path, rendered: Dict[str, str]) -> List[Path]:
    """
    Write every output or none of them.

    Each file is first written to a temp file beside its target. Targets are
    swapped in with os.replace only once all temp files exist; if a swap
    fails, files already swapped are restored to their previous content.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    targets = [out_dir / name for name in OUTPUTS]
    # Read previous contents up front; a target that cannot be read (e.g. a
    # directory) aborts before anything is replaced.
    previous: Dict[Path, Optional[bytes]] = {}
    for path in targets:
        try:
            previous[path] = path.read_bytes()
        except FileNotFoundError:
            previous[path] = None

    temps: Dict[Path, str] = {}
    replaced: List[Path] = []
    try:
        for path in targets:
            fd, tmp = tempfile.mkstemp(dir=out_dir, prefix=f".{path.name}.", suffix=".tmp")
            temps[path] = tmp
            with os.fdopen(fd, "wb") as f:
                f.write(rendered[path.name].encode("utf-8"))
        try:
            for path in targets:
                os.replace(temps[path], path)
                replaced.append(path)
        except OSError:
            for path in replaced:
                if previous[path] is None:
                    path.unlink()
                else:
                    path.write_bytes(previous[path])
            raise
    finally:
        for path, tmp in temps.items():
            if path not in replaced and os.path.exists(tmp):
                os.unlink(tmp)
    return targets


def stale_outputs(out_dir: Path, rendered: Dict[str, str]) -> List[str]:
    """Names of outputs that are missing or differ from the rendered text."""
    stale = []
    for name in OUTPUTS:
        path = out_dir / name
        try:
            current = path.read_bytes().decode("utf-8")
        except FileNotFoundError:
            stale.append(name)
            continue
        if current != rendered[name]:
            stale.append(name)
    return stale


# --- CLI -------------------------------------------------------------------
# Example:
#   python console_gen.py --out-dir internal/console --check


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Generate the console.log selector table and Solidity library.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument(
        "-o",
        "--out-dir",
        default=DEFAULT_OUT_DIR,
        help="Directory to write generated files into (default from CONSOLE_GEN_OUT_DIR)",
    )
    ap.add_argument(
        "-a",
        "--address",
        default=CONSOLE_ADDRESS,
        help="Console contract address (default from CONSOLE_ADDRESS)",
    )
    ap.add_argument(
        "--check",
        action="store_true",
        help="Do not write; exit with code 2 if generated files are out of date",
    )
    ap.add_argument(
        "--json",
        action="store_true",
        help="Emit the signature catalogue as JSON to stdout",
    )
    ap.add_argument(
        "--raw-json",
        action="store_true",
        help="Emit compact JSON (no pretty-printing)",
    )
    ap.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress human-readable logs on stderr",
    )
    return ap.parse_args(argv)


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    t0 = time.monotonic()

    try:
        model = build_model(address=args.address)
    except SelectorCollisionError as e:
        print(f"❌ Selector collisions: {e.collisions}", file=sys.stderr)
        sys.exit(1)
    except GenerationError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(2)

    if not args.quiet:
        n_log_type = sum(1 for e in model.entries if e.is_log_type)
        n_log = sum(1 for e in model.entries if e.is_log)
        print(f"🔗 Address: {model.address}", file=sys.stderr)
        print(
            f"🔑 Signatures={len(model.entries)}  log={n_log}  logType={n_log_type}",
            file=sys.stderr,
        )

    try:
        rendered = render_all(model)
    except GenerationError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    out_dir = Path(args.out_dir)
    if args.check:
        try:
            stale = stale_outputs(out_dir, rendered)
        except (OSError, UnicodeDecodeError) as e:
            print(f"❌ Failed to read generated files in {out_dir}: {e}", file=sys.stderr)
            sys.exit(1)
        if stale:
            print(f"⚠️  Out of date in {out_dir}: {stale}", file=sys.stderr)
            sys.exit(2)
        if not args.quiet:
            print(f"✅ Generated files in {out_dir} are up to date", file=sys.stderr)
    else:
        try:
            written = write_outputs(out_dir, rendered)
        except OSError as e:
            print(f"❌ Failed to write generated files to {out_dir}: {e}", file=sys.stderr)
            sys.exit(1)
        if not args.quiet:
            for path in written:
                print(f"📝 Wrote {path}", file=sys.stderr)

    if not args.quiet:
        print(f"⏱️  Elapsed: {time.monotonic() - t0:.2f}s", file=sys.stderr)

    if args.json or args.raw_json:
        if args.raw_json:
            print(json.dumps(model.to_json(), separators=(",", ":"), sort_keys=True))
        else:
            print(json.dumps(model.to_json(), indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
