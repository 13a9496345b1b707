#!/usr/bin/env python3
# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, CLI smoke test and build."""

import argparse
import subprocess
import sys
import tempfile
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=spiderform", "--cov-report=term-missing"]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and report results."""
    parser = argparse.ArgumentParser(description="Run SpiderForm CI checks locally.")
    parser.add_argument("--fail-fast", action="store_true", help="Stop after the first failing step")
    parser.add_argument("--skip", action="append", default=[], metavar="STEP", help="Skip a step by name (repeatable)")
    args = parser.parse_args()

    skipped = {name.lower() for name in args.skip}
    results: list[tuple[str, bool, float]] = []

    for name, cmd in _steps():
        if name.lower() in skipped:
            continue
        sep = chalk.blue("=" * 60)
        print(f"\n{sep}")
        print(chalk.blue(name))
        print(sep)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        elapsed = time.monotonic() - start
        results.append((name, proc.returncode == 0, elapsed))
        if args.fail_fast and proc.returncode != 0:
            break

    _print_summary(results)
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _steps() -> list[tuple[str, list[str]]]:
    # The smoke test renders the starter form written by `spiderform init`.
    starter = str(Path(tempfile.mkdtemp(prefix="spiderform-ci-")) / "form.yaml")
    smoke = [
        ("CLI init", ["uv", "run", "spiderform", "init", starter]),
        ("CLI render", ["uv", "run", "spiderform", "render", starter, "--format", "json"]),
    ]
    return STEPS[:-1] + smoke + STEPS[-1:]


def _print_summary(results: list[tuple[str, bool, float]]) -> None:
    sep = "=" * 60
    print(f"\n{chalk.blue(sep)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(sep))
    for name, passed, elapsed in results:
        if passed:
            line = chalk.green(f"  PASS  {name} ({elapsed:.1f}s)")
        else:
            line = chalk.red(f"  FAIL  {name} ({elapsed:.1f}s)")
        print(line)
    print()


def _repo_root() -> str:
    return str(Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())
