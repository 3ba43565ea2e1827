"""Run lint, format, type, and test checks and report results as JSON.

Usage:
    python scripts/quality_gate.py              # run all, JSON output
    python scripts/quality_gate.py --skip-tests # skip pytest (fast)
    python scripts/quality_gate.py --fix        # auto-fix ruff issues first
"""

from __future__ import annotations

import argparse
import json
import re
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

MYPY_TARGETS = ["canny_cli/"]


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", *cmd],
        capture_output=True,
        text=True,
        cwd=str(ROOT),
        timeout=300,
    )


def _result(r: subprocess.CompletedProcess, t0: float, **counts: int) -> dict:
    out: dict = {"status": "pass" if r.returncode == 0 else "fail", **counts}
    out["duration_s"] = round(time.monotonic() - t0, 1)
    if r.returncode != 0:
        out["output"] = (r.stdout + r.stderr).strip()[-2000:]
    return out


def check_ruff_lint(fix: bool = False) -> dict:
    t0 = time.monotonic()
    if fix:
        _run(["ruff", "check", "--fix", "."])
    r = _run(["ruff", "check", "."])
    errors = sum(1 for line in r.stdout.splitlines() if re.match(r"^\S+:\d+:\d+:", line))
    return _result(r, t0, errors=errors)


def check_ruff_format() -> dict:
    t0 = time.monotonic()
    r = _run(["ruff", "format", "--check", "."])
    lines = r.stdout.splitlines() + r.stderr.splitlines()
    return _result(r, t0, files_to_reformat=sum(1 for ln in lines if ln.startswith("Would reformat")))


def check_mypy() -> dict:
    t0 = time.monotonic()
    r = _run(["mypy", *MYPY_TARGETS])
    return _result(r, t0, errors=sum(1 for ln in r.stdout.splitlines() if ": error:" in ln))


def check_pytest() -> dict:
    t0 = time.monotonic()
    r = _run(["pytest", "tests/", "-q", "--no-header", "--tb=short"])
    passed = failed = 0
    # Summary line: "42 passed" or "1 failed, 41 passed"
    for line in reversed(r.stdout.strip().splitlines()):
        m_passed = re.search(r"(\d+)\s+passed", line)
        m_failed = re.search(r"(\d+)\s+failed", line)
        if m_passed or m_failed:
            passed = int(m_passed.group(1)) if m_passed else 0
            failed = int(m_failed.group(1)) if m_failed else 0
            break
    return _result(r, t0, passed=passed, failed=failed)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run all quality checks")
    parser.add_argument("--skip-tests", action="store_true", help="Skip pytest")
    parser.add_argument("--fix", action="store_true", help="Auto-fix ruff issues first")
    args = parser.parse_args()

    t0 = time.monotonic()
    checks: dict[str, dict] = {}
    print("Running ruff lint...", file=sys.stderr)
    checks["ruff_lint"] = check_ruff_lint(fix=args.fix)
    print("Running ruff format...", file=sys.stderr)
    checks["ruff_format"] = check_ruff_format()
    print("Running mypy...", file=sys.stderr)
    checks["mypy"] = check_mypy()
    if args.skip_tests:
        checks["pytest"] = {"status": "skip", "reason": "--skip-tests"}
    else:
        print("Running pytest...", file=sys.stderr)
        checks["pytest"] = check_pytest()

    overall = "pass" if all(c["status"] in ("pass", "skip") for c in checks.values()) else "fail"
    print(
        json.dumps(
            {
                "overall": overall,
                "checks": checks,
                "total_duration_s": round(time.monotonic() - t0, 1),
            },
            indent=2,
        )
    )
    sys.exit(0 if overall == "pass" else 1)


if __name__ == "__main__":
    main()
