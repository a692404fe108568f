#!/usr/bin/env python3
from __future__ import annotations

import json
import shlex
import subprocess
import sys
import tempfile
from pathlib import Path


REQUIRED_PRESET_GROUPS = {"encoding_speed", "video_quality", "audio_quality"}


def _run(args: list[str], *, capture: bool = True, timeout: float = 30.0) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "ffcapture", *args],
        check=False,
        text=True,
        capture_output=capture,
        timeout=timeout,
    )


def main() -> int:
    """Exercise the CLI against the real host; pass --record to also capture two seconds of screen."""
    want_record = "--record" in sys.argv[1:]
    checks: list[tuple[str, bool, str]] = []

    def record(name: str, ok: bool, detail: str) -> None:
        checks.append((name, ok, detail))
        status = "PASS" if ok else "FAIL"
        print(f"[{status}] {name}: {detail}")

    check_rc = _run(["check"]).returncode
    record("encoder_check_rc", check_rc == 0, f"rc={check_rc}")

    detect = _run(["detect"])
    try:
        payload = json.loads(detect.stdout or "{}")
    except json.JSONDecodeError as exc:
        record("detect_json", False, f"invalid json: {exc}")
    else:
        record("detect_json", bool(payload.get("video")), f"video={payload.get('video')} audio={payload.get('audio')}")

    presets = _run(["presets"])
    try:
        groups = set(json.loads(presets.stdout or "{}"))
    except json.JSONDecodeError as exc:
        record("presets_json", False, f"invalid json: {exc}")
    else:
        missing = sorted(REQUIRED_PRESET_GROUPS - groups)
        record("presets_json", not missing, "all groups present" if not missing else f"missing={','.join(missing)}")

    with tempfile.TemporaryDirectory() as tmp:
        output = Path(tmp) / "smoke.mp4"
        preview = _run(["args", str(output), "--input", "screen"])
        tokens = shlex.split(preview.stdout)
        ordered = preview.returncode == 0 and len(tokens) > 2 and tokens[1] == "-y" and tokens[-1] == str(output)
        record("args_order", ordered, preview.stdout.strip() or preview.stderr.strip())

        if want_record:
            rec = _run(["record", str(output), "--input", "screen", "--duration", "2"], timeout=20.0)
            size = output.stat().st_size if output.exists() else 0
            record("record_rc", rec.returncode == 0, f"rc={rec.returncode} stderr={rec.stderr.strip()[-200:]}")
            record("record_output", size > 0, f"bytes={size}")

    failed = [name for (name, ok, _detail) in checks if not ok]
    if failed:
        print(f"\nResult: FAIL ({len(failed)} checks failed)")
        return 1

    print(f"\nResult: PASS ({len(checks)} checks)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
