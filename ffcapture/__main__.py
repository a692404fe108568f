"""Responsibility: Module launcher for `python -m ffcapture`."""

from .app import main


if __name__ == "__main__":
    raise SystemExit(main())
