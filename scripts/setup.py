#!/usr/bin/env python3
"""Install fontseek in editable mode and fetch the Chromium build Playwright drives.

    python scripts/setup.py          # runtime only
    python scripts/setup.py --test   # plus pytest
"""

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def install_steps(with_tests: bool):
    target = f"{ROOT}[test]" if with_tests else str(ROOT)
    return [
        ("Installing fontseek", [sys.executable, "-m", "pip", "install", "-e", target]),
        ("Installing Chromium", [sys.executable, "-m", "playwright", "install", "chromium"]),
    ]


def main():
    if sys.version_info < (3, 8):
        print("❌ Python 3.8+ required")
        return 1

    for description, cmd in install_steps("--test" in sys.argv[1:]):
        print(f"📦 {description}...")
        result = subprocess.run(cmd, capture_output=True, text=True)
        if result.returncode != 0:
            print(f"❌ {description} failed\n{result.stderr}")
            return result.returncode

    print("✅ Ready: fontseek inspect <url> --point 320,240")
    return 0


if __name__ == "__main__":
    sys.exit(main())
