import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt adapter tests run headless.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
