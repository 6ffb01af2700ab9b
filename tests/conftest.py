import sys
from pathlib import Path

# Make license_auditor importable from src/ when the project is not installed
SRC = Path(__file__).resolve().parents[1] / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))
