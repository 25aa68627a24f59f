"""Run the tetrasphere viewer from a source checkout: `python main.py --depth 4`."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from api.viewer import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
