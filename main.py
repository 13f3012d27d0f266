"""PySide6 entrypoint: launches the stitcher window.

The theme comes from the STITCHER_THEME environment variable when set,
otherwise from the choice stored in QSettings by the theme selector.
"""

import sys

try:
    from stitcher.main import main
except Exception as exc:
    # Provide a clear error if imports fail due to PYTHONPATH issues
    raise RuntimeError("Failed to import stitcher modules. Ensure project root is on PYTHONPATH.") from exc


if __name__ == "__main__":
    sys.exit(main())
