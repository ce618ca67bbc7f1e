"""Bootstrap module for CLI path setup.

This module handles sys.path manipulation before typing_arena imports,
allowing clean import structure in cli.py without E402 warnings.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))
