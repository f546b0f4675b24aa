# Ensure 'backend/' is on sys.path so 'import roombook' works when pytest
# is started from the backend directory instead of the repository root.
from pathlib import Path
import sys

_BACKEND_ROOT = Path(__file__).resolve().parent
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))
