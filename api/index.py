"""ASGI entry point for hosts that import `handler` from api/index.py."""
import sys
from pathlib import Path

# Allow importing booru_sidebar without installing the project
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from booru_sidebar.main import app  # noqa: E402

handler = app
