import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def people():
    return [
        {"id": 1, "name": "Alice", "role": "admin", "joined": "2021-03-01"},
        {"id": 2, "name": "bob", "role": "user", "joined": "2020-11-15"},
        {"id": 3, "name": "Carol", "role": "user", "joined": "2022-01-09"},
        {"id": 4, "name": "dave", "role": "guest", "joined": None},
        {"id": 5, "name": "Eve", "role": "admin", "joined": "2019-07-30"},
    ]
