import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import config  # noqa: E402
from db import dispose_db, get_session, init_db  # noqa: E402
from services.store_service import ensure_catalog  # noqa: E402


@pytest.fixture
def stores(monkeypatch):
    """Extra store views created at bootstrap."""
    monkeypatch.setattr(config, "EXTRA_STORES", "de:German,fr:French")
    return ["de", "fr"]


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cattree-test.sqlite'}"


@pytest.fixture
def session(db_url, stores):
    """A bootstrapped catalog: root (level 0), default category (level 1), stores."""
    init_db(db_url)
    s = get_session()
    ensure_catalog(s)
    yield s
    s.close()
    dispose_db()


@pytest.fixture
def fresh_session(session):
    """Open a second session for assertions that must not hit the identity map."""
    sessions = []

    def _open():
        s = get_session()
        sessions.append(s)
        return s

    yield _open
    for s in sessions:
        s.close()


@pytest.fixture
def write_csv(tmp_path):
    def _write(text: str, name: str = "categories.csv") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _drop_log_handlers():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_cattree", False):
            root.removeHandler(handler)
            handler.close()
