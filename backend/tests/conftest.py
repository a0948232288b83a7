import os
import sys
import tempfile
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

# Keep media written by route modules out of the working tree
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="photo-journal-media-"))

from domain.models import PageSize  # noqa: E402
from services.render_service import RenderedArtifact  # noqa: E402


class FakeRenderer:
    """Render service double that writes the HTML instead of a PDF."""

    def __init__(self, out_dir: Path, fail_render: bool = False, fail_share: bool = False):
        self.out_dir = out_dir
        self.fail_render = fail_render
        self.fail_share = fail_share
        self.documents: list[str] = []
        self.shared: list[str] = []
        self.discarded: list[RenderedArtifact] = []

    async def render(self, html_content: str, page_size: PageSize) -> RenderedArtifact:
        from domain.errors import RenderServiceError

        self.documents.append(html_content)
        if self.fail_render:
            raise RenderServiceError("print engine unavailable")
        path = self.out_dir / f".render-{len(self.documents)}.pdf"
        path.write_text(html_content, encoding="utf-8")
        return RenderedArtifact(path=path, page_size=page_size)

    async def share(self, artifact: RenderedArtifact, file_name: str) -> Path:
        from domain.errors import RenderServiceError

        if self.fail_share:
            raise RenderServiceError("sharing unavailable")
        dest = self.out_dir / f"{file_name}.pdf"
        artifact.path.replace(dest)
        self.shared.append(file_name)
        return dest

    def discard(self, artifact: RenderedArtifact) -> None:
        self.discarded.append(artifact)
        artifact.path.unlink(missing_ok=True)


@pytest.fixture
def fake_renderer(tmp_path):
    return FakeRenderer(tmp_path)


@pytest.fixture
def make_renderer(tmp_path):
    def _make(**kwargs):
        return FakeRenderer(tmp_path, **kwargs)
    return _make


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite database."""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from db import init_db

    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    init_db(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()
