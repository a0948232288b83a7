"""
PDF rendering service.

Renders an assembled HTML document to PDF with WeasyPrint and publishes
the result under the exports directory, where the API offers it for
download.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from domain.errors import RenderServiceError
from domain.models import PageSize
from services.document_assembler import generate_print_css
from storage.file_storage import FileStorage

logger = logging.getLogger(__name__)


@dataclass
class RenderedArtifact:
    """Handle to a rendered, not yet published, document."""
    path: Path
    page_size: PageSize


class RenderService(Protocol):
    async def render(self, html_content: str, page_size: PageSize) -> RenderedArtifact:
        ...

    async def share(self, artifact: RenderedArtifact, file_name: str) -> Path:
        ...

    def discard(self, artifact: RenderedArtifact) -> None:
        ...


def write_pdf(html_content: str, page_size: PageSize, output_path: Path, base_url: str) -> Path:
    """Render HTML to a PDF file with WeasyPrint."""
    from weasyprint import HTML, CSS

    output_path.parent.mkdir(parents=True, exist_ok=True)
    html_doc = HTML(string=html_content, base_url=base_url)
    css_doc = CSS(string=generate_print_css(page_size))
    html_doc.write_pdf(str(output_path), stylesheets=[css_doc])
    return output_path


class WeasyPrintRenderService:
    """Renders with WeasyPrint into a temporary file, then publishes it by name."""

    def __init__(self, storage: FileStorage):
        self.storage = storage

    async def render(self, html_content: str, page_size: PageSize) -> RenderedArtifact:
        tmp_path = self.storage.get_exports_dir() / f".render-{uuid.uuid4().hex}.pdf"
        try:
            await asyncio.to_thread(
                write_pdf, html_content, page_size, tmp_path, str(self.storage.media_root)
            )
        except Exception as exc:
            tmp_path.unlink(missing_ok=True)
            raise RenderServiceError(f"PDF rendering failed: {exc}") from exc
        logger.info("[render_service] Rendered %s (%s bytes)", tmp_path.name, tmp_path.stat().st_size)
        return RenderedArtifact(path=tmp_path, page_size=page_size)

    async def share(self, artifact: RenderedArtifact, file_name: str) -> Path:
        try:
            published = await asyncio.to_thread(self.storage.publish_export, artifact.path, file_name)
        except OSError as exc:
            raise RenderServiceError(f"Publishing {file_name}.pdf failed: {exc}") from exc
        logger.info("[render_service] Published %s", published)
        return published

    def discard(self, artifact: RenderedArtifact) -> None:
        artifact.path.unlink(missing_ok=True)
