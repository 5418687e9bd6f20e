"""PDF text extraction backed by pypdf."""

import io
from dataclasses import dataclass

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from recipe_intake.services.extraction import PdfExtractionError, PdfTextExtractor


@dataclass
class PypdfTextExtractor(PdfTextExtractor):
    """Reads the text layer of every page in order."""

    max_pages: int = 20

    def extract_text(self, pdf_bytes: bytes) -> str:
        """Return page texts joined by blank lines."""
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            pages = [
                reader.pages[index].extract_text() or ""
                for index in range(min(len(reader.pages), self.max_pages))
            ]
        except (PyPdfError, ValueError, OSError) as exc:
            raise PdfExtractionError(f"Could not read PDF: {exc}") from exc
        return "\n\n".join(page.strip() for page in pages if page.strip())
