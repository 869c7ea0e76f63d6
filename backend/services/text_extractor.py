import io
import os

import pdfplumber
from docx import Document

SUPPORTED_EXTENSIONS = frozenset({".pdf", ".docx", ".txt", ".md"})


class UnsupportedFileType(ValueError):
    pass


def extract_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages).strip()


def extract_text_docx(docx_bytes: bytes) -> str:
    """Extract all text from a DOCX file."""
    doc = Document(io.BytesIO(docx_bytes))
    return "\n".join(p.text for p in doc.paragraphs).strip()


def extract_resume_text(filename: str, content: bytes) -> str:
    """Dispatch on file extension. Plain text is decoded as UTF-8."""
    ext = os.path.splitext(filename.lower())[1]
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileType(f"Unsupported file type: {ext or filename}")
    if ext == ".pdf":
        return extract_text(content)
    if ext == ".docx":
        return extract_text_docx(content)
    return content.decode("utf-8", errors="replace").strip()
