from __future__ import annotations

import hashlib
from io import BytesIO
from pathlib import Path

from docx import Document
from pypdf import PdfReader

from .models import ParsedBlock, ParsedDoc, UnsupportedFormatError

_PDF_MAGIC = b"%PDF-"
_ZIP_MAGIC = b"PK\x03\x04"
_TEXT_EXTENSIONS = {".txt", ".md"}
SUPPORTED_EXTENSIONS = (".pdf", ".txt", ".md", ".docx")


def _compute_doc_id(text: str, filename: str) -> str:
    seed = text if text.strip() else filename
    digest = hashlib.sha256(seed.encode("utf-8", errors="ignore")).hexdigest()
    return digest[:16]


def _decode_utf8(content: bytes) -> str | None:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return None


def _parse_txt(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    text = _decode_utf8(content)
    if text is None:
        return content.decode("utf-8", errors="replace"), [], ["File is not valid UTF-8; undecodable bytes were replaced."]
    return text, [], []


def _parse_pdf(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []
    blocks: list[ParsedBlock] = []

    try:
        reader = PdfReader(BytesIO(content))
        text_parts: list[str] = []
        for index, page in enumerate(reader.pages, start=1):
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
                blocks.append(ParsedBlock(page=index, text=page_text))
        if not text_parts:
            warnings.append("No extractable text found in PDF.")
        return "\n".join(text_parts), blocks, warnings
    except Exception as exc:
        warnings.append(f"PDF parsing failed: {exc}")
        return "", blocks, warnings


def _parse_docx(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []
    blocks: list[ParsedBlock] = []

    try:
        document = Document(BytesIO(content))
        paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
        for paragraph_text in paragraphs:
            blocks.append(ParsedBlock(page=None, text=paragraph_text))
        if not paragraphs:
            warnings.append("No extractable text found in DOCX.")
        return "\n".join(paragraphs), blocks, warnings
    except Exception as exc:
        warnings.append(f"DOCX parsing failed: {exc}")
        return "", blocks, warnings


def detect_source_type(filename: str, content: bytes) -> str:
    """Pick a parser from the extension, falling back to the file signature."""
    extension = Path(filename or "").suffix.lower()

    if extension == ".pdf":
        if content.startswith(_PDF_MAGIC):
            return "pdf"
        # Renamed text files still decode cleanly; anything else goes to the PDF reader.
        return "txt" if _decode_utf8(content) is not None else "pdf"
    if extension == ".docx":
        return "docx"
    if extension in _TEXT_EXTENSIONS:
        return "txt"
    if not extension and content.startswith(_PDF_MAGIC):
        return "pdf"

    shown = extension or "(none)"
    raise UnsupportedFormatError(
        f"Unsupported file type '{shown}'. Supported types: {', '.join(SUPPORTED_EXTENSIONS)}"
    )


def extract_text(filename: str, content: bytes) -> ParsedDoc:
    source_type = detect_source_type(filename, content)
    if source_type == "pdf":
        text, blocks, warnings = _parse_pdf(content)
    elif source_type == "docx":
        if not content.startswith(_ZIP_MAGIC):
            text, blocks, warnings = "", [], ["DOCX file is not a valid Office document."]
        else:
            text, blocks, warnings = _parse_docx(content)
    else:
        text, blocks, warnings = _parse_txt(content)

    return ParsedDoc(
        doc_id=_compute_doc_id(text=text, filename=filename or ""),
        source_type=source_type,
        filename=filename or None,
        text=text,
        blocks=blocks,
        parsing_warnings=warnings,
        metadata={"size_bytes": len(content)},
    )


def parse_document(file_path: str) -> ParsedDoc:
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Input document not found: '{path}'")
    return extract_text(path.name, path.read_bytes())
