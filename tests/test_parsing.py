import sys
import tempfile
import unittest
from io import BytesIO
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docx import Document  # noqa: E402
from pypdf import PdfWriter  # noqa: E402

from app.parsing.models import UnsupportedFormatError  # noqa: E402
from app.parsing.parse import detect_source_type, extract_text, parse_document  # noqa: E402


class ParsingFacadeTests(unittest.TestCase):
    def test_parse_txt_returns_stable_parsed_doc(self):
        content = "Line one\n- Bullet item\nLine three"
        tmp_file = tempfile.NamedTemporaryFile("w", suffix=".txt", delete=False, encoding="utf-8")
        tmp_path = Path(tmp_file.name)
        try:
            tmp_file.write(content)
            tmp_file.close()

            parsed = parse_document(str(tmp_path))
            self.assertEqual(parsed.source_type, "txt")
            self.assertEqual(parsed.text, content)
            self.assertTrue(parsed.doc_id)
            self.assertEqual(parsed.doc_id, parse_document(str(tmp_path)).doc_id)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def test_parse_document_missing_path(self):
        with self.assertRaises(FileNotFoundError):
            parse_document("/nonexistent/resume.txt")


class ExtractTextTests(unittest.TestCase):
    def test_markdown_is_read_as_text(self):
        parsed = extract_text("resume.md", b"# Jane Doe\nPython developer")
        self.assertEqual(parsed.source_type, "txt")
        self.assertIn("Python developer", parsed.text)

    def test_unsupported_extension_is_rejected(self):
        with self.assertRaises(UnsupportedFormatError) as ctx:
            extract_text("resume.exe", b"MZ\x90\x00")
        self.assertIn("Unsupported file type '.exe'", str(ctx.exception))

    def test_missing_extension_without_pdf_signature_is_rejected(self):
        with self.assertRaises(UnsupportedFormatError):
            detect_source_type("resume", b"just some words")

    def test_pdf_signature_without_extension(self):
        self.assertEqual(detect_source_type("upload", b"%PDF-1.7\n..."), "pdf")

    def test_renamed_text_file_with_pdf_extension(self):
        parsed = extract_text("resume.pdf", b"Jane Doe\nSoftware Engineer")
        self.assertEqual(parsed.source_type, "txt")
        self.assertEqual(parsed.text, "Jane Doe\nSoftware Engineer")

    def test_blank_pdf_reports_warning(self):
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        buffer = BytesIO()
        writer.write(buffer)

        parsed = extract_text("resume.pdf", buffer.getvalue())
        self.assertEqual(parsed.source_type, "pdf")
        self.assertTrue(parsed.is_empty)
        self.assertIn("No extractable text found in PDF.", parsed.parsing_warnings)

    def test_docx_paragraphs_are_extracted(self):
        document = Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("Senior Data Analyst")
        buffer = BytesIO()
        document.save(buffer)

        parsed = extract_text("resume.docx", buffer.getvalue())
        self.assertEqual(parsed.source_type, "docx")
        self.assertEqual(parsed.text, "Jane Doe\nSenior Data Analyst")
        self.assertEqual(len(parsed.blocks), 2)

    def test_docx_extension_with_wrong_content(self):
        parsed = extract_text("resume.docx", b"not a zip archive")
        self.assertTrue(parsed.is_empty)
        self.assertTrue(parsed.parsing_warnings)


if __name__ == "__main__":
    unittest.main()
