import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docx import Document  # noqa: E402
from pypdf import PdfWriter  # noqa: E402

from cv_analyzer.core.errors import ExtractionFailed, UnsupportedFormat  # noqa: E402
from cv_analyzer.parsing.extract import TRUNCATION_MARKER, extract_document, resolve_format  # noqa: E402


class ExtractDocumentTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write_docx(self, name: str, paragraphs: list[str]) -> Path:
        path = self.tmp_dir / name
        document = Document()
        for paragraph in paragraphs:
            document.add_paragraph(paragraph)
        document.save(str(path))
        return path

    def test_docx_paragraphs_are_joined(self):
        path = self._write_docx("cv.docx", ["Jan Kowalski", "", "Python Developer"])
        extracted = extract_document(str(path))
        self.assertEqual(extracted.source_format, "docx")
        self.assertEqual(extracted.raw_text, "Jan Kowalski\nPython Developer")
        self.assertEqual(extracted.length, len(extracted.raw_text))
        self.assertFalse(extracted.truncated)

    def test_long_text_is_truncated_with_marker(self):
        path = self._write_docx("long.docx", ["a" * 500])
        extracted = extract_document(str(path), max_chars=100)
        self.assertTrue(extracted.truncated)
        self.assertEqual(extracted.length, 101)
        self.assertTrue(extracted.raw_text.endswith(TRUNCATION_MARKER))

    def test_blank_pdf_yields_empty_text(self):
        path = self.tmp_dir / "blank.pdf"
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        with path.open("wb") as handle:
            writer.write(handle)
        extracted = extract_document(str(path))
        self.assertEqual(extracted.source_format, "pdf")
        self.assertEqual(extracted.raw_text, "")

    def test_malformed_pdf_raises_extraction_failed(self):
        path = self.tmp_dir / "broken.pdf"
        path.write_bytes(b"this is not a pdf")
        with self.assertRaises(ExtractionFailed):
            extract_document(str(path))

    def test_malformed_docx_raises_extraction_failed(self):
        path = self.tmp_dir / "broken.docx"
        path.write_bytes(b"PK\x03\x04 definitely not a zip")
        with self.assertRaises(ExtractionFailed):
            extract_document(str(path))

    def test_unsupported_extension(self):
        path = self.tmp_dir / "cv.txt"
        path.write_text("plain", encoding="utf-8")
        with self.assertRaises(UnsupportedFormat):
            extract_document(str(path))

    def test_declared_format_wins_over_extension(self):
        path = self._write_docx("upload.bin", ["Anna Nowak"])
        extracted = extract_document(str(path), "DOCX")
        self.assertEqual(extracted.raw_text, "Anna Nowak")

    def test_missing_file(self):
        with self.assertRaises(ExtractionFailed):
            extract_document(str(self.tmp_dir / "missing.pdf"))


class ResolveFormatTests(unittest.TestCase):
    def test_extension_is_case_insensitive(self):
        self.assertEqual(resolve_format("CV.PDF"), "pdf")

    def test_no_extension(self):
        with self.assertRaises(UnsupportedFormat):
            resolve_format("cv")


if __name__ == "__main__":
    unittest.main()
