"""
Word export for aligned Arabic/English segment pairs.

Layout:
- Landscape US Letter page, 0.5" margins
- Title pair: Arabic then English, centered, bold, underlined
- Body pairs: two-column table, Arabic right-aligned (RTL runs), English left-aligned

Uses python-docx for document assembly; packing happens in memory so a
failed export never leaves a file behind.
"""

import io
import os
import re
from dataclasses import dataclass
from typing import List, Optional

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.enum.table import WD_CELL_VERTICAL_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_UNDERLINE
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, Twips

from aligner.config import EXPORT_LABEL
from aligner.core.exceptions import ExportFailedError
from aligner.core.models import SegmentPair, split_title
from aligner.utils.file_utils import get_unique_output_path, write_bytes_atomically
from aligner.utils.unified_logger import UnifiedLogger, LogType, get_logger

FONT_FAMILY = 'Arial'
FONT_SIZE_PT = 24

# Page geometry in twips (1 inch = 1440 twips)
PAGE_WIDTH_TWIPS = 15840   # 11"
PAGE_HEIGHT_TWIPS = 12240  # 8.5"
PAGE_MARGIN_TWIPS = 720    # 0.5"
TABLE_WIDTH_TWIPS = PAGE_WIDTH_TWIPS - 2 * PAGE_MARGIN_TWIPS
COLUMN_WIDTH_TWIPS = TABLE_WIDTH_TWIPS // 2

MAX_FILENAME_LENGTH = 50
DEFAULT_FILENAME = 'translation'
DOCX_EXTENSION = '.docx'
DOCX_MEDIA_TYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'

_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9\s-]')
_WHITESPACE_RUN = re.compile(r'\s+')


def to_title_case(text: str) -> str:
    """Lower-case ``text`` then capitalize the first letter of each space-separated word."""
    if not text:
        return ''
    return ' '.join(word[:1].title() + word[1:] for word in text.lower().split(' '))


def sanitize_filename(name: str) -> str:
    """Reduce ``name`` to letters, digits, single spaces and hyphens (max 50 chars)."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub('', name or '').strip()
    cleaned = _WHITESPACE_RUN.sub(' ', cleaned)
    cleaned = cleaned[:MAX_FILENAME_LENGTH].rstrip()
    return cleaned or DEFAULT_FILENAME


def build_export_filename(english_title: str) -> str:
    """``"<Sanitized Title> (Arabic + English).docx"``"""
    base = sanitize_filename(to_title_case(english_title))
    return f"{base} {EXPORT_LABEL}{DOCX_EXTENSION}"


@dataclass
class ExportedDocument:
    """A packed Word document ready to be downloaded."""
    filename: str
    content: bytes
    media_type: str = DOCX_MEDIA_TYPE

    @property
    def size(self) -> int:
        return len(self.content)


class WordExporter:
    """Builds the bilingual two-column Word document."""

    def __init__(self, logger: Optional[UnifiedLogger] = None):
        self.logger = logger or get_logger("exporter")

    def build_document(self, pairs: List[SegmentPair]) -> Document:
        """
        Assemble the document for a non-empty pair sequence.

        Args:
            pairs: Ordered pairs; pairs[0] is the title

        Returns:
            python-docx Document (not yet saved)
        """
        title_pair, body_pairs = split_title(pairs)
        if title_pair is None:
            raise ValueError("Cannot build a document without a title pair")

        doc = Document()
        self._apply_page_geometry(doc)

        # The default document starts with no paragraphs; content order matters
        arabic_title = doc.add_paragraph()
        arabic_title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        self._add_run(arabic_title, title_pair.arabic, rtl=True, bold=True, underline=True)

        english_title = doc.add_paragraph()
        english_title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        self._add_run(english_title, to_title_case(title_pair.english), bold=True, underline=True)

        # Spacer
        doc.add_paragraph('')

        if body_pairs:
            self._add_body_table(doc, body_pairs)

        return doc

    def pack(self, doc: Document) -> bytes:
        """Serialize the document into .docx bytes."""
        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    def export(self, pairs: List[SegmentPair]) -> Optional[ExportedDocument]:
        """
        Build and pack the document for download.

        Returns:
            ExportedDocument, or None when there is nothing to export

        Raises:
            ExportFailedError: If assembly or packing fails
        """
        if not pairs:
            self.logger.error("No data available to export.", LogType.EXPORT)
            return None

        filename = build_export_filename(pairs[0].english)
        try:
            content = self.pack(self.build_document(pairs))
        except Exception as e:
            self.logger.error("Error generating Word document", LogType.ERROR_DETAIL, {
                'details': f"{type(e).__name__}: {e}"
            })
            raise ExportFailedError(context={'cause': str(e), 'filename': filename}) from e

        self.logger.info(f"Word document ready: {filename}", LogType.EXPORT, {
            'filename': filename,
            'rows': len(pairs) - 1,
            'size_bytes': len(content)
        })
        return ExportedDocument(filename=filename, content=content)

    def archive(self, exported: ExportedDocument, output_dir: str) -> str:
        """
        Write an already packed document into ``output_dir``.

        Existing files are never overwritten; a numeric suffix is added instead.

        Raises:
            ExportFailedError: If the file cannot be written
        """
        output_path = os.path.join(output_dir, exported.filename)
        try:
            output_path = get_unique_output_path(output_path)
            written = write_bytes_atomically(output_path, exported.content)
        except OSError as e:
            self.logger.error("Error writing Word document", LogType.ERROR_DETAIL, {
                'details': f"{output_path}: {e}"
            })
            raise ExportFailedError(context={'cause': str(e), 'path': output_path}) from e

        self.logger.info(f"Word document archived to {written}", LogType.EXPORT)
        return written

    def _apply_page_geometry(self, doc: Document) -> None:
        section = doc.sections[0]
        section.orientation = WD_ORIENT.LANDSCAPE
        section.page_width = Twips(PAGE_WIDTH_TWIPS)
        section.page_height = Twips(PAGE_HEIGHT_TWIPS)
        section.top_margin = Twips(PAGE_MARGIN_TWIPS)
        section.bottom_margin = Twips(PAGE_MARGIN_TWIPS)
        section.left_margin = Twips(PAGE_MARGIN_TWIPS)
        section.right_margin = Twips(PAGE_MARGIN_TWIPS)

    def _add_body_table(self, doc: Document, body_pairs: List[SegmentPair]) -> None:
        table = doc.add_table(rows=0, cols=2)
        table.style = 'Table Grid'
        table.autofit = False
        self._set_table_width(table, TABLE_WIDTH_TWIPS)
        for column in table.columns:
            column.width = Twips(COLUMN_WIDTH_TWIPS)

        for pair in body_pairs:
            row = table.add_row()
            self._prevent_row_split(row)
            arabic_cell, english_cell = row.cells
            self._fill_cell(arabic_cell, pair.lines('arabic'), rtl=True,
                            alignment=WD_ALIGN_PARAGRAPH.RIGHT)
            self._fill_cell(english_cell, pair.lines('english'), rtl=False,
                            alignment=WD_ALIGN_PARAGRAPH.LEFT)

    def _fill_cell(self, cell, lines: List[str], rtl: bool, alignment) -> None:
        """One paragraph per line so embedded line breaks survive."""
        cell.width = Twips(COLUMN_WIDTH_TWIPS)
        cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.TOP
        for index, line in enumerate(lines):
            # A new cell already holds one empty paragraph
            paragraph = cell.paragraphs[0] if index == 0 else cell.add_paragraph()
            paragraph.alignment = alignment
            self._add_run(paragraph, line.strip(), rtl=rtl)

    def _add_run(self, paragraph, text: str, rtl: bool = False,
                 bold: bool = False, underline: bool = False):
        run = paragraph.add_run(text)
        font = run.font
        font.name = FONT_FAMILY
        font.size = Pt(FONT_SIZE_PT)
        if bold:
            font.bold = True
            font.cs_bold = True
        if underline:
            font.underline = WD_UNDERLINE.SINGLE
        if rtl:
            font.rtl = True
        self._apply_complex_script_font(run)
        return run

    @staticmethod
    def _apply_complex_script_font(run) -> None:
        """Arabic is a complex script: Word reads w:cs / w:szCs, not w:ascii / w:sz."""
        rPr = run._element.get_or_add_rPr()
        rFonts = rPr.get_or_add_rFonts()
        rFonts.set(qn('w:cs'), FONT_FAMILY)
        sz = rPr.find(qn('w:sz'))
        if sz is not None and rPr.find(qn('w:szCs')) is None:
            szCs = OxmlElement('w:szCs')
            szCs.set(qn('w:val'), str(FONT_SIZE_PT * 2))
            sz.addnext(szCs)

    @staticmethod
    def _set_table_width(table, width_twips: int) -> None:
        tblPr = table._tbl.tblPr
        tblW = tblPr.find(qn('w:tblW'))
        if tblW is None:
            tblW = OxmlElement('w:tblW')
            tblPr.append(tblW)
        tblW.set(qn('w:w'), str(width_twips))
        tblW.set(qn('w:type'), 'dxa')

    @staticmethod
    def _prevent_row_split(row) -> None:
        trPr = row._tr.get_or_add_trPr()
        cant_split = OxmlElement('w:cantSplit')
        trPr.append(cant_split)
