"""Write catalog assignments into an official form template.

The filler never raises for a single field: a label that resolves to no
field is skipped, a text value aimed at a checkbox (or the reverse) is
skipped with a warning, and a write the PDF library rejects is logged and
skipped. Flattening runs last on a fresh copy of the filled document; if it
fails, the unflattened document is returned.
"""

from io import BytesIO
from typing import Optional

import structlog
from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError

from .config import PdfConfig
from .form_catalog import FieldAssignment
from .models import FieldKind, FieldWrite, FilledForm
from .pdf_template import FieldIndex, FormTemplate

logger = structlog.get_logger()

CHECKBOX_OFF = "/Off"

DEFAULT_INSTRUCTION_PAGES = 3

# Raised by pypdf for malformed widgets and unexpected field values
_WRITE_ERRORS = (PyPdfError, KeyError, ValueError, TypeError, AttributeError)


def strip_leading_pages(writer: PdfWriter, count: int) -> int:
    """Remove up to ``count`` leading pages. Returns how many were removed."""
    to_remove = min(max(count, 0), len(writer.pages))
    for _ in range(to_remove):
        del writer.pages[0]
    return to_remove


def _to_bytes(writer: PdfWriter) -> bytes:
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class OfficialFormFiller:
    """Fill one template with one party's field assignments."""

    def __init__(
        self,
        config: Optional[PdfConfig] = None,
        instruction_pages: int = DEFAULT_INSTRUCTION_PAGES,
    ):
        self.config = config or PdfConfig()
        self.instruction_pages = instruction_pages

    def fill(
        self,
        template: FormTemplate,
        assignments: list[FieldAssignment],
        *,
        flatten: Optional[bool] = None,
    ) -> FilledForm:
        """Return the filled form for ``template``.

        Args:
            template: Template loaded for this request.
            assignments: Ordered field assignments; later writes to the same
                field replace earlier ones.
            flatten: Override ``PdfConfig.flatten`` for this call.
        """
        reader = template.reader()
        index = FieldIndex.from_reader(reader)
        writer = PdfWriter(clone_from=reader)
        removed = strip_leading_pages(writer, self.instruction_pages)
        pages = list(writer.pages)

        values: dict[str, str] = {}
        writes = [self._write(writer, pages, index, a, values) for a in assignments]
        writer.set_need_appearances_writer(True)
        content = _to_bytes(writer)

        flattened = False
        if flatten if flatten is not None else self.config.flatten:
            flat = self._flatten(content, values)
            if flat is not None:
                content, flattened = flat, True

        logger.info(
            "official_form_filled",
            form=template.form.value,
            template_fields=len(index),
            fields_written=sum(1 for w in writes if w.written),
            pages_removed=removed,
            flattened=flattened,
        )
        return FilledForm(
            form=template.form,
            content=content,
            page_count=len(pages),
            flattened=flattened,
            writes=writes,
        )

    def _write(
        self,
        writer: PdfWriter,
        pages: list,
        index: FieldIndex,
        assignment: FieldAssignment,
        values: dict[str, str],
    ) -> FieldWrite:
        match = index.resolve(assignment.label, fallback=assignment.fuzzy)
        if match is None:
            return FieldWrite(label=assignment.label)

        field = match.field
        if field.kind is not assignment.kind:
            logger.warning(
                "field_kind_mismatch",
                label=assignment.label,
                field=field.name,
                expected=assignment.kind.value,
                actual=field.kind.value,
            )
            return FieldWrite(label=assignment.label, field_name=field.name, tier=match.tier.value)

        if assignment.kind is FieldKind.CHECKBOX:
            value = (field.on_state or "/Yes") if assignment.checked else CHECKBOX_OFF
        else:
            value = assignment.text

        try:
            writer.update_page_form_field_values(
                pages, {field.name: value}, auto_regenerate=False
            )
        except _WRITE_ERRORS as exc:
            logger.warning(
                "field_write_failed",
                label=assignment.label,
                field=field.name,
                error=str(exc),
            )
            return FieldWrite(label=assignment.label, field_name=field.name, tier=match.tier.value)

        values[field.name] = value
        return FieldWrite(
            label=assignment.label,
            field_name=field.name,
            tier=match.tier.value,
            value=value,
            written=True,
        )

    def _flatten(self, content: bytes, values: dict[str, str]) -> Optional[bytes]:
        """Bake field values into page content. Returns None on failure."""
        try:
            writer = PdfWriter(clone_from=PdfReader(BytesIO(content)))
            if values:
                writer.update_page_form_field_values(
                    list(writer.pages), values, auto_regenerate=False, flatten=True
                )
            writer.remove_annotations(subtypes="/Widget")
            return _to_bytes(writer)
        except Exception as exc:
            logger.warning("form_flatten_failed", error=str(exc))
            return None
