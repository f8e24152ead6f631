"""Official form templates and field-name resolution.

Templates are revision-specific AcroForm PDFs supplied from outside the
engine. Field names drift between revisions (trailing digits, changed
capitalization, reordered words), so a logical field is looked up through
ordered tiers:

    1. exact         the declared name, case-sensitive
    2. ci_exact      the same name ignoring case
    3. substring     first field whose name contains the label, ignoring case
    4. all_words     first field whose name contains every word of the label

Tiers 2-4 only apply to lookups that allow a fallback. The first match
wins inside a tier, which keeps the ambiguity in field order rather than in
control flow. Every fallback hit is logged.
"""

import re
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Any, Mapping, Optional

import structlog
from pydantic import BaseModel, ConfigDict
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .config import TemplateConfig
from .exceptions import InvalidInputError, TemplateMissingError
from .models import FieldKind, FormKey, TemplateField

logger = structlog.get_logger()

_WORD = re.compile(r"[a-z0-9]+")

# /Ff bits for button fields
_FF_RADIO = 1 << 15
_FF_PUSHBUTTON = 1 << 16


def parse_form_key(value: Any) -> FormKey:
    """Return the ``FormKey`` for ``value`` or raise ``InvalidInputError``."""
    try:
        return FormKey(str(value).strip().lower())
    except ValueError:
        raise InvalidInputError(
            "Invalid form",
            field="form",
            value=value,
            constraint="Must be one of: short, long",
        ) from None


class MatchTier(str, Enum):
    EXACT = "exact"
    CASE_INSENSITIVE = "ci_exact"
    SUBSTRING = "substring"
    ALL_WORDS = "all_words"


class FieldMatch(BaseModel):
    field: TemplateField
    tier: MatchTier


class FormTemplate(BaseModel):
    """Template bytes for one form, loaded for a single request."""

    model_config = ConfigDict(frozen=True)

    form: FormKey
    content: bytes
    source: str = ""

    def reader(self) -> PdfReader:
        return PdfReader(BytesIO(self.content))

    def field_index(self) -> "FieldIndex":
        return FieldIndex.from_reader(self.reader())


class TemplateLoader:
    """Read official form templates from the configured directory."""

    def __init__(self, config: Optional[TemplateConfig] = None):
        self.config = config or TemplateConfig()

    def load(self, form: FormKey) -> FormTemplate:
        """Read and parse-check the template for ``form``.

        Raises:
            TemplateMissingError: The file is absent, unreadable or not a PDF.
        """
        path = self.config.path_for(form)
        try:
            content = path.read_bytes()
        except OSError as exc:
            logger.error("template_missing", form=form.value, path=str(path), error=str(exc))
            raise TemplateMissingError(form=form.value, path=str(path)) from exc

        try:
            PdfReader(BytesIO(content))
        except (PyPdfError, ValueError) as exc:
            logger.error("template_unreadable", form=form.value, path=str(path), error=str(exc))
            raise TemplateMissingError(form=form.value, path=str(path)) from exc

        logger.debug("template_loaded", form=form.value, path=str(path), size=len(content))
        return FormTemplate(form=form, content=content, source=str(path))

    @classmethod
    def from_directory(cls, directory: Path) -> "TemplateLoader":
        return cls(TemplateConfig(directory=directory))


def _field_kind(field: Mapping[str, Any]) -> FieldKind:
    field_type = field.get("/FT")
    if field_type == "/Tx":
        return FieldKind.TEXT
    if field_type == "/Btn":
        flags = int(field.get("/Ff", 0) or 0)
        if flags & (_FF_RADIO | _FF_PUSHBUTTON):
            return FieldKind.OTHER
        return FieldKind.CHECKBOX
    return FieldKind.OTHER


def _on_state(field: Mapping[str, Any]) -> str:
    states = [str(s) for s in field.get("/_States_", []) if str(s) != "/Off"]
    return states[0] if states else "/Yes"


def _words(text: str) -> list[str]:
    return _WORD.findall(text.lower())


class FieldIndex:
    """Name to field lookup for one loaded template."""

    def __init__(self, fields: list[TemplateField]):
        self.fields = fields
        self._by_name = {f.name: f for f in fields}
        self._lowered = [(f.name.lower(), f) for f in fields]
        self._word_sets = [(set(_words(f.name)), f) for f in fields]

    @classmethod
    def from_reader(cls, reader: PdfReader) -> "FieldIndex":
        declared = reader.get_fields() or {}
        fields = []
        for name, field in declared.items():
            kind = _field_kind(field)
            fields.append(
                TemplateField(
                    name=name,
                    kind=kind,
                    on_state=_on_state(field) if kind is FieldKind.CHECKBOX else None,
                )
            )
        return cls(fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Optional[TemplateField]:
        return self._by_name.get(name)

    def resolve(self, label: str, *, fallback: bool = True) -> Optional[FieldMatch]:
        """Find the field for ``label``, or None to skip it."""
        label = (label or "").strip()
        if not label:
            return None

        exact = self._by_name.get(label)
        if exact is not None:
            return FieldMatch(field=exact, tier=MatchTier.EXACT)
        if not fallback:
            logger.debug("field_not_found", label=label)
            return None

        needle = label.lower()
        match = self._first(lambda name: name == needle, MatchTier.CASE_INSENSITIVE)
        if match is None:
            match = self._first(lambda name: needle in name, MatchTier.SUBSTRING)
        if match is None:
            wanted = set(_words(label))
            if wanted:
                for words, field in self._word_sets:
                    if wanted <= words:
                        match = FieldMatch(field=field, tier=MatchTier.ALL_WORDS)
                        break

        if match is None:
            logger.debug("field_not_found", label=label)
            return None
        logger.info(
            "field_fallback_match",
            label=label,
            field=match.field.name,
            tier=match.tier.value,
        )
        return match

    def _first(self, predicate, tier: MatchTier) -> Optional[FieldMatch]:
        for lowered, field in self._lowered:
            if predicate(lowered):
                return FieldMatch(field=field, tier=tier)
        return None
