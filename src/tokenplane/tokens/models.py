"""Design token domain types shared by extraction, inference and drift detection.

Extraction produces immutable ``ExtractedToken`` records. Inference wraps
them in ``InferredToken`` without mutating the originals. Provenance and
other per-token facts live in ``TokenMetadata``: a tuple of typed
annotations (a pydantic discriminated union on ``kind``) plus an open
``extensions`` map for anything the annotation kinds do not cover.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class TokenCategory(str, Enum):
    """Design token categories."""

    COLOR = "color"
    TYPOGRAPHY = "typography"
    SPACING = "spacing"
    SHADOW = "shadow"
    BORDER = "border"
    ANIMATION = "animation"
    BREAKPOINT = "breakpoint"
    LAYOUT = "layout"
    Z_INDEX = "z-index"
    ACCESSIBILITY = "accessibility"


class TokenTier(str, Enum):
    """Position of a token in the design-system hierarchy."""

    PRIMITIVE = "primitive"  # raw palette / scale values
    SEMANTIC = "semantic"  # intent: primary, error, background
    COMPONENT = "component"  # scoped to a component: button, card


SourceFormat = Literal["stylesheet", "template", "script", "settings"]


# ============================================================================
# METADATA ANNOTATIONS
# ============================================================================


class AnnotationBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SourceAnnotation(AnnotationBase):
    """Where and how a value was found."""

    kind: Literal["source"] = "source"
    format: SourceFormat
    setting_type: str | None = None  # settings descriptor type, e.g. "color_background"
    selector: str | None = None  # property or declaration the value came from


class ReferenceAnnotation(AnnotationBase):
    """The value refers to another token instead of holding a literal."""

    kind: Literal["reference"] = "reference"
    target: str
    syntax: Literal["var", "settings"] = "var"


class SchemeAnnotation(AnnotationBase):
    """Value declared inside a named color scheme of settings data."""

    kind: Literal["scheme"] = "scheme"
    scheme: str
    role: str


class RampAnnotation(AnnotationBase):
    """One step of a generated color ramp."""

    kind: Literal["ramp"] = "ramp"
    base: str
    step: int
    lightness: float


class RoleAnnotation(AnnotationBase):
    """Free-form role label (e.g. "primary")."""

    kind: Literal["role"] = "role"
    role: str


Annotation = Annotated[
    SourceAnnotation | ReferenceAnnotation | SchemeAnnotation | RampAnnotation | RoleAnnotation,
    Field(discriminator="kind"),
]

_annotation_adapter: TypeAdapter[Any] = TypeAdapter(Annotation)

A = TypeVar("A", bound=AnnotationBase)

# Extension key holding annotations whose kind this version does not know
UNKNOWN_ANNOTATIONS_KEY = "unknown_annotations"


class TokenMetadata(BaseModel):
    """Typed annotations plus an open extension map."""

    model_config = ConfigDict(frozen=True)

    annotations: tuple[Annotation, ...] = ()
    extensions: dict[str, Any] = Field(default_factory=dict)

    def find(self, kind: type[A]) -> A | None:
        """First annotation of the given type, if any."""
        for annotation in self.annotations:
            if isinstance(annotation, kind):
                return annotation
        return None

    @property
    def reference(self) -> ReferenceAnnotation | None:
        return self.find(ReferenceAnnotation)

    @property
    def source(self) -> SourceAnnotation | None:
        return self.find(SourceAnnotation)

    def with_annotation(self, annotation: AnnotationBase) -> TokenMetadata:
        return self.model_copy(update={"annotations": (*self.annotations, annotation)})

    def to_json(self) -> dict[str, Any]:
        """Serialize for the registry's JSON column."""
        return self.model_dump(mode="json")

    @classmethod
    def from_json(cls, data: dict[str, Any] | None) -> TokenMetadata:
        """Load from the registry's JSON column.

        Annotations with an unknown or malformed ``kind`` are preserved under
        ``extensions["unknown_annotations"]`` instead of being dropped.
        """
        if not data:
            return cls()
        annotations: list[Any] = []
        unknown: list[Any] = []
        for raw in data.get("annotations") or []:
            try:
                annotations.append(_annotation_adapter.validate_python(raw))
            except ValidationError:
                unknown.append(raw)
        extensions = dict(data.get("extensions") or {})
        if unknown:
            extensions[UNKNOWN_ANNOTATIONS_KEY] = [
                *extensions.get(UNKNOWN_ANNOTATIONS_KEY, []),
                *unknown,
            ]
        return cls(annotations=tuple(annotations), extensions=extensions)


# ============================================================================
# TOKENS
# ============================================================================


@dataclass(frozen=True)
class ExtractedToken:
    """A raw value occurrence found in a source file."""

    id: str
    name: str | None  # declared name, when the source gives one
    category: TokenCategory
    value: str
    file_path: str
    line_number: int  # 1-based
    context: str
    metadata: TokenMetadata = field(default_factory=TokenMetadata)

    @property
    def is_reference(self) -> bool:
        """True when the value is itself a token reference (already tokenized)."""
        return self.metadata.reference is not None


@dataclass
class TokenGroup:
    """Extracted tokens judged to express the same design decision."""

    id: str
    category: TokenCategory
    tokens: list[ExtractedToken]
    pattern: str


@dataclass(frozen=True)
class ScalePattern:
    """A detected geometric progression."""

    base_value: float
    ratio: float
    values: tuple[float, ...]


@dataclass
class InferredToken:
    """An extracted token with a suggested name, group and tier."""

    token: ExtractedToken
    suggested_name: str
    confidence: float
    group_id: str
    tier: TokenTier
    inconsistencies: list[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.token.id

    @property
    def name(self) -> str | None:
        return self.token.name

    @property
    def category(self) -> TokenCategory:
        return self.token.category

    @property
    def value(self) -> str:
        return self.token.value

    @property
    def file_path(self) -> str:
        return self.token.file_path

    @property
    def line_number(self) -> int:
        return self.token.line_number
