"""Theme components: groups of files that make up one UI piece."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

ComponentType = Literal["section", "snippet", "css_class", "js_component"]
SemanticType = Literal["card", "form", "navigation", "modal", "badge"]
FillPattern = Literal["currentColor", "hardcoded"]


@dataclass(frozen=True)
class ButtonTokenSet:
    """Declared values of one button variant's rule block."""

    background: str | None = None
    color: str | None = None
    border_color: str | None = None
    border_radius: str | None = None
    padding: str | None = None

    def is_empty(self) -> bool:
        return not any(
            (self.background, self.color, self.border_color, self.border_radius, self.padding)
        )


@dataclass(frozen=True)
class SemanticTokenSet:
    colors: list[str] = field(default_factory=list)
    spacing: list[str] = field(default_factory=list)
    typography: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class IconMetadata:
    name: str
    view_box: str | None
    fill_pattern: FillPattern


@dataclass
class DetectedComponent:
    """Files sharing a base name, e.g. ``sections/cart.liquid`` + ``assets/cart.css``.

    ``primary_file`` is the template when the group has one. ``variants``
    and ``button_tokens`` are only filled for button components; the
    semantic fields only when the content matches a known UI pattern.
    """

    name: str
    primary_file: str
    files: list[str]
    type: ComponentType
    directory: str
    variants: list[str] = field(default_factory=list)
    button_tokens: dict[str, ButtonTokenSet] = field(default_factory=dict)
    semantic_type: SemanticType | None = None
    semantic_tokens: SemanticTokenSet | None = None
    icon: IconMetadata | None = None

    def details(self) -> dict[str, Any]:
        """JSON-ready button, semantic and icon data; absent parts are omitted."""
        result: dict[str, Any] = {}
        if self.button_tokens:
            result["button_tokens"] = {
                variant: {k: v for k, v in asdict(tokens).items() if v is not None}
                for variant, tokens in self.button_tokens.items()
            }
        if self.semantic_type is not None:
            result["semantic_type"] = self.semantic_type
            if self.semantic_tokens is not None:
                result["semantic_tokens"] = asdict(self.semantic_tokens)
        if self.icon is not None:
            result["icon"] = asdict(self.icon)
        return result
