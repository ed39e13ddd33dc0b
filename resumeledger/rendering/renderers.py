"""Renderer protocol and registry for resume exports.

Renderers turn an immutable content object into document bytes.  They are
keyed by template id; unknown ids fall back to the registry default.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from resumeledger.core.hasher import canonical_json_bytes

logger = logging.getLogger(__name__)


@runtime_checkable
class Renderer(Protocol):
    """Protocol for export renderers.

    Any object with a ``template_id``, a ``media_type`` and a
    ``render(content) -> bytes`` method satisfies this protocol.
    """

    template_id: str
    media_type: str

    def render(self, content: dict[str, Any]) -> bytes:
        """Produce document bytes from resume content."""
        ...


class JsonRenderer:
    """Exports content as canonical JSON bytes."""

    template_id = "json"
    media_type = "application/json"

    def render(self, content: dict[str, Any]) -> bytes:
        return canonical_json_bytes(content)


class RendererRegistry:
    """Template id -> renderer lookup with a default fallback."""

    def __init__(self, default_template: str = JsonRenderer.template_id) -> None:
        self._renderers: dict[str, Renderer] = {}
        self._default = default_template
        self.register(JsonRenderer())

    def register(self, renderer: Renderer) -> None:
        if not isinstance(renderer, Renderer):
            raise TypeError(f"{renderer!r} does not implement the Renderer protocol")
        self._renderers[renderer.template_id] = renderer
        logger.debug("Registered renderer: %s", renderer.template_id)

    @property
    def template_ids(self) -> list[str]:
        return sorted(self._renderers)

    def get(self, template_id: str | None = None) -> Renderer:
        """Return the renderer for ``template_id``, or the default one."""
        if template_id and template_id in self._renderers:
            return self._renderers[template_id]
        if template_id:
            logger.debug("Unknown template %r, using %r", template_id, self._default)
        return self._renderers.get(self._default) or self._renderers[JsonRenderer.template_id]
