"""Renderer collaborator — turns resume content into document bytes."""

from resumeledger.rendering.renderers import JsonRenderer, Renderer, RendererRegistry

__all__ = ["JsonRenderer", "Renderer", "RendererRegistry"]
