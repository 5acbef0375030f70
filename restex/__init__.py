"""
RESTEX - Resume Template Engine for LaTeX

Template processing and validation core for a resume rewriting application.

Architecture:
- Templating Context: template catalog, package resolution, content transformation
- Rendering Context: toolchain checks, validation, compilation and preview rasterization

Caller-facing functions live in restex.api.
"""

__version__ = "0.1.0"
