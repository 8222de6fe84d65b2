"""docs-miner core library.

Crawls a hierarchical documentation site, classifies each page by the type
label embedded in its markup, rebuilds the breadcrumb hierarchy and renders
the part of it that leads to sample code pages as a Markdown outline.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
