"""Viewer components."""

from orgcharm.components.document_view import DocumentView

__all__ = [
    "DocumentView",
]
