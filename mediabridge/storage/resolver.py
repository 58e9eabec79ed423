"""Storage location policy for published files.

Images land under Pictures, everything else under Documents, grouped by the
app namespace and an optional caller subfolder.

Examples:
    >>> resolver = StoragePathResolver(app_namespace="MediaBridge")
    >>> resolver.resolve("application/pdf", "Invoices").relative_path
    'Documents/MediaBridge/Invoices'
    >>> resolver.resolve("image/png").relative_path
    'Pictures/MediaBridge'
"""

from __future__ import annotations

from mediabridge.storage.models import ContentCategory, ResolvedDestination


def classify_mime_type(mime_type: str | None) -> ContentCategory:
    """Map a mime type to its shared storage category.

    Empty or unknown mime types fall back to Documents.
    """
    if mime_type and mime_type.strip().lower().startswith("image/"):
        return ContentCategory.PICTURES
    return ContentCategory.DOCUMENTS


class StoragePathResolver:
    """Pure destination resolution, no I/O and no failure modes.

    Attributes:
        app_namespace: Folder inserted between the category root and subfolder.
    """

    def __init__(self, app_namespace: str = "") -> None:
        self.app_namespace = app_namespace.strip("/")

    def resolve(self, mime_type: str | None, subfolder: str | None = None) -> ResolvedDestination:
        """Resolve the destination for a file.

        Args:
            mime_type: Mime type of the payload.
            subfolder: Optional folder appended verbatim below the namespace.

        Returns:
            ResolvedDestination with category and relative path.
        """
        category = classify_mime_type(mime_type)
        segments = [category.value]
        if self.app_namespace:
            segments.append(self.app_namespace)
        subfolder = (subfolder or "").strip("/")
        if subfolder:
            segments.append(subfolder)
        return ResolvedDestination(category=category, relative_path="/".join(segments))
