from collections.abc import Callable, Iterable

from editorsync.scanner.markup import extract_image_urls
from editorsync.scanner.models import ScanDocument, UrlReferences

UrlExtractor = Callable[[str | None], list[str]]


def build_url_map(
    documents: Iterable[ScanDocument],
    extract_urls: UrlExtractor = extract_image_urls,
) -> dict[str, UrlReferences]:
    """Map each unique URL to the distinct documents that reference it.

    Explicit reference fields are collected before markup URLs. Insertion order
    follows the first time each URL is seen.
    """
    url_map: dict[str, UrlReferences] = {}
    for document in documents:
        urls = [url for url in document.reference_urls if url]
        urls.extend(extract_urls(document.markup))
        for url in urls:
            url_map.setdefault(url, UrlReferences()).add(document.id, document.label)
    return url_map
