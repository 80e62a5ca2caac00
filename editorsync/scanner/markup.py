from html.parser import HTMLParser


class _ImageSourceCollector(HTMLParser):
    """Collects the src attribute of every <img> tag."""

    def __init__(self) -> None:
        super().__init__()
        self.sources: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag != "img":
            return
        src = dict(attrs).get("src")
        if src and src.strip():
            self.sources.append(src.strip())


def extract_image_urls(markup: str | None) -> list[str]:
    """Return image URLs embedded in HTML, in document order."""
    if not markup:
        return []
    collector = _ImageSourceCollector()
    collector.feed(markup)
    collector.close()
    return collector.sources
