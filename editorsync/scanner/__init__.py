from editorsync.scanner.httpx_prober import HttpxProber
from editorsync.scanner.markup import extract_image_urls
from editorsync.scanner.scanner import ResourceHealthScanner, build_scanner

__all__ = ["HttpxProber", "ResourceHealthScanner", "build_scanner", "extract_image_urls"]
