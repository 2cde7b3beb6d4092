"""IImageResolver adapter: scraped image, else a keyword photo search."""

from typing import Optional
from urllib.parse import quote

from article_video.ports.interfaces import IImageResolver

IMAGE_SEARCH_URL = "https://source.unsplash.com/1280x720/?{keywords}"
KEYWORD_COUNT = 6


class ImageResolver(IImageResolver):

    def __init__(self, search_url: str = IMAGE_SEARCH_URL, keyword_count: int = KEYWORD_COUNT):
        self.search_url = search_url
        self.keyword_count = keyword_count

    def resolve(self, scraped_url: Optional[str], summary: str) -> str:
        if scraped_url:
            return scraped_url
        keywords = ",".join((summary or "").split()[: self.keyword_count])
        return self.search_url.format(keywords=quote(keywords, safe="!*'()"))
