"""IArticleExtractor adapter: DOM heuristics over BeautifulSoup."""

from typing import Callable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from article_video.domain.models import ExtractionResult
from article_video.ports.interfaces import IArticleExtractor

SITEWIDE_PARAGRAPH_LIMIT = 10
PARAGRAPH_SEPARATOR = "\n\n"


def absolutize_url(base_url: str, value: str) -> str:
    try:
        return urljoin(base_url, value)
    except ValueError:
        return value


def _paragraph_texts(container) -> List[str]:
    texts = []
    for p in container.find_all("p"):
        text = p.get_text().strip()
        if text:
            texts.append(text)
    return texts


def _meta_content(soup: BeautifulSoup, key: str, attrs=("property", "name")) -> Optional[str]:
    for attr in attrs:
        tag = soup.find("meta", attrs={attr: key})
        if tag and tag.get("content") and tag["content"].strip():
            return tag["content"].strip()
    return None


class ArticleExtractor(IArticleExtractor):
    """
    Text and image each come from an ordered list of strategies.
    A strategy returns a value, or None to let the next one try.
    """

    def __init__(self, sitewide_limit: int = SITEWIDE_PARAGRAPH_LIMIT):
        self.sitewide_limit = sitewide_limit

    def extract(self, html: str, base_url: str) -> ExtractionResult:
        soup = BeautifulSoup(html or "", "html.parser")
        for tag in soup(["script", "style", "noscript"]):
            tag.decompose()

        text_strategies: List[Callable[[BeautifulSoup], Optional[str]]] = [
            self._text_from_article,
            self._text_from_main,
            self._text_sitewide,
        ]
        article_text = ""
        for strategy in text_strategies:
            found = strategy(soup)
            if found:
                article_text = found
                break

        image_strategies: List[Callable[[BeautifulSoup, str], Optional[str]]] = [
            self._image_from_open_graph,
            self._image_from_twitter_card,
            self._image_from_first_img,
        ]
        image_url = None
        for strategy in image_strategies:
            found = strategy(soup, base_url)
            if found:
                image_url = found.strip()
                break

        return ExtractionResult(article_text=article_text.strip(), image_url=image_url or None)

    # Text strategies

    def _text_from_container(self, soup: BeautifulSoup, name: str) -> Optional[str]:
        container = soup.find(name)
        if container is None:
            return None
        texts = _paragraph_texts(container)
        return PARAGRAPH_SEPARATOR.join(texts) if texts else None

    def _text_from_article(self, soup: BeautifulSoup) -> Optional[str]:
        return self._text_from_container(soup, "article")

    def _text_from_main(self, soup: BeautifulSoup) -> Optional[str]:
        return self._text_from_container(soup, "main")

    def _text_sitewide(self, soup: BeautifulSoup) -> Optional[str]:
        texts = _paragraph_texts(soup)
        if not texts:
            return None
        longest = sorted(texts, key=len, reverse=True)[: self.sitewide_limit]
        return PARAGRAPH_SEPARATOR.join(longest)

    # Image strategies

    def _image_from_open_graph(self, soup: BeautifulSoup, base_url: str) -> Optional[str]:
        return _meta_content(soup, "og:image", attrs=("property", "name"))

    def _image_from_twitter_card(self, soup: BeautifulSoup, base_url: str) -> Optional[str]:
        return _meta_content(soup, "twitter:image", attrs=("name", "property"))

    def _image_from_first_img(self, soup: BeautifulSoup, base_url: str) -> Optional[str]:
        img = soup.find("img")
        if img is None:
            return None
        src = img.get("src") or img.get("data-src")
        if not src:
            return None
        return absolutize_url(base_url, src)
