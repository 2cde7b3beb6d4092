from article_video.adapters.extractor import ArticleExtractor
from article_video.domain.models import ExtractionResult

BASE = "https://news.example.com/world/story.html"


def extract(html):
    return ArticleExtractor().extract(html, BASE)


def test_article_container_wins_over_main_and_sitewide():
    html = """
    <html><body>
      <main><p>Main paragraph that should never be used.</p></main>
      <article><p>First article paragraph.</p><p>  </p><p>Second article paragraph.</p></article>
      <p>A very very very long sitewide paragraph that is longer than anything in the article body.</p>
    </body></html>
    """
    result = extract(html)
    assert result.article_text == "First article paragraph.\n\nSecond article paragraph."


def test_empty_article_falls_through_to_main():
    html = "<article><div>No paragraphs here</div></article><main><p>From main.</p></main>"
    assert extract(html).article_text == "From main."


def test_main_paragraphs_keep_document_order():
    p50, p10, p200 = "a" * 50, "b" * 10, "c" * 200
    html = f"<html><body><main><p>{p50}</p><p>{p10}</p><p>{p200}</p></main></body></html>"
    assert extract(html).article_text == "\n\n".join([p50, p10, p200])


def test_sitewide_keeps_ten_longest_by_length():
    paragraphs = ["x" * n for n in range(1, 13)]
    html = "".join(f"<div><p>{p}</p></div>" for p in paragraphs)
    text = extract(html).article_text
    expected = sorted(paragraphs, key=len, reverse=True)[:10]
    assert text.split("\n\n") == expected


def test_script_and_style_are_ignored():
    html = "<article><script>var p = '<p>fake</p>';</script><style>p{}</style><p>Real text.</p></article>"
    assert extract(html).article_text == "Real text."


def test_open_graph_image_first():
    html = """
    <head>
      <meta name="twitter:image" content="https://cdn.example.com/tw.jpg">
      <meta property="og:image" content=" https://cdn.example.com/og.jpg ">
    </head>
    <body><img src="/inline.jpg"></body>
    """
    assert extract(html).image_url == "https://cdn.example.com/og.jpg"


def test_twitter_image_when_no_open_graph():
    html = '<meta property="twitter:image" content="https://cdn.example.com/tw.jpg"><img src="/a.jpg">'
    assert extract(html).image_url == "https://cdn.example.com/tw.jpg"


def test_first_img_resolved_against_base_url():
    assert extract('<img src="../img/photo.jpg">').image_url == "https://news.example.com/img/photo.jpg"
    assert extract('<img data-src="/lazy.png">').image_url == "https://news.example.com/lazy.png"


def test_no_image_found():
    assert extract("<p>Just text.</p>").image_url is None


def test_usable_threshold():
    assert not ExtractionResult(article_text="  short  ").is_usable()
    assert not ExtractionResult(article_text="x" * 119).is_usable()
    assert ExtractionResult(article_text="x" * 120).is_usable()
