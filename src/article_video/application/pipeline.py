"""
Narration pipeline – single responsibility: orchestrate fetch → extract →
summarize → image → TTS into a NarrationPayload.
Depends only on port interfaces (SOLID – Dependency Inversion).

Degradable steps (language model, TTS) never raise; they lower the quality
flags on the payload. Only FetchError and ExtractionError leave this module.
"""

from article_video.application.duration import DurationEstimator
from article_video.domain.models import MIN_ARTICLE_CHARS, NarrationPayload
from article_video.errors import ExtractionError
from article_video.ports.interfaces import (
    IArticleExtractor,
    IImageResolver,
    IPageFetcher,
    ISpeechSynthesizer,
    ISummarizer,
)

EXTRACTION_FAILED_MESSAGE = "Failed to extract article text or article too short."


class NarrationPipeline:
    """
    Turns one article URL into a narration payload.
    All dependencies are injected (ports); no concrete implementations here.
    """

    def __init__(
        self,
        *,
        fetcher: IPageFetcher,
        extractor: IArticleExtractor,
        summarizer: ISummarizer,
        synthesizer: ISpeechSynthesizer,
        image_resolver: IImageResolver,
        estimator: DurationEstimator,
        target_words: int = 130,
        min_article_chars: int = MIN_ARTICLE_CHARS,
    ):
        self._fetcher = fetcher
        self._extractor = extractor
        self._summarizer = summarizer
        self._synthesizer = synthesizer
        self._images = image_resolver
        self._estimator = estimator
        self._target_words = target_words
        self._min_article_chars = min_article_chars

    @classmethod
    def from_adapters(cls, adapters: dict, settings) -> "NarrationPipeline":
        return cls(
            fetcher=adapters["fetcher"],
            extractor=adapters["extractor"],
            summarizer=adapters["summarizer"],
            synthesizer=adapters["synthesizer"],
            image_resolver=adapters["image_resolver"],
            estimator=DurationEstimator(settings.max_duration, settings.narration_wpm),
            target_words=settings.summary_target_words,
        )

    def process(self, url: str) -> NarrationPayload:
        print("=" * 60)
        print(f"Processing article: {url}")
        print("=" * 60)

        print("\n[1/5] Fetching article...")
        html = self._fetcher.fetch_text(url)

        print("\n[2/5] Extracting text and image...")
        extraction = self._extractor.extract(html, url)
        if not extraction.is_usable(self._min_article_chars):
            print(f"❌ Only {len(extraction.article_text)} characters of text found")
            raise ExtractionError(EXTRACTION_FAILED_MESSAGE)
        print(f"  Article length: {len(extraction.article_text)} characters")

        print("\n[3/5] Summarizing...")
        summary = self._summarizer.summarize(extraction.article_text, self._target_words)
        estimated = self._estimator.estimate_from_words(summary.text)

        print("\n[4/5] Resolving image...")
        image_url = self._images.resolve(extraction.image_url, summary.text)
        print(f"  Image: {image_url}")

        print("\n[5/5] Synthesizing narration...")
        speech = self._synthesizer.synthesize(summary.text)

        payload = NarrationPayload(
            summary=summary.text,
            estimated_duration_sec=estimated,
            image_url=image_url,
            audio_data=speech.audio_data,
            audio_format=speech.audio_format,
            used_language_model=summary.used_language_model,
            tts_fallback=speech.fallback,
        )
        print(f"\n✅ Narration ready (~{estimated:.0f}s, language model: {payload.used_language_model}, "
              f"tts fallback: {payload.tts_fallback})")
        return payload
