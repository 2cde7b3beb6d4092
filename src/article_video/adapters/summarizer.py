"""
ISummarizer adapter with fallback support.
Priority: OpenAI-compatible chat API → local Ollama model → extractive scoring.
The extractive strategy is deterministic and always available.
"""

import re
from typing import List, Optional

import ollama
import requests

from article_video.domain.models import SummaryResult
from article_video.ports.interfaces import ISummarizer

DEFAULT_TARGET_WORDS = 130
POSITION_WEIGHT = 0.25
RAW_FALLBACK_CHARS = 1000

SYSTEM_PROMPT = "You are a concise, professional summarizer."

NARRATION_PROMPT = """You are a professional narrator. Convert the following article into a concise, engaging spoken narration suitable for a short video. Keep spoken output around 60-90 seconds (approx 110-150 words). Remove ads and irrelevant parts. Produce a single plain text paragraph ready for TTS.

Article:
{article}
"""

_SENTENCE_END = re.compile(r"[.?!]")
_SENTENCE_SPLIT = re.compile(r"(?<=[.?!])\s+")


def split_sentences(text: str) -> List[str]:
    """Split on sentence-ending punctuation followed by whitespace.

    Text without any sentence-ending punctuation has no sentences.
    """
    collapsed = re.sub(r"\s+", " ", text or "").strip()
    if not collapsed or not _SENTENCE_END.search(collapsed):
        return []
    return [s.strip() for s in _SENTENCE_SPLIT.split(collapsed) if s.strip()]


def count_words(text: str) -> int:
    return len(text.split())


def extractive_summarize(
    text: str,
    target_words: int = DEFAULT_TARGET_WORDS,
    position_weight: float = POSITION_WEIGHT,
) -> str:
    """
    Pick the highest-scoring sentences that fit in target_words, then restore source order.

    score = len(sentence) * (1 + position_weight * max(0, (N - i) / N))
    The best sentence is always kept, even if it alone exceeds the target.
    """
    sentences = split_sentences(text)
    if not sentences:
        return (text or "")[:RAW_FALLBACK_CHARS]

    n = len(sentences)
    scored = [
        (len(s) * (1 + position_weight * max(0.0, (n - i) / n)), i, s)
        for i, s in enumerate(sentences)
    ]
    scored.sort(key=lambda item: item[0], reverse=True)

    selected = []
    words = 0
    for _score, index, sentence in scored:
        wcount = count_words(sentence)
        if words + wcount <= target_words or not selected:
            selected.append((index, sentence))
            words += wcount
        if words >= target_words:
            break

    # Score order decides what is kept; the narration reads in source order
    selected.sort(key=lambda item: item[0])
    return " ".join(sentence for _index, sentence in selected)


class OpenAIChatModel:
    """OpenAI-compatible /chat/completions client. Returns None on any failure."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        base_url: str = "https://api.openai.com/v1",
        session: Optional[requests.Session] = None,
        timeout: float = 60,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self.timeout = timeout

    @property
    def name(self) -> str:
        return f"openai:{self.model}"

    def generate(self, article_text: str) -> Optional[str]:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        data = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": NARRATION_PROMPT.format(article=article_text)},
            ],
            "max_tokens": 480,
            "temperature": 0.6,
        }
        try:
            response = self._session.post(url, headers=headers, json=data, timeout=self.timeout)
        except requests.RequestException as e:
            print(f"  ⚠️  OpenAI call error: {e}")
            return None
        if not response.ok:
            print(f"  ⚠️  OpenAI summarize failed ({response.status_code}): {response.text[:300]}")
            return None
        try:
            result = response.json()
        except ValueError:
            print("  ⚠️  OpenAI returned a non-JSON body")
            return None
        choices = result.get("choices") or [{}]
        text = (choices[0].get("message") or {}).get("content") or ""
        return text.strip() or None


class OllamaChatModel:
    """Local model through the ollama client. Returns None on any failure."""

    def __init__(self, model: str, base_url: str = "http://localhost:11434", client=None):
        self.model = model
        self._client = client or ollama.Client(host=base_url)

    @property
    def name(self) -> str:
        return f"ollama:{self.model}"

    def generate(self, article_text: str) -> Optional[str]:
        try:
            response = self._client.generate(
                model=self.model,
                system=SYSTEM_PROMPT,
                prompt=NARRATION_PROMPT.format(article=article_text),
                options={"temperature": 0.6, "num_predict": 480},
            )
        except Exception as e:
            print(f"  ⚠️  Ollama error: {e}")
            return None
        text = response.get("response", "") or ""
        return text.strip() or None


class Summarizer(ISummarizer):
    """Language models first (in order), extractive scoring last."""

    def __init__(self, models: Optional[list] = None, position_weight: float = POSITION_WEIGHT):
        self.models = list(models or [])
        self.position_weight = position_weight

    @classmethod
    def from_settings(cls, settings) -> "Summarizer":
        models = []
        if settings.openai_api_key:
            models.append(OpenAIChatModel(
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                base_url=settings.openai_base_url,
            ))
        if settings.ollama_model:
            models.append(OllamaChatModel(settings.ollama_model, base_url=settings.ollama_base_url))
        return cls(models=models, position_weight=settings.summary_position_weight)

    def summarize(self, text: str, target_words: int = DEFAULT_TARGET_WORDS) -> SummaryResult:
        for model in self.models:
            summary = model.generate(text)
            if summary:
                print(f"  ✅ Summary from {model.name} ({count_words(summary)} words)")
                return SummaryResult(text=summary, used_language_model=True)
            print(f"  ⚠️  {model.name} gave no summary, trying next strategy")

        summary = extractive_summarize(text, target_words, self.position_weight)
        print(f"  ✅ Extractive summary ({count_words(summary)} words)")
        return SummaryResult(text=summary, used_language_model=False)
