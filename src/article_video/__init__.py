"""
Article Video – turn a web article URL into a short narrated MP4.

Use from Python:
  from article_video.config import Settings
  from article_video.adapters import default_adapters
  from article_video.application import NarrationPipeline, VideoCreator

  settings = Settings.from_env()
  adapters = default_adapters(settings)
  payload = NarrationPipeline.from_adapters(adapters, settings).process(url)
  VideoCreator.from_adapters(adapters, settings).create(payload, "article_video.mp4")

Or from the shell:
  article-video make https://example.com/story -o story.mp4
  article-video serve --port 8000
"""

__version__ = "0.1.0"
