"""
HTTP entrypoints for the content pipeline.

  POST /api/process     {"url": ...} → narration payload
  GET  /api/debug-tone  synthetic payload with a 3s tone
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from article_video.application.pipeline import NarrationPipeline
from article_video.config import Settings
from article_video.debug import debug_tone_payload
from article_video.errors import ExtractionError


def create_app(settings: Optional[Settings] = None, pipeline: Optional[NarrationPipeline] = None) -> FastAPI:
    if pipeline is None:
        from article_video.adapters import default_adapters

        settings = settings or Settings.from_env()
        pipeline = NarrationPipeline.from_adapters(default_adapters(settings), settings)

    app = FastAPI(title="Article Video", version="0.1.0")

    @app.post("/api/process")
    async def process(request: Request):
        try:
            body = await request.json()
        except ValueError:
            body = None
        url = body.get("url") if isinstance(body, dict) else None
        if not url:
            return JSONResponse({"error": "Missing url"}, status_code=400)

        try:
            payload = await run_in_threadpool(pipeline.process, url)
        except ExtractionError as e:
            return JSONResponse({"error": str(e)}, status_code=422)
        except Exception as e:
            print(f"❌ /api/process error: {e}")
            return JSONResponse({"error": str(e)}, status_code=500)
        return JSONResponse(payload.to_dict())

    @app.get("/api/debug-tone")
    def debug_tone():
        try:
            payload = debug_tone_payload()
        except Exception as e:
            return JSONResponse({"error": str(e)}, status_code=500)
        return JSONResponse(payload.to_dict())

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    return app
