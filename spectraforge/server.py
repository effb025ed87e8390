"""SpectraForge -- Web API Server.

Wraps the generator and an in-memory gallery behind a small JSON API.
Handlers are plain ``def`` so FastAPI runs each render in its thread
pool; every request renders onto its own surface.

Launch:
    python -m spectraforge.server
    # or: uvicorn spectraforge.server:app --reload
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from spectraforge.art.compositor import STYLES
from spectraforge.art.palettes import PALETTES, RESOLUTIONS
from spectraforge.errors import InvalidParameter
from spectraforge.generator import (
    DEFAULT_PALETTE,
    DEFAULT_PROMPT,
    DEFAULT_RESOLUTION,
    DEFAULT_STYLE,
    ArtworkGenerator,
    GenerationRequest,
    surprise_request,
)
from spectraforge.history import ArtworkHistory

logger = logging.getLogger(__name__)

MAX_HISTORY = int(os.environ.get("SPECTRAFORGE_MAX_HISTORY", "200"))

app = FastAPI(title="SpectraForge")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Application state
# ---------------------------------------------------------------------------

class AppState:
    def __init__(self, max_history: int = MAX_HISTORY):
        self.generator = ArtworkGenerator()
        self.history = ArtworkHistory(max_items=max_history)

    def get_options_payload(self) -> dict:
        return {
            "styles": [
                {"name": name, "layers": [layer.value for layer in style.layers]}
                for name, style in STYLES.items()
            ],
            "palettes": [p.to_dict() for p in PALETTES.values()],
            "resolutions": [r.to_dict() for r in RESOLUTIONS.values()],
            "defaults": {
                "prompt": DEFAULT_PROMPT,
                "style": DEFAULT_STYLE,
                "palette": DEFAULT_PALETTE,
                "resolution": DEFAULT_RESOLUTION,
            },
        }


state = AppState()


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class GenerateRequest(BaseModel):
    prompt: str = DEFAULT_PROMPT
    style: str = DEFAULT_STYLE
    palette: str = DEFAULT_PALETTE
    resolution: str = DEFAULT_RESOLUTION
    seed_time: int | None = None


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------

@app.get("/api/options")
def api_options():
    return JSONResponse(state.get_options_payload())


@app.post("/api/generate")
def api_generate(req: GenerateRequest):
    if req.seed_time is None:
        request = GenerationRequest.now(req.prompt, req.style, req.palette, req.resolution)
    else:
        request = GenerationRequest(req.prompt, req.style, req.palette,
                                    req.resolution, req.seed_time)
    try:
        artwork = state.generator.generate(request)
    except InvalidParameter as e:
        logger.info("Rejected generate request: %s", e)
        return JSONResponse({"error": str(e), "field": e.kind}, status_code=400)
    if artwork is None:
        return JSONResponse({"error": "Drawing surface unavailable"}, status_code=503)
    state.history.add(artwork)
    return JSONResponse(artwork.to_dict(include_image=True))


@app.post("/api/surprise")
def api_surprise():
    req = surprise_request()
    return JSONResponse({"prompt": req.prompt, "style": req.style, "palette": req.palette})


@app.get("/api/history")
def api_history():
    return JSONResponse([a.to_dict() for a in state.history.items()])


@app.delete("/api/history")
def api_clear_history():
    state.history.clear()
    return JSONResponse({"cleared": True})


@app.get("/api/history/{artwork_id}")
def api_history_item(artwork_id: str):
    artwork = state.history.get(artwork_id)
    if artwork is None:
        return JSONResponse({"error": "Not found"}, status_code=404)
    return JSONResponse(artwork.to_dict(include_image=True))


@app.get("/api/history/{artwork_id}/download")
def api_download(artwork_id: str):
    artwork = state.history.get(artwork_id)
    if artwork is None:
        return JSONResponse({"error": "Not found"}, status_code=404)
    return Response(
        content=artwork.image,
        media_type=artwork.mime_type,
        headers={"Content-Disposition": f"attachment; filename={artwork.filename}"},
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    print("Starting server at http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
