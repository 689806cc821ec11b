"""
FastAPI web server — feature listing and per-request sketch generation.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from firmatabuilder.catalog import CatalogResult, catalog_to_dict, load_catalog
from firmatabuilder.config import settings
from firmatabuilder.errors import FirmataBuilderError
from firmatabuilder.generator import generate_sketch, sketch_filename
from firmatabuilder.selection import UserSelection, make_selection


log = logging.getLogger("firmatabuilder.server")


# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="FirmataBuilder")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def _catalog() -> CatalogResult:
    """The shipped catalog is static; load it once per process."""
    return load_catalog()


# ── Models ─────────────────────────────────────────────────────────

class GenerateRequest(BaseModel):
    filename: str = Field(default_factory=lambda: settings.default_filename)
    baud: int = Field(default_factory=lambda: settings.default_baud)
    features: list[str] = Field(default_factory=list)


def _selection(req: GenerateRequest) -> UserSelection:
    try:
        return make_selection(req.features, filename=req.filename, baud=req.baud)
    except FirmataBuilderError as exc:
        raise HTTPException(400, str(exc)) from exc


def _render(req: GenerateRequest) -> tuple[UserSelection, str]:
    selection = _selection(req)
    try:
        text = generate_sketch(_catalog().by_name(), selection)
    except FirmataBuilderError as exc:
        raise HTTPException(400, str(exc)) from exc
    log.info("Generated %s for %s", sketch_filename(selection), list(selection.selected_features))
    return selection, text


# ── Routes ─────────────────────────────────────────────────────────

@app.get("/api/features")
def list_features():
    """Return every feature in the catalog plus any catalog problems."""
    return catalog_to_dict(_catalog())


@app.get("/api/defaults")
def get_defaults():
    """Defaults the UI pre-fills the form with."""
    return {
        "filename": settings.default_filename,
        "baud": settings.default_baud,
        "allowed_baud_rates": list(settings.allowed_baud_rates),
        "features": settings.default_features,
    }


@app.post("/api/generate")
def generate(req: GenerateRequest):
    """Generate a sketch and return it inline."""
    selection, text = _render(req)
    return {"filename": sketch_filename(selection), "sketch": text}


@app.post("/api/generate/download")
def generate_download(req: GenerateRequest):
    """Generate a sketch and return it as a file attachment."""
    selection, text = _render(req)
    return Response(
        content=text,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{sketch_filename(selection)}"'},
    )


def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("firmatabuilder.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
