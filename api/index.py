"""
FastAPI wrapper for SEO Wizard - Vercel Serverless Function.

This module exposes keyword research, article generation, analysis,
export and saved-article management as a REST API. Request and response
bodies use the camelCase field names of the storage backend.
"""

import base64
import tempfile
from pathlib import Path
from typing import Literal, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from seo_wizard import __version__
from seo_wizard.analysis import render_highlight_html
from seo_wizard.config import SUPPORTED_LOCALES, WizardConfig
from seo_wizard.docx_writer import write_article_docx
from seo_wizard.errors import (
    GenerationError,
    NoContentError,
    PersistenceError,
    ValidationError,
)
from seo_wizard.export import to_markdown, to_plain_text
from seo_wizard.filename_generator import article_filename
from seo_wizard.keyword_research import SORTABLE_FIELDS, filter_and_sort
from seo_wizard.models import ARTICLE_LENGTHS, ArticleSet, GenerationSettings
from seo_wizard.schemas import ArticlePayload, KeywordSuggestionPayload
from seo_wizard.wizard import SeoWizard

app = FastAPI(
    title="SEO Wizard API",
    description="Keyword research and multi-locale SEO article generation",
    version=__version__,
)

# Enable CORS for all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


_wizard: Optional[SeoWizard] = None


def get_wizard() -> SeoWizard:
    """Return the process-wide wizard, built from the environment on first use."""
    global _wizard
    if _wizard is None:
        _wizard = SeoWizard(WizardConfig.from_env())
    return _wizard


# ============================================================================
# Request / response models
# ============================================================================

class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResearchRequest(CamelModel):
    """Keyword research request."""
    topic: str
    filter_text: str = ""
    sort_key: Optional[Literal["keyword", "type", "intent", "relevance"]] = "relevance"
    descending: bool = True


class GenerateRequest(CamelModel):
    """Article generation request."""
    topic: str
    length: Literal["very short", "short", "medium", "long", "very long", "epic"] = "medium"
    user_lsi_keywords: list[str] = Field(default_factory=list)
    locales: Optional[list[str]] = Field(None, description="Defaults to the configured article locales")
    include_table: bool = False
    include_in_article_images: bool = False


class AnalyzeRequest(CamelModel):
    """SEO analysis request for one article."""
    article: ArticlePayload
    primary_keyword: str
    user_lsi_keywords: list[str] = Field(default_factory=list)


class HighlightRequest(CamelModel):
    """Keyword highlighting request."""
    text: str
    primary_keyword: str
    lsi_keywords: list[str] = Field(default_factory=list)
    enabled: bool = True


class ExportRequest(CamelModel):
    """Article export request."""
    article: ArticlePayload
    format: Literal["markdown", "text", "docx"] = "markdown"
    primary_keyword: Optional[str] = None
    highlight: bool = False


class GenerationSettingsPayload(CamelModel):
    """Options a generation ran with."""
    length: Literal["very short", "short", "medium", "long", "very long", "epic"] = "medium"
    include_table: bool = False
    include_in_article_images: bool = False
    locales: list[str] = Field(default_factory=lambda: ["en-US"])


class SaveRequest(CamelModel):
    """Save request for a generated article set."""
    primary_keyword: str
    user_lsi_keywords: list[str] = Field(default_factory=list)
    articles: dict[str, ArticlePayload]
    generation_settings: GenerationSettingsPayload = Field(default_factory=GenerationSettingsPayload)
    thumbnail_url: Optional[str] = None
    search_intent: Optional[Literal["Informational", "Commercial", "Transactional", "Navigational"]] = None
    keyword_research_data: list[KeywordSuggestionPayload] = Field(default_factory=list)


class ThumbnailRequest(CamelModel):
    """Header image request for a generated article set."""
    articles: dict[str, ArticlePayload]
    primary_keyword: str
    upload: bool = True


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


def _to_article_set(articles: dict[str, ArticlePayload]) -> ArticleSet:
    return {locale: payload.to_model() for locale, payload in articles.items()}


# ============================================================================
# Error mapping
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NoContentError)
async def no_content_error_handler(request: Request, exc: NoContentError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    content = {"detail": str(exc)}
    locale = getattr(exc, "locale", None)
    if locale:
        content["locale"] = locale
    return JSONResponse(status_code=502, content=content)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    return JSONResponse(
        status_code=502,
        content={"detail": str(exc), "backendStatus": exc.status_code},
    )


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.post("/api/keywords/research")
async def research_keywords(request: ResearchRequest, wizard: SeoWizard = Depends(get_wizard)):
    """Research keywords for a topic, optionally filtered and sorted."""
    suggestions = await wizard.research(request.topic)
    shown = filter_and_sort(
        suggestions,
        request.filter_text,
        request.sort_key,
        descending=request.descending,
    )
    return {
        "topic": request.topic.strip(),
        "sortableFields": list(SORTABLE_FIELDS),
        "keywords": [s.to_dict() for s in shown],
    }


@app.post("/api/articles/generate")
async def generate_articles(request: GenerateRequest, wizard: SeoWizard = Depends(get_wizard)):
    """
    Generate the article in every requested locale.

    Fails with 502 if any locale fails; no partial set is returned.
    """
    articles = await wizard.generate(
        request.topic,
        request.length,
        request.user_lsi_keywords,
        locales=request.locales,
        include_table=request.include_table,
        include_in_article_images=request.include_in_article_images,
    )
    return {
        "articles": {locale: article.to_dict() for locale, article in articles.items()},
        "seoAnalysis": {
            locale: wizard.analyze(article, request.topic, request.user_lsi_keywords).to_dict()
            for locale, article in articles.items()
        },
    }


@app.post("/api/articles/analyze")
async def analyze_article(request: AnalyzeRequest, wizard: SeoWizard = Depends(get_wizard)):
    """Compute word count and keyword statistics for one article."""
    analysis = wizard.analyze(
        request.article.to_model(),
        request.primary_keyword,
        request.user_lsi_keywords,
    )
    return analysis.to_dict()


@app.post("/api/articles/highlight")
async def highlight_text(request: HighlightRequest, wizard: SeoWizard = Depends(get_wizard)):
    """Split text into plain and keyword-marked segments."""
    segments = wizard.highlight(
        request.text,
        request.primary_keyword,
        request.lsi_keywords,
        enabled=request.enabled,
    )
    return {
        "segments": [
            {"text": s.text, "kind": s.kind, "cssClass": s.css_class} for s in segments
        ],
        "html": render_highlight_html(segments),
    }


@app.post("/api/articles/export")
async def export_article(request: ExportRequest):
    """Render an article as Markdown, plain text or a base64 Word document."""
    article = request.article.to_model()

    if request.format == "markdown":
        return {"filename": article_filename(article, "md"), "content": to_markdown(article)}
    if request.format == "text":
        return {"filename": article_filename(article, "txt"), "content": to_plain_text(article)}

    filename = article_filename(article, "docx")
    with tempfile.TemporaryDirectory() as tmp_dir:
        output_path = write_article_docx(
            article,
            Path(tmp_dir) / filename,
            primary_keyword=request.primary_keyword,
            highlight=request.highlight,
        )
        document = output_path.read_bytes()

    return {
        "filename": filename,
        "documentBase64": base64.b64encode(document).decode("utf-8"),
    }


@app.post("/api/articles/save")
async def save_article(request: SaveRequest, wizard: SeoWizard = Depends(get_wizard)):
    """Assemble and save a generated article set."""
    settings = request.generation_settings
    payload = wizard.prepare_save(
        request.primary_keyword,
        request.user_lsi_keywords,
        _to_article_set(request.articles),
        GenerationSettings(
            length=settings.length,
            include_table=settings.include_table,
            include_in_article_images=settings.include_in_article_images,
            locales=settings.locales,
        ),
        thumbnail_url=request.thumbnail_url,
        search_intent=request.search_intent,
        keyword_research_data=[item.to_model() for item in request.keyword_research_data],
    )
    saved = await wizard.save(payload)
    return saved.to_dict()


@app.get("/api/articles/saved")
async def list_saved_articles(wizard: SeoWizard = Depends(get_wizard)):
    """List saved articles."""
    return [article.to_dict() for article in await wizard.list_saved()]


@app.delete("/api/articles/saved/{article_id}", status_code=204)
async def delete_saved_article(article_id: str, wizard: SeoWizard = Depends(get_wizard)):
    """Delete a saved article."""
    await wizard.delete_saved(article_id)


@app.post("/api/images/thumbnail")
async def create_thumbnail(request: ThumbnailRequest, wizard: SeoWizard = Depends(get_wizard)):
    """Generate a header image for the first locale's article."""
    url = await wizard.create_thumbnail(
        _to_article_set(request.articles),
        request.primary_keyword,
        upload=request.upload,
    )
    return {"url": url}


@app.get("/api/info")
async def api_info(wizard: SeoWizard = Depends(get_wizard)):
    """Get API information and usage instructions."""
    return {
        "name": "SEO Wizard API",
        "version": __version__,
        "uiLocale": wizard.config.ui_locale,
        "articleLocales": list(wizard.config.article_locales),
        "supportedLocales": list(SUPPORTED_LOCALES),
        "articleLengths": list(ARTICLE_LENGTHS),
        "endpoints": {
            "GET /api/health": "Health check",
            "POST /api/keywords/research": "Research keywords for a topic",
            "POST /api/articles/generate": "Generate an article in one or more locales",
            "POST /api/articles/analyze": "Keyword frequency and density for an article",
            "POST /api/articles/highlight": "Highlight primary and LSI keywords in text",
            "POST /api/articles/export": "Export an article as Markdown, text or Word",
            "POST /api/articles/save": "Save a generated article set",
            "GET /api/articles/saved": "List saved articles",
            "DELETE /api/articles/saved/{id}": "Delete a saved article",
            "POST /api/images/thumbnail": "Generate a header image",
            "GET /api/info": "This endpoint",
        },
        "documentation": "/docs",
        "openapi": "/openapi.json",
    }
