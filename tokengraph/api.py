"""
FastAPI API layer for token conversion.

Provides REST endpoints for:
- Format discovery
- Conversion between DTCG JSON, CSS custom properties and SCSS
- Resolving a single token
- Validating the references of a document
"""

from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .codec import encode_json
from .config import APIConfig, ExportConfig
from .exceptions import ImportParseError, UnsupportedFormatError
from .exporters import EXPORTERS, get_exporter
from .graph import ResolutionError, TokenGraph
from .importers import IMPORTERS, get_importer
from .tokens import DesignToken


# Pydantic models for API
class IssueModel(BaseModel):
    """One problem found while importing."""

    location: str
    message: str


class ResolutionErrorModel(BaseModel):
    """A reference that could not be resolved."""

    path: str
    reference: str
    kind: str
    field: str = ""
    chain: list[str] = []
    message: str

    @classmethod
    def from_error(cls, error: ResolutionError) -> "ResolutionErrorModel":
        return cls(
            path=error.path,
            reference=error.reference,
            kind=error.kind.value,
            field=error.field,
            chain=list(error.chain),
            message=error.message,
        )


class FormatsResponse(BaseModel):
    import_formats: list[str]
    export_formats: list[str]


class ConvertRequest(BaseModel):
    """Request to convert a token document between formats."""

    source_format: str = Field(..., description="dtcg, dtcg-legacy, dtcg-resolver or css")
    target_format: str = Field(..., description="json, dtcg-resolver, css or scss")
    content: str
    path_separator: Optional[str] = None
    prefix: Optional[str] = None


class ConvertResponse(BaseModel):
    output: str
    errors: list[ResolutionErrorModel] = []


class ResolveRequest(BaseModel):
    """Request to resolve one token of a document."""

    source_format: str
    content: str
    path: str


class ResolveResponse(BaseModel):
    path: str
    type: Optional[str] = None
    value: Any = None
    errors: list[ResolutionErrorModel] = []
    error: Optional[ResolutionErrorModel] = None


class ValidateRequest(BaseModel):
    source_format: str
    content: str


class ValidateResponse(BaseModel):
    valid: bool
    token_count: int
    errors: list[ResolutionErrorModel] = []


def create_app(config: Optional[APIConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration for the API

    Returns:
        Configured FastAPI app
    """
    config = config or APIConfig()

    app = FastAPI(
        title=config.title,
        description="Convert and validate design token documents",
        version=config.version,
    )

    def load_graph(source_format: str, content: str) -> TokenGraph:
        if len(content.encode("utf-8")) > config.max_content_bytes:
            raise HTTPException(status_code=413, detail="Content too large")
        try:
            importer = get_importer(source_format)
        except UnsupportedFormatError as exc:
            raise HTTPException(status_code=400, detail=exc.message)
        try:
            return importer.parse(content)
        except ImportParseError as exc:
            raise HTTPException(
                status_code=422,
                detail={
                    "message": exc.message,
                    "issues": [IssueModel(location=i.location, message=i.message).model_dump() for i in exc.issues],
                },
            )

    # Health check
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": config.version}

    @app.get("/formats", response_model=FormatsResponse)
    async def list_formats():
        """Supported import and export format names."""
        return FormatsResponse(import_formats=sorted(IMPORTERS), export_formats=sorted(EXPORTERS))

    @app.post("/convert", response_model=ConvertResponse)
    async def convert(request: ConvertRequest):
        """Import a document and export it in another format."""
        options = {}
        if request.path_separator is not None:
            options["path_separator"] = request.path_separator
        if request.prefix is not None:
            options["prefix"] = request.prefix
        try:
            export_config = ExportConfig(**options)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

        if request.target_format not in EXPORTERS:
            raise HTTPException(status_code=400, detail=f"Unsupported format '{request.target_format}'")
        graph = load_graph(request.source_format, request.content)
        exporter = get_exporter(request.target_format, graph, export_config)
        output = exporter.export()
        return ConvertResponse(
            output=output,
            errors=[ResolutionErrorModel.from_error(e) for e in exporter.errors],
        )

    @app.post("/resolve", response_model=ResolveResponse)
    async def resolve_token(request: ResolveRequest):
        """Resolve one token to its literal value (DTCG JSON encoding)."""
        graph = load_graph(request.source_format, request.content)
        if not isinstance(graph.get(request.path), DesignToken):
            raise HTTPException(status_code=404, detail="Token not found")

        result = graph.resolve(request.path)
        if isinstance(result, ResolutionError):
            return ResolveResponse(path=request.path, error=ResolutionErrorModel.from_error(result))
        return ResolveResponse(
            path=request.path,
            type=result.type.value,
            value=encode_json(result.type, result.value),
            errors=[ResolutionErrorModel.from_error(e) for e in result.errors],
        )

    @app.post("/validate", response_model=ValidateResponse)
    async def validate(request: ValidateRequest):
        """Check every reference in a document."""
        graph = load_graph(request.source_format, request.content)
        errors = graph.validate()
        return ValidateResponse(
            valid=not errors,
            token_count=sum(1 for _ in graph.tokens()),
            errors=[ResolutionErrorModel.from_error(e) for e in errors],
        )

    return app
