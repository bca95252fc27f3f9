"""API routes: thin controllers that delegate to the use cases."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query, Response

from repo_dossier.interface.dependencies import get_pdf_exporter, get_tree_walker
from repo_dossier.interface.schemas import ErrorResponse, PdfExportRequest, RepoNodeOut
from repo_dossier.services.pdf_export import PdfExporter
from repo_dossier.services.tree_walker import TreeWalker

router = APIRouter(prefix="/api")


@router.get(
    "/repos/{owner}/{name}/tree",
    response_model=list[RepoNodeOut],
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid owner or repository name"},
        401: {"model": ErrorResponse, "description": "Missing or invalid GitHub token"},
        404: {"model": ErrorResponse, "description": "Repository or path not found"},
        502: {"model": ErrorResponse, "description": "GitHub request failed"},
    },
)
async def repo_tree(
    owner: str,
    name: str,
    response: Response,
    path: str = Query(default=""),
    walker: TreeWalker = Depends(get_tree_walker),
) -> list[RepoNodeOut]:
    """List every file and directory in pre-order, siblings in GitHub's order."""
    result = await walker.walk(owner, name, path)
    if result.truncated:
        response.headers["X-Tree-Truncated"] = "true"
    return [RepoNodeOut(path=n.path, type=n.type, size=n.size) for n in result.nodes]


@router.post(
    "/export/pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        400: {"description": "markdown required"},
        500: {"description": "PDF rendering failed"},
    },
)
async def export_pdf(
    body: PdfExportRequest | None = Body(default=None),
    exporter: PdfExporter = Depends(get_pdf_exporter),
) -> Response:
    """Render a Markdown document to an A4 PDF attachment."""
    body = body or PdfExportRequest()
    document = await exporter.export(body.markdown, body.title)
    return Response(
        content=document.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{document.filename}"',
            "Cache-Control": "no-store",
        },
    )
