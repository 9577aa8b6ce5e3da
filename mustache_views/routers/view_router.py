"""Page routes: render a mustache view per request path."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from mustache_views.dependencies import get_view_resolver
from mustache_views.resolver import MustacheViewResolver

router = APIRouter()

INDEX_VIEW = "index"


# Plain def: template reads block, so FastAPI runs these in its threadpool.
@router.get("/", response_class=HTMLResponse)
def index(request: Request, resolver: MustacheViewResolver = Depends(get_view_resolver)):
    """Render the index view."""
    view = resolver.resolve_view_name(INDEX_VIEW)
    return view.to_response(dict(request.query_params))


@router.get("/{view_name:path}", response_class=HTMLResponse)
def render_view(view_name: str, request: Request, resolver: MustacheViewResolver = Depends(get_view_resolver)):
    """Render ``view_name`` with the query parameters as its model."""
    view = resolver.resolve_view_name(view_name)
    return view.to_response(dict(request.query_params))
