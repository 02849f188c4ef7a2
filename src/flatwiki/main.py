"""FlatWiki FastAPI application."""

import logging

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from flatwiki.config import Settings, settings
from flatwiki.core.identity import parse_identity
from flatwiki.core.models import FRONT_PAGE, Account, Page
from flatwiki.core.presenter import PagePresenter
from flatwiki.core.routing import Action, is_valid_title, parse_route
from flatwiki.core.storage import (
    FileStorage,
    FrontPageProtectedError,
    InvalidTitleError,
    PageNotFoundError,
    Storage,
    StorageError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# Dependencies
def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_account(request: Request) -> Account | None:
    return parse_identity(request.headers, request.app.state.settings.identity_header)


# Template context helper
def get_context(request: Request, **kwargs) -> dict:
    """Create base context for templates."""
    return {
        "app_title": request.app.state.settings.app_title,
        **kwargs,
    }


async def render(
    request: Request, template_name: str, presenter: PagePresenter
) -> HTMLResponse:
    """Render a page through a template.

    Template failures become a plain 500 for this request only.
    """
    templates: Jinja2Templates = request.app.state.templates
    other_pages = await presenter.sibling_pages()
    try:
        return templates.TemplateResponse(
            request,
            template_name,
            get_context(request, page=presenter, other_pages=other_pages),
        )
    except TemplateError:
        logger.exception("Failed to render %s for %s", template_name, presenter.title)
        raise HTTPException(status_code=500, detail="Internal Server Error")


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=302)


# ========== Actions ==========


async def view_page(
    request: Request, storage: Storage, account: Account | None, title: str
):
    """View a page, or offer to create it."""
    page = await storage.get_page(title)
    if page is None:
        return redirect(f"/edit/{title}")
    page.account = account
    return await render(request, "view.html", PagePresenter(page, storage))


async def edit_page(
    request: Request, storage: Storage, account: Account | None, title: str
):
    """Edit form; a missing page starts out empty."""
    page = await storage.get_page(title)
    if page is None:
        page = Page(title=title)
    page.account = account
    return await render(request, "edit.html", PagePresenter(page, storage))


async def save_page(
    request: Request, storage: Storage, account: Account | None, title: str
):
    """Overwrite a page with the submitted body."""
    form = await request.form()
    if not title:
        title = str(form.get("title", ""))
        if not is_valid_title(title):
            raise HTTPException(status_code=400, detail="Invalid page title")
    body = str(form.get("body", ""))

    await storage.save_page(title, body.encode("utf-8"))
    return redirect(f"/view/{title}")


async def delete_page(
    request: Request, storage: Storage, account: Account | None, title: str
):
    """Delete a page. The front page is refused before anything is removed."""
    await storage.delete_page(title)
    return redirect("/")


async def admin_page(
    request: Request, storage: Storage, account: Account | None, title: str = ""
):
    """Admin screen; does not touch the store."""
    page = Page(title="Admin", account=account)
    return await render(request, "admin.html", PagePresenter(page, storage))


ACTIONS = {
    Action.VIEW: view_page,
    Action.EDIT: edit_page,
    Action.SAVE: save_page,
    Action.DELETE: delete_page,
    Action.ADMIN: admin_page,
}

# Actions that write to the store are POST only.
POST_ONLY = {Action.SAVE}


# ========== Routes ==========


@router.get("/")
async def root():
    """Send visitors to the front page."""
    return redirect(f"/view/{FRONT_PAGE}")


@router.get("/admin", response_class=HTMLResponse)
async def admin(
    request: Request,
    storage: Storage = Depends(get_storage),
    account: Account | None = Depends(get_account),
):
    return await admin_page(request, storage, account)


@router.get("/create/", response_class=HTMLResponse)
async def create(
    request: Request,
    storage: Storage = Depends(get_storage),
    account: Account | None = Depends(get_account),
):
    """Blank form for a new page."""
    page = Page(title="Create New Page", account=account)
    return await render(request, "create.html", PagePresenter(page, storage))


@router.api_route("/{action}/{title:path}", methods=["GET", "POST"])
async def dispatch(
    request: Request,
    storage: Storage = Depends(get_storage),
    account: Account | None = Depends(get_account),
):
    """Route /<action>/<title> paths to their action.

    Anything the route pattern rejects stops here with a 404.
    """
    route = parse_route(request.scope["path"])
    if not route:
        raise HTTPException(status_code=404, detail="Not Found")
    if route.action in POST_ONLY and request.method != "POST":
        raise HTTPException(
            status_code=405, detail="Method Not Allowed", headers={"Allow": "POST"}
        )
    return await ACTIONS[route.action](request, storage, account, route.title)


# ========== Error handling ==========

ERROR_STATUS = {
    FrontPageProtectedError: 400,
    InvalidTitleError: 400,
    PageNotFoundError: 404,
}


async def storage_error_handler(request: Request, exc: StorageError):
    status_code = ERROR_STATUS.get(type(exc), 500)
    if status_code == 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc
        )
    return PlainTextResponse(str(exc), status_code=status_code)


# ========== Application ==========


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the application around its own page store."""
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.app_title,
        debug=app_settings.debug,
        redirect_slashes=False,
    )
    app.state.settings = app_settings
    app.state.storage = FileStorage(app_settings.data_dir)
    app.state.templates = Jinja2Templates(directory=str(app_settings.templates_dir))

    app.mount(
        "/static", StaticFiles(directory=str(app_settings.static_dir)), name="static"
    )
    app.include_router(router)
    app.add_exception_handler(StorageError, storage_error_handler)
    return app
