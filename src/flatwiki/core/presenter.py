"""Derived views of a page for templates."""

from markupsafe import Markup

from flatwiki.core.markup import render_markdown
from flatwiki.core.models import Page
from flatwiki.core.storage import Storage


class PagePresenter:
    """Wraps a page with the values templates display."""

    def __init__(self, page: Page, storage: Storage):
        self.page = page
        self.storage = storage

    @property
    def title(self) -> str:
        return self.page.title

    @property
    def account(self):
        return self.page.account

    def body_text(self) -> str:
        """Body decoded as text, for the edit form."""
        return self.page.body.decode("utf-8", errors="replace")

    def body_html(self) -> Markup:
        """Body rendered from Markdown. Not escaped again by Jinja2."""
        return Markup(render_markdown(self.page.body))

    def is_front_page(self) -> bool:
        return self.page.is_front_page

    async def sibling_pages(self) -> list[Page]:
        """Title-only stubs for every stored page; bodies are not loaded."""
        titles = await self.storage.list_titles()
        return [Page(title=title) for title in titles]
