"""Data models for FlatWiki."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

FRONT_PAGE = "FrontPage"


class Account(BaseModel):
    """Identity of the requester, as forwarded by an upstream proxy."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str = ""
    email: str = ""
    given_name: str = ""
    middle_name: str = ""
    surname: str = ""
    full_name: str = ""
    groups: set[str] = Field(default_factory=set)

    @model_validator(mode="before")
    @classmethod
    def null_means_default(cls, data: Any) -> Any:
        """A null field keeps its default instead of rejecting the account."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Page(BaseModel):
    """Represents a wiki page.

    The account is attached per request for rendering and is never persisted.
    """

    title: str
    body: bytes = b""
    account: Account | None = None

    @property
    def is_front_page(self) -> bool:
        return self.title == FRONT_PAGE
