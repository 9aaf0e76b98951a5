"""Notion adapter: database queries, page metadata, and recursive block trees"""

import logging
from datetime import date
from typing import Any, Optional

import httpx
from notion_client import Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError
from notion_client.helpers import collect_paginated_api
from pydantic import BaseModel, Field, ValidationError

from notiondocx.config import Settings
from notiondocx.core.models import Block, BlockType, DateRange, ImageSource, Page, RichText, plain_text
from notiondocx.errors import SourceError, UnhandledBlockTypeError


logger = logging.getLogger(__name__)

_CLIENT_ERRORS = (HTTPResponseError, RequestTimeoutError, httpx.HTTPError)


class PageQuery(BaseModel):
    """Which database rows to export."""
    since: Optional[date] = None
    until: Optional[date] = None
    responsible: list[str] = Field(default_factory=list)           # any of these
    exclude_responsible: list[str] = Field(default_factory=list)   # none of these
    flag: Optional[str] = None                                      # checkbox property that must be ticked


def build_filter(query: PageQuery, settings: Settings) -> Optional[dict[str, Any]]:
    """Translate a PageQuery into a Notion database filter; None when nothing is filtered."""
    conditions: list[dict[str, Any]] = []
    if query.since:
        conditions.append({"property": settings.date_property, "date": {"on_or_after": query.since.isoformat()}})
    if query.until:
        conditions.append({"property": settings.date_property, "date": {"on_or_before": query.until.isoformat()}})

    wanted = [
        {"property": settings.responsible_property, "multi_select": {"contains": name}}
        for name in query.responsible
    ]
    if len(wanted) == 1:
        conditions.append(wanted[0])
    elif wanted:
        conditions.append({"or": wanted})

    conditions.extend(
        {"property": settings.responsible_property, "multi_select": {"does_not_contain": name}}
        for name in query.exclude_responsible
    )
    if query.flag:
        conditions.append({"property": query.flag, "checkbox": {"equals": True}})

    if not conditions:
        return None
    if len(conditions) == 1:
        return conditions[0]
    return {"and": conditions}


def _rich_text(tokens: list[dict]) -> list[RichText]:
    return [RichText.model_validate(t) for t in tokens or []]


def _multi_select(properties: dict, name: str) -> list[str]:
    return [option["name"] for option in (properties.get(name) or {}).get("multi_select", [])]


def parse_page(raw: dict, settings: Settings) -> Page:
    """Build a Page from a database row using the configured property names."""
    props = raw.get("properties", {})
    date_value = (props.get(settings.date_property) or {}).get("date")
    if not date_value:
        raise SourceError(f"Page {raw.get('id')} has no '{settings.date_property}' date")

    title_tokens = (props.get(settings.title_property) or {}).get("title", [])
    return Page(
        id=raw["id"],
        title=plain_text(_rich_text(title_tokens)),
        date=DateRange.model_validate(date_value),
        authors=_multi_select(props, settings.authors_property),
        responsible=_multi_select(props, settings.responsible_property),
    )


def _image_source(payload: dict) -> Optional[ImageSource]:
    kind = payload.get("type", "external")
    url = (payload.get(kind) or {}).get("url")
    return ImageSource(kind=kind, url=url) if url else None


def parse_block(raw: dict, children: list[Block] = None) -> Block:
    """Build a Block from an API block object. Unknown types are a hard error."""
    try:
        block_type = BlockType(raw["type"])
    except ValueError:
        raise UnhandledBlockTypeError(raw["type"], raw.get("id", "")) from None

    payload = raw.get(block_type.value) or {}
    return Block(
        id=raw.get("id", ""),
        type=block_type,
        has_children=raw.get("has_children", False),
        rich_text=_rich_text(payload.get("rich_text")),
        caption=_rich_text(payload.get("caption")),
        image=_image_source(payload) if block_type == BlockType.image else None,
        children=children or [],
    )


class NotionSource:
    """Pages and block trees from one Notion database."""

    def __init__(self, client: Client, settings: Settings):
        self.client = client
        self.settings = settings

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotionSource":
        if not settings.notion_token:
            raise ValueError("No Notion token configured (set NOTIONDOCX_NOTION_TOKEN)")
        return cls(Client(auth=settings.notion_token), settings)

    def query_pages(self, query: PageQuery) -> list[Page]:
        """Matching pages in ascending date order; rows without a date are skipped."""
        if not self.settings.database_id:
            raise ValueError("No database configured (set NOTIONDOCX_DATABASE_ID)")

        kwargs: dict[str, Any] = {
            "database_id": self.settings.database_id,
            "sorts": [{"property": self.settings.date_property, "direction": "ascending"}],
        }
        if (flt := build_filter(query, self.settings)) is not None:
            kwargs["filter"] = flt

        try:
            rows = collect_paginated_api(self.client.databases.query, **kwargs)
        except _CLIENT_ERRORS as e:
            raise SourceError(f"Database query failed: {e}") from e

        pages = []
        for raw in rows:
            try:
                pages.append(parse_page(raw, self.settings))
            except (SourceError, ValidationError) as e:
                logger.warning("Skipping page %s: %s", raw.get("id"), e)
        logger.info("Total pages: %d", len(pages))
        return pages

    def fetch_blocks(self, block_id: str) -> list[Block]:
        """Children of block_id with all descendants attached, in source order."""
        try:
            rows = collect_paginated_api(self.client.blocks.children.list, block_id=block_id)
        except _CLIENT_ERRORS as e:
            raise SourceError(f"Could not list children of {block_id}: {e}") from e

        blocks = []
        for raw in rows:
            if "type" not in raw:
                continue    # partial object: no access
            children = self.fetch_blocks(raw["id"]) if raw.get("has_children") else []
            try:
                blocks.append(parse_block(raw, children))
            except ValidationError as e:
                raise SourceError(f"Malformed block {raw.get('id')}: {e}") from e
        logger.debug("parent %s: fetched %d children", block_id, len(blocks))
        return blocks
