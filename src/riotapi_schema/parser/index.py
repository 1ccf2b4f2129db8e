"""Endpoint index page parser."""

from pydantic import BaseModel

from riotapi_schema.errors import ParseError
from riotapi_schema.parser.markup import make_soup, text_of


class IndexEntry(BaseModel):
    """One endpoint listed on the index page."""

    name: str
    description: str = ""


def parse_index(markup: str) -> list[IndexEntry]:
    """Parse the API index page into endpoint names and short descriptions."""
    soup = make_soup(markup)

    entries = []
    for option in soup.select(".api_option"):
        name = (option.get("api-name") or "").strip()
        if not name:
            continue
        entries.append(IndexEntry(name=name, description=text_of(option.select_one(".api_desc"))))

    if not entries:
        raise ParseError("No endpoints (.api_option[api-name]) found on the index page")
    return entries
