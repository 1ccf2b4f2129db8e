"""Small BeautifulSoup helpers shared by the page parsers."""

from bs4 import BeautifulSoup, Tag

PARSER = "html.parser"


def make_soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, PARSER)


def text_of(tag: Tag | None, sep: str = " ") -> str:
    """Element text with whitespace collapsed. Empty for ``None``."""
    if tag is None:
        return ""
    if not sep:
        return tag.get_text().strip()
    return " ".join(tag.get_text(sep).split())


def section(heading: Tag, stop: tuple[str, ...] = ()) -> list[Tag]:
    """Siblings following a heading, up to the next heading of the same level (or any in ``stop``)."""
    stops = {heading.name, *stop}
    elements = []
    for sibling in heading.find_next_siblings():
        if sibling.name in stops:
            break
        elements.append(sibling)
    return elements


def find_in(elements: list[Tag], name: str) -> Tag | None:
    """First element named ``name`` among ``elements`` or their descendants."""
    for el in elements:
        if el.name == name:
            return el
        found = el.find(name)
        if found is not None:
            return found
    return None


def table_rows(table: Tag, positional: tuple[str, ...] = ("name", "type", "description")) -> list[dict[str, Tag]]:
    """Body rows of a table, cells keyed by column role.

    Roles come from header text (name / type / description / code); a table
    without headers falls back to ``positional``.
    """
    roles: dict[str, int] = {}
    for i, th in enumerate(table.find_all("th")):
        header = text_of(th).lower()
        if "type" in header:
            roles.setdefault("type", i)
        elif "name" in header or "parameter" in header or "field" in header:
            roles.setdefault("name", i)
        elif "description" in header or "reason" in header:
            roles.setdefault("description", i)
        elif "code" in header or "status" in header:
            roles.setdefault("code", i)
    if not roles:
        roles = {role: i for i, role in enumerate(positional)}

    rows = []
    for tr in table.find_all("tr"):
        cells = tr.find_all("td")
        if not cells:
            continue
        rows.append({role: cells[i] for role, i in roles.items() if i < len(cells)})
    return rows
