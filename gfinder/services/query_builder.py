"""Build the advanced Google query string from the search form."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from urllib.parse import quote

from gfinder.domain.models import SearchFormState
from gfinder.utils.datetime import days_before

OTHER_FILE_TYPE = "-1"
DIRECTORY_LISTING_TOKEN = "intitle:index.of"
EXCLUDED_EXTENSIONS_TOKEN = "-inurl:(jsp|pl|php|html|aspx|htm|cf|shtml)"
EXCLUDED_DOMAINS_TOKEN = (
    "-inurl:(listen77|mp3raid|mp3toss|mp3drug|index_of|index-of|wallywashis|downloadmana)"
)
GOOGLE_SEARCH_URL = "https://www.google.com/search?q="
URI_COMPONENT_SAFE = "!*'()"
DEFAULT_PLACEHOLDER = "Search anything"


@dataclass(frozen=True, slots=True)
class FileTypeOption:
    key: str
    value: str
    label: str
    example: str


@dataclass(frozen=True, slots=True)
class SiteOption:
    key: str
    value: str
    label: str


FILE_TYPES: tuple[FileTypeOption, ...] = (
    FileTypeOption("video", "mkv|mp4|avi|mov|mpg|wmv|divx|mpeg", "TV/Movies/Video", "The.Blacklist.S01"),
    FileTypeOption(
        "books",
        "MOBI|CBZ|CBR|CBC|CHM|EPUB|FB2|LIT|LRF|ODT|PDF|PRC|PDB|PML|RB|RTF|TCR|DOC|DOCX",
        "Books",
        "1985",
    ),
    FileTypeOption("music", "mp3|wav|ac3|ogg|flac|wma|m4a|aac|mod", "Music", "K.Flay discography"),
    FileTypeOption("software", "exe|iso|dmg|tar|7z|bz2|gz|rar|zip|apk", "Software/ISO/DMG/Games", "GTA V"),
    FileTypeOption("images", "jpg|png|bmp|gif|tif|tiff|psd", "Images", "Donald Trump"),
    FileTypeOption("other", OTHER_FILE_TYPE, "Other", "Search anything"),
)

SITES: tuple[SiteOption, ...] = (
    SiteOption("wikipedia", "wikipedia.org", "Wikipedia"),
    SiteOption("youtube", "youtube.com", "YouTube"),
    SiteOption("github", "github.com", "GitHub"),
    SiteOption("stackoverflow", "stackoverflow.com", "StackOverflow"),
    SiteOption("gov", ".gov", "Government (.gov)"),
    SiteOption("edu", ".edu", "Education (.edu)"),
)

FILE_TYPES_BY_KEY = {option.key: option for option in FILE_TYPES}
SITES_BY_KEY = {option.key: option for option in SITES}


def parse_exclude_terms(raw: str) -> list[str]:
    """Split the comma separated exclusion field, dropping blank entries."""

    return [term.strip() for term in (raw or "").split(",") if term.strip()]


def _file_type_tokens(file_type_filter: str | None) -> list[str]:
    if file_type_filter is None or file_type_filter == OTHER_FILE_TYPE:
        return []
    if file_type_filter == "":
        return [DIRECTORY_LISTING_TOKEN]
    return [f"+({file_type_filter})", DIRECTORY_LISTING_TOKEN]


def _site_tokens(selected_sites: list[str], custom_site: str) -> list[str]:
    tokens: list[str] = []
    if len(selected_sites) == 1:
        tokens.append(f"site:{selected_sites[0]}")
    elif selected_sites:
        joined = " OR ".join(f"site:{site}" for site in selected_sites)
        tokens.append(f"({joined})")
    if custom_site:
        tokens.append(f"site:{custom_site}")
    return tokens


def synthesize_query(form: SearchFormState, *, today: date | None = None) -> str:
    """Return the query string for ``form``.

    Tokens are emitted in a fixed order and joined with single spaces; the
    two ``-inurl`` exclusions are always present. ``today`` defaults to the
    current UTC date and only matters when a date range is selected.
    """

    parts: list[str] = []
    if form.free_text:
        parts.append(form.free_text)
    if form.exact_phrase:
        parts.append(f'"{form.exact_phrase}"')
    parts.extend(_file_type_tokens(form.file_type_filter))
    parts.extend(f"-{term}" for term in parse_exclude_terms(form.exclude_terms))
    parts.extend(_site_tokens(form.selected_sites, form.custom_site))
    if form.date_range.days:
        cutoff = days_before(form.date_range.days, today=today)
        parts.append(f"after:{cutoff.isoformat()}")
    parts.append(EXCLUDED_EXTENSIONS_TOKEN)
    parts.append(EXCLUDED_DOMAINS_TOKEN)
    return " ".join(parts)


def google_search_url(query: str) -> str | None:
    if not query.strip():
        return None
    return f"{GOOGLE_SEARCH_URL}{quote(query, safe=URI_COMPONENT_SAFE)}"


def placeholder_for(file_type_filter: str | None) -> str:
    for option in FILE_TYPES:
        if option.value == file_type_filter and option.value != OTHER_FILE_TYPE:
            return f"{DEFAULT_PLACEHOLDER} e.g {option.example}"
    return DEFAULT_PLACEHOLDER


__all__ = [
    "DEFAULT_PLACEHOLDER",
    "DIRECTORY_LISTING_TOKEN",
    "EXCLUDED_DOMAINS_TOKEN",
    "EXCLUDED_EXTENSIONS_TOKEN",
    "FILE_TYPES",
    "FILE_TYPES_BY_KEY",
    "FileTypeOption",
    "OTHER_FILE_TYPE",
    "SITES",
    "SITES_BY_KEY",
    "SiteOption",
    "google_search_url",
    "parse_exclude_terms",
    "placeholder_for",
    "synthesize_query",
]
