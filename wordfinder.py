#!/usr/bin/env python3
"""
wordfinder.py
~~~~~~~~~~~~~

Download a plain-text document (a book, an article, a transcript), then
report the top *N* most frequent words it contains.

Words are matched case-insensitively, and possessive or contracted forms
are folded into their stem: ``Ship``, ``ship's`` and ``SHIP’s`` all count
as ``ship``.

Command-line usage
------------------
$ python wordfinder.py https://www.gutenberg.org/files/2701/2701-0.txt --top 20

Positional arguments
--------------------
url                 Fully-qualified URL of the document (optional when a
                    settings file provides ``source_url``).

Optional arguments
------------------
--top / -t N        How many words to display (default: 100).
--exclude / -e W    Word to leave out of the count; repeatable.
--config / -c FILE  JSON settings file with ``source_url``, ``top_count``
                    and ``excluded`` keys.
--keep-stop-words   Do not drop the built-in stop-word list.
--verbose / -v      Log debug output.

Exit status
-----------
0   Successful run.
1   Network or HTTP error.
2   Invalid settings, invalid URL or parsing error.

Dependencies
------------
pip install requests beautifulsoup4 lxml

Notes
-----
* A single request is made per run; nothing is retried.
* HTML responses are reduced to their visible text before counting.
"""

import argparse
import json
import logging
import sys
from collections import Counter
from dataclasses import dataclass, field
from html import unescape
from pathlib import Path
from typing import (
    Callable,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
)
from urllib.parse import urlsplit

import requests
from bs4 import BeautifulSoup

# --------------------------- configuration -------------------------------- #

USER_AGENT = (
    "Mozilla/5.0 (compatible; WordFinder/1.0; +https://github.com/your-org)"
)
TIMEOUT = 10  # seconds
DEFAULT_TOP = 100
STOP_WORDS = frozenset(
    {
        "a",
        "an",
        "and",
        "are",
        "as",
        "at",
        "be",
        "by",
        "for",
        "from",
        "has",
        "he",
        "in",
        "is",
        "it",
        "its",
        "of",
        "on",
        "that",
        "the",
        "to",
        "was",
        "were",
        "with",
    }
)  # extend as needed

# Straight single quote and typographic apostrophe.
APOSTROPHES = frozenset({"'", "’"})
PUNCTUATION = frozenset('!@#$%^&*()-_+=~`"{}[]|\\/:;,.?<>')

EXIT_OK = 0
EXIT_RETRIEVAL = 1
EXIT_INVALID = 2

# ------------------------------- errors ------------------------------------ #


class WordFinderError(Exception):
    """Base class for every failure reported by a word-finder run."""


class ConfigurationError(WordFinderError):
    """Settings are unusable: bad top count, bad URL or bad settings file."""


class RetrievalError(WordFinderError):
    """The source document could not be downloaded."""


class InputError(WordFinderError):
    """The downloaded document holds no text to parse."""


# ------------------------------ settings ----------------------------------- #


@dataclass(frozen=True)
class Settings:
    """Inputs of a single run."""

    source_url: str
    top_count: int = DEFAULT_TOP
    excluded: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if isinstance(self.excluded, str):
            raise ConfigurationError("excluded must be a collection of words")
        # Membership is compared lower-case.
        object.__setattr__(
            self, "excluded", frozenset(word.lower() for word in self.excluded)
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "Settings":
        """Build settings from a decoded settings file."""
        source_url = mapping.get("source_url", "")
        top_count = mapping.get("top_count", DEFAULT_TOP)
        excluded = mapping.get("excluded", [])

        if not isinstance(source_url, str):
            raise ConfigurationError("source_url must be a string")
        if isinstance(top_count, bool) or not isinstance(top_count, int):
            raise ConfigurationError("top_count must be an integer")
        if isinstance(excluded, str) or not isinstance(excluded, (list, tuple)):
            raise ConfigurationError("excluded must be a list of words")
        if not all(isinstance(word, str) for word in excluded):
            raise ConfigurationError("excluded must be a list of words")

        return cls(
            source_url=source_url,
            top_count=top_count,
            excluded=frozenset(excluded),
        )


def load_settings(path: Path) -> Settings:
    """Read a JSON settings file."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Cannot read settings from {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Settings in {path} must be a JSON object")
    return Settings.from_mapping(raw)


def is_absolute_url(value: str) -> bool:
    """True when *value* is a well-formed absolute URI with a host."""
    if not value or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    try:
        # Port parsing raises on out-of-range or non-numeric ports.
        parts.port
    except ValueError:
        return False
    return bool(parts.scheme and parts.hostname)


def validate_settings(settings: Settings) -> None:
    """Reject settings before any network or parsing work is done."""
    top_count = settings.top_count
    if isinstance(top_count, bool) or not isinstance(top_count, int):
        raise ConfigurationError("top_count must be an integer")
    if top_count < 1:
        raise ConfigurationError("top_count must be greater than zero")
    if not is_absolute_url(settings.source_url):
        raise ConfigurationError(f"Source URL is invalid: {settings.source_url!r}")


# ----------------------------- retrieval ----------------------------------- #


def visible_text_from_soup(soup: BeautifulSoup) -> str:
    """
    Extract visible text from a BeautifulSoup tree.

    Invisible elements (scripts, styles, etc.) are removed before
    concatenation.
    """
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()

    # stripped_strings skips comments and yields plain str.
    def gen() -> Iterator[str]:
        for element in soup.stripped_strings:
            yield unescape(element)

    return " ".join(gen())


def fetch_text(url: str, timeout: float = TIMEOUT) -> str:
    """Download *url* and return its text content as Unicode.

    Raises :class:`RetrievalError` on any network failure, unsupported or
    malformed URL, or non-success status code.
    """
    headers = {"User-Agent": USER_AGENT}
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
        content_type = response.headers.get("Content-Type", "").lower()
        # requests assumes ISO-8859-1 for text/* without a charset.
        if "charset" not in content_type:
            response.encoding = response.apparent_encoding
        text = response.text
    except (requests.RequestException, UnicodeDecodeError) as exc:
        raise RetrievalError(f"Failed to fetch {url}: {exc}") from exc

    if "html" in content_type:
        logging.debug("Extracting visible text from HTML response")
        return visible_text_from_soup(BeautifulSoup(text, "lxml"))
    return text


# ---------------------------- word counting -------------------------------- #


def is_word_character(ch: str) -> bool:
    """True for letters of any script and for apostrophes."""
    if ch in PUNCTUATION:
        return False
    return ch.isalpha() or ch in APOSTROPHES


def parse(content: Optional[str]) -> List[str]:
    """
    Split *content* into word tokens.

    A token is a maximal run of letters (any script) and apostrophes. Any
    other character, digits included, separates tokens. Apostrophes are
    kept as they appear.
    """
    if content is None or not content.strip():
        raise InputError("Content is empty")

    tokens: List[str] = []
    buffer: List[str] = []
    for ch in content:
        if is_word_character(ch):
            buffer.append(ch)
        elif buffer:
            tokens.append("".join(buffer))
            buffer = []

    if buffer:
        tokens.append("".join(buffer))
    return tokens


def normalize(token: str) -> str:
    """Lower-case *token* and cut it at its first apostrophe.

    >>> normalize("Ship’s")
    'ship'
    >>> normalize("'tis")
    ''
    """
    word = token.lower()
    for index, ch in enumerate(word):
        if ch in APOSTROPHES:
            return word[:index]
    return word


def count_words(tokens: Iterable[str], excluded: Iterable[str] = ()) -> Counter:
    """Count normalized *tokens*, skipping any word in *excluded*.

    Keys are inserted in first-occurrence order. Tokens that normalize to
    the empty string (``'s``, a lone ``'``) are not counted.
    """
    skip = frozenset(word.lower() for word in excluded)
    counts: Counter = Counter()
    for token in tokens:
        word = normalize(token)
        if not word or word in skip:
            continue
        counts[word] += 1
    return counts


def top_n(counts: Counter, n: int) -> List[str]:
    """Return the *n* most common words, most frequent first.

    Ties keep the order in which the words were first counted.
    """
    return [word for word, _ in counts.most_common(n)]


def get_top_words(
    settings: Settings, fetch: Callable[[str], str] = fetch_text
) -> List[str]:
    """Fetch the document named by *settings* and rank its words."""
    validate_settings(settings)

    logging.info("Fetching %s ...", settings.source_url)
    content = fetch(settings.source_url)

    logging.info("Parsing text ...")
    tokens = parse(content)
    counts = count_words(tokens, settings.excluded)
    logging.debug("%d tokens, %d distinct words", len(tokens), len(counts))

    return top_n(counts, settings.top_count)


# ------------------------------ main logic --------------------------------- #


def render_report(words: List[str]) -> str:
    """Format the ranked words one per line."""
    lines = ["Top words:"]
    lines.extend(words)
    return "\n".join(lines)


def parse_args(argv: List[str]) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Download a text document and list its most frequent words."
    )
    parser.add_argument("url", nargs="?", help="Fully-qualified URL to read.")
    parser.add_argument(
        "-t",
        "--top",
        type=int,
        help=f"Number of most frequent words to show (default: {DEFAULT_TOP}).",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        metavar="WORD",
        help="Word to leave out of the count; may be repeated.",
    )
    parser.add_argument(
        "-c", "--config", type=Path, help="JSON settings file."
    )
    parser.add_argument(
        "--keep-stop-words",
        action="store_true",
        help="Count the built-in stop words as well.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output."
    )
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Merge command-line flags over the settings file and defaults."""
    if args.config is not None:
        base = load_settings(args.config)
        excluded = base.excluded
    else:
        base = Settings(source_url="")
        excluded = frozenset() if args.keep_stop_words else STOP_WORDS

    if args.exclude:
        excluded = excluded | frozenset(args.exclude)

    return Settings(
        source_url=args.url if args.url is not None else base.source_url,
        top_count=args.top if args.top is not None else base.top_count,
        excluded=excluded,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the script."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        settings = settings_from_args(args)
        words = get_top_words(settings)
    except RetrievalError as exc:
        logging.error("%s", exc)
        return EXIT_RETRIEVAL
    except WordFinderError as exc:
        logging.error("%s", exc)
        return EXIT_INVALID

    print(render_report(words))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
