from __future__ import annotations

import pytest

import wordfinder
from wordfinder import (
    ConfigurationError,
    InputError,
    RetrievalError,
    Settings,
    get_top_words,
    validate_settings,
)

URL = "https://www.gutenberg.org/files/2701/2701-0.txt"


class _StubFetch:
    def __init__(self, content: str = "", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[str] = []

    def __call__(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.content


def test_get_top_words_collapses_possessives() -> None:
    fetch = _StubFetch("ship ship's ship’s ship're Ahab Ahab’s Ahab'nt something else")
    settings = Settings(source_url=URL, top_count=2)

    assert get_top_words(settings, fetch) == ["ship", "ahab"]
    assert fetch.calls == [URL]


def test_get_top_words_merges_case() -> None:
    fetch = _StubFetch("Go go GO")
    assert get_top_words(Settings(source_url=URL, top_count=1), fetch) == ["go"]


def test_get_top_words_ignores_digits() -> None:
    fetch = _StubFetch("word123 123word")
    assert get_top_words(Settings(source_url=URL, top_count=5), fetch) == ["word"]


def test_get_top_words_hides_excluded_words() -> None:
    fetch = _StubFetch("The whale and THE sea and the ship")
    settings = Settings(source_url=URL, top_count=10, excluded=frozenset({"THE", "And"}))

    result = get_top_words(settings, fetch)

    assert result == ["whale", "sea", "ship"]


def test_get_top_words_returns_requested_count() -> None:
    words = [f"w{chr(ord('a') + i)}" for i in range(20)]
    fetch = _StubFetch(" ".join(words))

    for n in (1, 7, 20, 35):
        result = get_top_words(Settings(source_url=URL, top_count=n), fetch)
        assert len(result) == min(n, len(words))


def test_get_top_words_most_used_first() -> None:
    text = "stubb " + "flask " * 2 + "starbuck " * 3 + "ahab " * 4
    fetch = _StubFetch(text)

    result = get_top_words(Settings(source_url=URL, top_count=3), fetch)

    assert result == ["ahab", "starbuck", "flask"]


@pytest.mark.parametrize("top_count", [0, -1, -100])
def test_get_top_words_rejects_top_count_before_fetch(top_count: int) -> None:
    fetch = _StubFetch("whale")
    with pytest.raises(ConfigurationError):
        get_top_words(Settings(source_url=URL, top_count=top_count), fetch)
    assert fetch.calls == []


@pytest.mark.parametrize(
    "url",
    [
        "not a url",
        "",
        "/relative/path.txt",
        "www.example.com",
        "http://:80/book.txt",
        "http://@/book.txt",
        "https://user@/x",
        "http://example.com:port/book.txt",
    ],
)
def test_get_top_words_rejects_bad_url_before_fetch(url: str) -> None:
    fetch = _StubFetch("whale")
    with pytest.raises(ConfigurationError):
        get_top_words(Settings(source_url=url, top_count=3), fetch)
    assert fetch.calls == []


@pytest.mark.parametrize("content", ["", "  \r\n\t"])
def test_get_top_words_rejects_empty_document(content: str) -> None:
    with pytest.raises(InputError):
        get_top_words(Settings(source_url=URL, top_count=3), _StubFetch(content))


def test_get_top_words_propagates_retrieval_error() -> None:
    error = RetrievalError("boom")
    fetch = _StubFetch(error=error)

    with pytest.raises(RetrievalError) as excinfo:
        get_top_words(Settings(source_url=URL, top_count=3), fetch)

    assert excinfo.value is error
    assert fetch.calls == [URL]


def test_validate_settings_accepts_absolute_urls() -> None:
    validate_settings(Settings(source_url="http://example.com", top_count=1))
    validate_settings(Settings(source_url="https://example.com:8080/a?b=c", top_count=1))


def test_validate_settings_rejects_non_integer_top_count() -> None:
    with pytest.raises(ConfigurationError):
        validate_settings(Settings(source_url=URL, top_count=True))


def test_settings_lowercases_excluded() -> None:
    settings = Settings(source_url=URL, excluded=frozenset({"The", "AHAB"}))
    assert settings.excluded == {"the", "ahab"}


def test_settings_from_mapping_defaults() -> None:
    settings = Settings.from_mapping({"source_url": URL})
    assert settings.top_count == wordfinder.DEFAULT_TOP
    assert settings.excluded == frozenset()


@pytest.mark.parametrize(
    "mapping",
    [
        {"source_url": 5},
        {"source_url": URL, "top_count": "10"},
        {"source_url": URL, "top_count": 2.5},
        {"source_url": URL, "excluded": "the"},
        {"source_url": URL, "excluded": ["the", 3]},
    ],
)
def test_settings_from_mapping_rejects_bad_types(mapping) -> None:
    with pytest.raises(ConfigurationError):
        Settings.from_mapping(mapping)


def test_settings_rejects_bare_string_excluded() -> None:
    with pytest.raises(ConfigurationError):
        Settings(source_url=URL, excluded="the")
