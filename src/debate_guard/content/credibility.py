from __future__ import annotations

from typing import Iterable

_DEFAULT_CREDIBLE_SOURCES = (
    "forbes", "bbc", "cnn", "reuters", "ap", "associatedpress", "nytimes", "washingtonpost",
    "wsj", "bloomberg", "theguardian", "economist", "ft", "financialtimes", "time",
    "newsweek", "usatoday", "abc", "nbc", "cbs", "pbs", "npr", "axios", "politico",
    "thehill", "cnbc", "marketwatch", "techcrunch", "wired", "verge", "ars",
    "scientificamerican", "nature", "science", "nejm", "lancet", "who", "cdc",
    "nasa", "nsa", "fbi", "cia", "whitehouse", "state", "defense", "treasury",
    "sec", "fda", "nih", "nsf", "doe", "epa", "usda", "ed", "hhs", "dhs",
    "elonmusk", "xdevelopers", "openai", "anthropic", "google", "microsoft",
    "apple", "meta", "amazon", "netflix", "disney", "tesla", "spacex",
)

# Desk suffixes outlets put on secondary handles, e.g. "bbcworld", "cnnbrk".
_DEFAULT_HANDLE_SUFFIXES = (
    "news", "world", "breaking", "brk", "biz", "business", "live", "tech",
    "politics", "science", "markets", "press",
)


class CredibleSourceFilter:
    """Decides whether an account is credible enough to skip analysis.

    An account is credible only when the platform marks it verified *and*
    its handle is a known source, either exactly or followed by one of the
    desk suffixes (``bbcnews``, ``reuters_world``). Anything else, including
    handles that merely contain a known name, is analyzed.

    Sits in front of the debate, instant and fact-check paths; it never runs
    inside the debate state machine.
    """

    def __init__(
        self,
        sources: Iterable[str] | None = None,
        suffixes: Iterable[str] | None = None,
    ) -> None:
        self.sources = frozenset(s.lower() for s in (sources if sources is not None else _DEFAULT_CREDIBLE_SOURCES))
        self.suffixes = frozenset(s.lower() for s in (suffixes if suffixes is not None else _DEFAULT_HANDLE_SUFFIXES))

    def is_known_source(self, username: str) -> bool:
        name = username.strip().lower().lstrip("@")
        if not name:
            return False
        if name in self.sources:
            return True
        return any(
            name.startswith(source) and name[len(source):].lstrip("_") in self.suffixes
            for source in self.sources
        )

    def is_credible(self, username: str, verified: bool = False) -> bool:
        return verified and self.is_known_source(username)

    def should_analyze(self, username: str, verified: bool = False) -> bool:
        return not self.is_credible(username, verified)
