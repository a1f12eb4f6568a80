"""A persistent full-text index of comic metadata."""

from __future__ import annotations

import json
import os
import re
import sqlite3
import threading
from dataclasses import asdict, dataclass, field
from typing import Any

from comicsticks.comic import Comic

MAX_RESULTS = 100
FUZZINESS = 1
DATABASE_FILE = "index.sqlite3"

_WORD = re.compile(r"\w+")
_CLAUSE = re.compile(r'([+-]?)(?:(\w+):)?(?:"([^"]*)"|(\S+))')


@dataclass(frozen=True)
class SearchHit:
    """One matching comic: its id, relevance score and stored fields."""

    id: str
    score: float
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchResult:
    """All matches of a query; ``hits`` holds at most ``MAX_RESULTS``."""

    total: int
    hits: list[SearchHit]


@dataclass(frozen=True)
class _Clause:
    occur: str
    field: str | None
    terms: tuple[str, ...]
    phrase: bool


def _analyze(text: str) -> list[str]:
    return [word.lower() for word in _WORD.findall(text)]


def _within_distance(a: str, b: str, limit: int) -> bool:
    if abs(len(a) - len(b)) > limit:
        return False
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        current = [i]
        for j, char_b in enumerate(b, 1):
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + (char_a != char_b))
            )
        if min(current) > limit:
            return False
        previous = current
    return previous[-1] <= limit


def _parse_query(user_query: str) -> list[_Clause]:
    clauses = []
    for match in _CLAUSE.finditer(user_query):
        occur, field_name, quoted, bare = match.groups()
        phrase = quoted is not None
        terms = tuple(_analyze(quoted if phrase else bare))
        if terms:
            clauses.append(_Clause(occur, field_name, terms, phrase))
    return clauses


def _count_phrase(tokens: list[str], terms: tuple[str, ...]) -> int:
    width = len(terms)
    return sum(
        1 for start in range(len(tokens) - width + 1) if tuple(tokens[start : start + width]) == terms
    )


def _clause_score(clause: _Clause, doc: dict[str, list[str]]) -> int:
    if clause.field is not None:
        token_lists = [doc.get(clause.field, [])]
    else:
        token_lists = list(doc.values())
    score = 0
    for tokens in token_lists:
        if clause.phrase:
            score += _count_phrase(tokens, clause.terms)
        else:
            score += sum(tokens.count(term) for term in clause.terms)
    return score


def _tokenize_fields(fields: dict[str, Any]) -> dict[str, list[str]]:
    return {name: _analyze(str(value)) for name, value in fields.items() if value is not None}


class SearchIndex:
    """Comic metadata indexed for searching, stored in a directory at ``path``.

    The index is created when ``path`` does not exist yet.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        db_path = os.path.join(self.path, DATABASE_FILE)
        if not os.path.exists(self.path):
            os.makedirs(self.path, 0o755)
        elif not os.path.isfile(db_path):
            raise FileExistsError(f"{self.path!r} exists but is not a search index")

        self._lock = threading.Lock()
        self._db: sqlite3.Connection | None = sqlite3.connect(db_path, check_same_thread=False)
        with self._db:
            self._db.execute(
                "CREATE TABLE IF NOT EXISTS documents (id TEXT PRIMARY KEY, fields TEXT NOT NULL)"
            )
        self._fields: dict[str, dict[str, Any]] = {}
        self._tokens: dict[str, dict[str, list[str]]] = {}
        for doc_id, stored in self._db.execute("SELECT id, fields FROM documents"):
            self._store(doc_id, json.loads(stored))

    def __enter__(self) -> SearchIndex:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _connection(self) -> sqlite3.Connection:
        if self._db is None:
            raise ValueError("search index is closed")
        return self._db

    def _store(self, doc_id: str, fields: dict[str, Any]) -> None:
        self._fields[doc_id] = fields
        self._tokens[doc_id] = _tokenize_fields(fields)

    def close(self) -> None:
        """Close the index; later operations raise ValueError."""
        with self._lock:
            self._connection().close()
            self._db = None

    def index(self, comic: Comic) -> None:
        """Add ``comic`` to the index, replacing an earlier version of it."""
        doc_id = str(comic.num)
        fields = asdict(comic)
        with self._lock:
            db = self._connection()
            with db:
                db.execute(
                    "INSERT OR REPLACE INTO documents (id, fields) VALUES (?, ?)",
                    (doc_id, json.dumps(fields, ensure_ascii=False)),
                )
            self._store(doc_id, fields)

    def search(self, user_query: str) -> SearchResult:
        """Find comics matching ``user_query`` as a query string or fuzzily."""
        with self._lock:
            self._connection()
            documents = list(self._tokens.items())
            stored = dict(self._fields)

        clauses = _parse_query(user_query)
        musts = [c for c in clauses if c.occur == "+"]
        nots = [c for c in clauses if c.occur == "-"]
        shoulds = [c for c in clauses if c.occur == ""]

        scored = []
        for doc_id, doc in documents:
            score = self._query_string_score(doc, musts, shoulds, nots)
            score += sum(
                1
                for tokens in doc.values()
                for token in tokens
                if _within_distance(token, user_query, FUZZINESS)
            )
            if score > 0:
                scored.append((doc_id, score))

        scored.sort(key=lambda item: (-item[1], _id_key(item[0])))
        hits = [
            SearchHit(id=doc_id, score=float(score), fields=dict(stored[doc_id]))
            for doc_id, score in scored[:MAX_RESULTS]
        ]
        return SearchResult(total=len(scored), hits=hits)

    @staticmethod
    def _query_string_score(
        doc: dict[str, list[str]],
        musts: list[_Clause],
        shoulds: list[_Clause],
        nots: list[_Clause],
    ) -> int:
        if not (musts or shoulds or nots):
            return 0
        if any(_clause_score(clause, doc) for clause in nots):
            return 0
        score = 0
        for clause in musts:
            clause_score = _clause_score(clause, doc)
            if not clause_score:
                return 0
            score += clause_score
        should_score = sum(_clause_score(clause, doc) for clause in shoulds)
        if not musts and shoulds and not should_score:
            return 0
        # A query made only of exclusions matches every remaining document.
        return max(score + should_score, 1)


def _id_key(doc_id: str) -> tuple[int, int, str]:
    try:
        return (0, int(doc_id), "")
    except ValueError:
        return (1, 0, doc_id)