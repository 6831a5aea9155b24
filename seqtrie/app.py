"""
Sequence Trie Service: a REST API over a set of sequences.

Exposes :class:`seqtrie.Trie` as a JSON API with endpoints for inserting and
removing sequences, membership and prefix-completion queries, and set algebra
against a batch of candidate sequences.  Built with Flask.

A plain string is read as a sequence of characters, or as a sequence of
tokens when a separator (``sep``) is given.  JSON bodies may instead carry a
``sequence`` array whose elements are JSON scalars; those are stored as
given, without lowercasing, and can be queried or removed the same way.
"""

from __future__ import annotations

import os
import time
import logging
from typing import Any, Iterable, Optional

from flask import Blueprint, Flask, current_app, jsonify, request

from .sequences import take_first_n
from .trie import Trie


def _log_level(name: str) -> int:
    """Numeric level for *name*, INFO when the name is not a known level."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


logging.basicConfig(
    level=_log_level(os.environ.get("LOG_LEVEL", "INFO")),
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("seqtrie-service")

MAX_SEQUENCE_LENGTH = int(os.environ.get("TRIE_MAX_SEQUENCE_LENGTH", 256))
DEFAULT_LIMIT = int(os.environ.get("TRIE_DEFAULT_LIMIT", 25))

# Seed with sample data so the service is useful out-of-the-box
SEED_WORDS = [
    "alphabet", "alpha", "anagram", "array", "ascii",
    "byte", "bytes", "cache", "char", "charset",
    "codec", "codepoint", "decode", "encode", "glyph",
    "grapheme", "index", "infix", "lexeme", "lexer",
    "prefix", "prefixes", "regex", "scan", "scanner",
    "sequence", "set", "string", "substring", "suffix",
    "token", "tokens", "trie", "tries", "unicode",
    "word", "words",
]

_SCALARS = (str, int, float, bool, type(None))
_MISSING_SEQUENCE = "Needs query parameter 'q' or a JSON 'sequence' array of scalars or 'key' string"

bp = Blueprint("seqtrie", __name__)


def create_app(seed: Optional[Iterable[Iterable[Any]]] = None) -> Flask:
    """Build the application around a fresh trie holding *seed*."""
    app = Flask(__name__)
    words = SEED_WORDS if seed is None else list(seed)
    app.extensions["seqtrie"] = Trie(words)
    app.config["SEED_SIZE"] = len(words)
    app.config["START_TIME"] = time.time()
    app.register_blueprint(bp)
    logger.info("Seeded trie with %d sequences", len(words))
    return app


def _trie() -> Trie:
    return current_app.extensions["seqtrie"]


def _uptime() -> float:
    return round(time.time() - current_app.config["START_TIME"], 2)


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


def _split(raw: str, sep: Optional[str]) -> tuple:
    raw = raw.strip().lower()
    return tuple(raw.split(sep)) if sep else tuple(raw)


def _int_arg(name: str, default: int) -> int:
    try:
        return int(request.args.get(name, default))
    except ValueError:
        return default


def _query_sequence() -> Optional[tuple]:
    """Sequence from the ``q``/``sep`` query parameters, None if ``q`` is blank."""
    q = request.args.get("q", "")
    if not q.strip():
        return None
    return _split(q, request.args.get("sep"))


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _encode(element: Any) -> Any:
    # JSON true, 1 and 1.0 compare equal in Python; tag bools and floats apart.
    if isinstance(element, (bool, float)):
        return (type(element).__name__, element)
    return element


def _decode(sequence: Iterable[Any]) -> list:
    return [element[1] if isinstance(element, tuple) else element for element in sequence]


def _body_sequence(body: dict) -> Optional[tuple]:
    if "sequence" in body:
        sequence = body["sequence"]
        if not isinstance(sequence, list):
            return None
        if not all(isinstance(element, _SCALARS) for element in sequence):
            return None
        return tuple(_encode(element) for element in sequence)
    key, sep = body.get("key"), body.get("sep")
    if not isinstance(key, str) or not key.strip():
        return None
    if sep is not None and not isinstance(sep, str):
        return None
    return _split(key, sep)


def _request_sequence() -> Optional[tuple]:
    """Sequence from a JSON ``sequence``/``key`` body, else from ``q``/``sep``."""
    body = _json_body()
    if "sequence" in body or "key" in body:
        return _body_sequence(body)
    return _query_sequence()


def _body_candidates(body: dict) -> Optional[list[tuple]]:
    if "sequences" in body:
        raw = body["sequences"]
        if not isinstance(raw, list):
            return None
        candidates = [_body_sequence({"sequence": item}) for item in raw]
    elif "keys" in body:
        raw = body["keys"]
        if not isinstance(raw, list):
            return None
        candidates = [_body_sequence({"key": item, "sep": body.get("sep")}) for item in raw]
    else:
        return None
    if any(candidate is None for candidate in candidates):
        return None
    return candidates


# ── Health & Info ─────────────────────────────────────────────────────────

@bp.route("/")
def index():
    """Landing page with API documentation."""
    return jsonify({
        "service": "Sequence Trie Service",
        "version": "1.0.0",
        "description": "REST API over a set of sequences stored in a Trie",
        "endpoints": {
            "GET  /":                           "This help page",
            "GET  /health":                     "Health check",
            "GET  /stats":                      "Trie statistics",
            "GET  /contains?q=<seq>&sep=<s>":   "Membership test (or POST {\"sequence\": [...]})",
            "GET  /completions?q=<prefix>":     "Suffixes of members starting with prefix",
            "GET  /contents":                   "All member sequences",
            "POST /insert":                     "Insert  {\"sequence\": [...]} or {\"key\": \"...\"}",
            "DELETE /remove?q=<seq>":           "Remove a sequence (or a JSON sequence body)",
            "POST /union":                      "Add candidates  {\"sequences\": [[...]]}",
            "POST /intersect":                  "Keep only members among the candidates",
            "POST /exclusive-or":               "Toggle membership of each candidate",
            "POST /subtract":                   "Remove every candidate",
            "POST /disjoint":                   "Whether no candidate is a member",
        },
    })


@bp.route("/health")
def health():
    """Liveness / readiness probe."""
    return jsonify({
        "status": "healthy",
        "uptime_seconds": _uptime(),
        "trie_size": len(_trie()),
    })


@bp.route("/stats")
def stats():
    return jsonify({
        "total_sequences": len(_trie()),
        "uptime_seconds": _uptime(),
        "seed_sequences": current_app.config["SEED_SIZE"],
    })


# ── Queries ───────────────────────────────────────────────────────────────

@bp.route("/contains", methods=["GET", "POST"])
def contains():
    sequence = _request_sequence()
    if sequence is None:
        return _error(_MISSING_SEQUENCE)
    return jsonify({"sequence": _decode(sequence), "found": _trie().contains(sequence)})


@bp.route("/completions")
def completions():
    """Suffixes of members that start with the prefix ``q`` (blank means all)."""
    prefix = _query_sequence() or ()
    limit = _int_arg("limit", DEFAULT_LIMIT)
    min_length = _int_arg("min_length", 0)

    matches = list(take_first_n(
        _trie().completions(prefix),
        lambda suffix: len(suffix) >= min_length,
        limit,
    ))
    return jsonify({
        "prefix": _decode(prefix),
        "count": len(matches),
        "completions": [_decode(suffix) for suffix in matches],
    })


@bp.route("/contents")
def contents():
    limit = _int_arg("limit", DEFAULT_LIMIT)
    members = list(take_first_n(_trie(), lambda member: True, limit))
    return jsonify({"count": len(members), "sequences": [_decode(member) for member in members]})


# ── Mutation ──────────────────────────────────────────────────────────────

@bp.route("/insert", methods=["POST"])
def insert():
    body = _json_body()
    sequence = _body_sequence(body)
    if sequence is None:
        return _error("Body needs a 'sequence' array of scalars or a 'key' string")
    if len(sequence) > MAX_SEQUENCE_LENGTH:
        return _error(f"Sequence too long (max {MAX_SEQUENCE_LENGTH} elements)")

    trie = _trie()
    trie.insert(sequence)
    logger.info("Inserted sequence=%s", sequence)
    return jsonify({"inserted": _decode(sequence), "trie_size": len(trie)}), 201


@bp.route("/remove", methods=["DELETE"])
def remove():
    sequence = _request_sequence()
    if sequence is None:
        return _error(_MISSING_SEQUENCE)

    trie = _trie()
    removed = trie.contains(sequence)
    trie.remove(sequence)
    if removed:
        logger.info("Removed sequence=%s", sequence)
    status = 200 if removed else 404
    return jsonify({"sequence": _decode(sequence), "removed": removed, "trie_size": len(trie)}), status


# ── Set algebra ───────────────────────────────────────────────────────────

_OPERATIONS = {
    "union": Trie.union_in_place,
    "intersect": Trie.intersect_in_place,
    "exclusive-or": Trie.exclusive_or_in_place,
    "subtract": Trie.subtract_in_place,
}


@bp.route("/union", methods=["POST"], defaults={"operation": "union"})
@bp.route("/intersect", methods=["POST"], defaults={"operation": "intersect"})
@bp.route("/exclusive-or", methods=["POST"], defaults={"operation": "exclusive-or"})
@bp.route("/subtract", methods=["POST"], defaults={"operation": "subtract"})
def algebra(operation: str):
    """Apply a set operation between the trie and a batch of candidates."""
    body = _json_body()
    candidates = _body_candidates(body)
    if candidates is None:
        return _error("Body needs a 'sequences' array of arrays or a 'keys' array of strings")
    if any(len(candidate) > MAX_SEQUENCE_LENGTH for candidate in candidates):
        return _error(f"Sequence too long (max {MAX_SEQUENCE_LENGTH} elements)")

    trie = _trie()
    _OPERATIONS[operation](trie, candidates)
    logger.info("Applied %s with %d candidates", operation, len(candidates))
    return jsonify({"operation": operation, "candidates": len(candidates), "trie_size": len(trie)})


@bp.route("/disjoint", methods=["POST"])
def disjoint():
    body = _json_body()
    candidates = _body_candidates(body)
    if candidates is None:
        return _error("Body needs a 'sequences' array of arrays or a 'keys' array of strings")
    return jsonify({"disjoint": _trie().is_disjoint_with(candidates)})


app = create_app()


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"
    logger.info("Starting Sequence Trie Service on port %d", port)
    app.run(host="0.0.0.0", port=port, debug=debug)
