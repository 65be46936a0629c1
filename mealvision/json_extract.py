"""Recover the JSON object a model wrapped in prose or Markdown fences."""
import json
import re
from collections.abc import Iterator
from typing import Any

from mealvision.constants import MSG_ERR_NO_JSON
from mealvision.errors import MalformedResponseError

_FENCE_RE = re.compile(r"```(?:json|JSON)?[ \t]*\n?")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _balanced_end(text: str, start: int) -> int | None:
    """Index just past the ``{...}`` span opening at ``start``, or None when it never closes."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        match (in_string, escaped, char):
            case (True, True, _):
                escaped = False
            case (True, False, "\\"):
                escaped = True
            case (True, False, '"'):
                in_string = False
            case (True, False, _):
                pass
            case (False, _, '"'):
                in_string = True
            case (False, _, "{"):
                depth += 1
            case (False, _, "}"):
                depth -= 1
                if depth == 0:
                    return index + 1
            case _:
                pass
    return None


def _candidates(text: str) -> Iterator[str]:
    """Top-level balanced spans in order, then the first-to-last span.

    Spans nested inside an earlier span are never tried on their own.
    """
    first = text.find("{")
    last = text.rfind("}")
    match (first, last):
        case (-1, _) | (_, -1):
            return
        case (opening, closing) if closing <= opening:
            return
        case _:
            pass
    start = first
    while start != -1:
        end = _balanced_end(text, start)
        if end is None:
            break
        yield text[start:end]
        start = text.find("{", end)
    yield text[first : last + 1]


def _loads_object(candidate: str) -> dict[str, Any] | None:
    try:
        obj = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return obj if isinstance(obj, dict) else None


def extract_clean_json(text: str) -> str:
    """Return the first well-formed JSON object found in ``text``.

    Code fences are stripped first. Top-level balanced ``{...}`` spans (braces
    inside string literals are ignored) are tried left to right, never the
    objects nested inside them; if none parses, the span from the first ``{``
    to the last ``}`` is tried.
    Raises ``MalformedResponseError`` when nothing yields a JSON object.
    """
    cleaned = strip_code_fences(text)
    parsed = next(
        filter(
            lambda pair: pair[1] is not None,
            map(lambda c: (c, _loads_object(c)), _candidates(cleaned)),
        ),
        None,
    )
    match parsed:
        case None:
            raise MalformedResponseError(MSG_ERR_NO_JSON)
        case (candidate, _):
            return candidate


def parse_json_object(text: str) -> dict[str, Any]:
    return json.loads(extract_clean_json(text))
