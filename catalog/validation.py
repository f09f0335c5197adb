import math
from typing import Any, Dict, List
from urllib.parse import urlsplit

GENRES = ("Action", "Adventure", "Comedy", "Drama", "Fantasy", "Horror", "Sci-fi", "Thriller")

# -----------------------------
# Field rules
# -----------------------------

MOVIE_FIELDS = [
    {"name": "title", "kind": "string",
     "required_message": "Title is required",
     "type_message": "Movie title must be a string"},
    {"name": "year", "kind": "integer", "min": 1900, "max": 2024},
    {"name": "director", "kind": "string",
     "required_message": "director is required",
     "type_message": "Movie director must be a string"},
    {"name": "duration", "kind": "integer", "positive": True},
    {"name": "rate", "kind": "integer", "default": 5, "min": 0, "max": 10},
    {"name": "poster", "kind": "string", "url_message": "Poster must be a valid URL"},
    {"name": "genre", "kind": "genres",
     "required_message": "Movie genre required",
     "type_message": "Movie genre must be an array of enum Genre"},
]

_SKIP = object()  # marks a value that failed its type check


class ValidationResult:
    def __init__(self, data=None, issues=None):
        self.data = data
        self.issues = issues or []
        self.success = not self.issues

    def __repr__(self):
        return f"<ValidationResult success={self.success} issues={len(self.issues)}>"


def _issue(path, code, message, **extra) -> Dict[str, Any]:
    return {"path": path, "code": code, "message": message, **extra}

def _received(v) -> str:
    if v is None:
        return "null"
    if isinstance(v, bool):
        return "boolean"
    if isinstance(v, (int, float)):
        return "nan" if isinstance(v, float) and math.isnan(v) else "number"
    if isinstance(v, str):
        return "string"
    if isinstance(v, list):
        return "array"
    return "object"

def is_valid_url(value: str) -> bool:
    if not value or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    scheme = parts.scheme
    if not scheme or not scheme[0].isalpha():
        return False
    if not all(ch.isalnum() or ch in "+-." for ch in scheme):
        return False
    return bool(parts.netloc)


# -----------------------------
# Checks per kind
# -----------------------------

def _check_string(rule, value, issues):
    name = rule["name"]
    if not isinstance(value, str):
        issues.append(_issue([name], "invalid_type",
                             rule.get("type_message") or f"Expected string, received {_received(value)}"))
        return _SKIP
    if "url_message" in rule and not is_valid_url(value):
        issues.append(_issue([name], "invalid_string", rule["url_message"], validation="url"))
    return value

def _check_integer(rule, value, issues):
    name = rule["name"]
    received = _received(value)
    if received != "number":
        issues.append(_issue([name], "invalid_type", f"Expected number, received {received}"))
        return _SKIP

    integral = isinstance(value, int) or value.is_integer()
    if not integral:
        issues.append(_issue([name], "invalid_type", "Expected integer, received float"))
    if rule.get("positive") and value <= 0:
        issues.append(_issue([name], "too_small", "Number must be greater than 0", minimum=0))
    if "min" in rule and value < rule["min"]:
        issues.append(_issue([name], "too_small",
                             f"Number must be greater than or equal to {rule['min']}",
                             minimum=rule["min"]))
    if "max" in rule and value > rule["max"]:
        issues.append(_issue([name], "too_big",
                             f"Number must be less than or equal to {rule['max']}",
                             maximum=rule["max"]))
    return int(value) if integral else _SKIP

def _check_genres(rule, value, issues):
    name = rule["name"]
    if not isinstance(value, list):
        issues.append(_issue([name], "invalid_type", rule["type_message"]))
        return _SKIP
    if not value:
        issues.append(_issue([name], "too_small",
                             "Array must contain at least 1 element(s)", minimum=1))
    expected = " | ".join(f"'{g}'" for g in GENRES)
    for idx, g in enumerate(value):
        if g not in GENRES or not isinstance(g, str):
            got = f"'{g}'" if isinstance(g, str) else _received(g)
            issues.append(_issue([name, idx], "invalid_enum_value",
                                 f"Invalid enum value. Expected {expected}, received {got}",
                                 options=list(GENRES)))
    return list(value)

_CHECKS = {
    "string": _check_string,
    "integer": _check_integer,
    "genres": _check_genres,
}


# -----------------------------
# Entry points
# -----------------------------

def _validate(candidate, partial: bool) -> ValidationResult:
    if not isinstance(candidate, dict):
        return ValidationResult(issues=[
            _issue([], "invalid_type", f"Expected object, received {_received(candidate)}")
        ])

    issues: List[Dict[str, Any]] = []
    data = {}
    for rule in MOVIE_FIELDS:
        name = rule["name"]
        if name not in candidate:
            if partial:
                continue
            if "default" in rule:
                data[name] = rule["default"]
            else:
                issues.append(_issue([name], "invalid_type", rule.get("required_message", "Required")))
            continue

        before = len(issues)
        value = _CHECKS[rule["kind"]](rule, candidate[name], issues)
        if len(issues) == before and value is not _SKIP:
            data[name] = value

    if issues:
        return ValidationResult(issues=issues)
    return ValidationResult(data=data)


def validate_movie(candidate) -> ValidationResult:
    """Every required field must be present; rate defaults to 5."""
    return _validate(candidate, partial=False)

def validate_partial_movie(candidate) -> ValidationResult:
    return _validate(candidate, partial=True)
