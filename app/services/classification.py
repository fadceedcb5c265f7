"""
Category enumerations and first-match-wins classifiers.

Order matters: when a student is marked in more than one category, the
earliest category in the list wins.
"""
from typing import Any, Callable, Optional

from app.schemas.student import StudentRecord

SOURCES = [
    "Yahoo搜尋",
    "Google搜尋",
    "伊美官網",
    "Facebook",
    "伊美部落格",
    "Instagram",
    "Line@",
    "PTT",
    "其他網站",
]

METHODS = ["電話", "現場", "Line", "Line@", "FB", "IG", "Beclass", "Survey", "Meta", "其他"]

COURSES = ["美丙", "美乙", "髮丙", "造型", "美甲", "紋繡", "SPA", "除毛", "美睫", "刺青", "美醫", "個彩"]

# Free-text source labels used by older intake rows
SOURCE_ALIASES: dict[str, set[str]] = {
    "Yahoo搜尋": {"yahoo"},
    "Google搜尋": {"google"},
    "伊美官網": {"官網"},
    "Facebook": {"fb"},
    "伊美部落格": {"部落格", "blog"},
    "Instagram": {"ig"},
    "Line@": {"line"},
    "PTT": set(),
    "其他網站": {"其他"},
}

Predicate = Callable[[StudentRecord], bool]


def is_flag_set(value: Any) -> bool:
    """Sheet checkbox / marker cell: ``True``, ``"TRUE"``, ``"1"`` or any text."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return len(str(value).strip()) > 0


def _source_predicate(category: str) -> Predicate:
    names = {category.lower()} | SOURCE_ALIASES.get(category, set())

    def matches(student: StudentRecord) -> bool:
        if is_flag_set(student.source_flags.get(category)):
            return True
        return student.source.strip().lower() in names

    return matches


def _method_predicate(category: str) -> Predicate:
    name = category.lower()

    def matches(student: StudentRecord) -> bool:
        if is_flag_set(student.method_flags.get(category)):
            return True
        return student.method.strip().lower() == name

    return matches


SOURCE_RULES: list[tuple[str, Predicate]] = [(c, _source_predicate(c)) for c in SOURCES]
METHOD_RULES: list[tuple[str, Predicate]] = [(c, _method_predicate(c)) for c in METHODS]


def first_match(rules: list[tuple[str, Predicate]], student: StudentRecord) -> Optional[str]:
    for category, predicate in rules:
        if predicate(student):
            return category
    return None


def classify_source(student: StudentRecord) -> Optional[str]:
    return first_match(SOURCE_RULES, student)


def classify_method(student: StudentRecord) -> Optional[str]:
    return first_match(METHOD_RULES, student)
