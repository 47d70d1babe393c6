"""
Static relevance rules for the election-law corpus.

Everything the heuristic booster and the backfill step know about the domain
lives here as plain, immutable data:
- SYNONYMS: one-directional query expansion (query word -> related terms)
- KEYWORD_WEIGHTS: importance multiplier per term (default 1)
- BOOST_RULES: (trigger, indicators, bonus) topic boosts
- BACKFILL_RULES: (trigger, indicators, limit) topic coverage guarantees

To cover a new topic, append a BoostRule / BackfillRule. BM25 and the index
are not involved. Patterns are regular expressions matched against
lowercased text; indicator fields are "title", "category", "filename" and
"content". A rule with a broken pattern or an unknown field never matches.
"""

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)

FIELDS = ("title", "category", "filename", "content")


@lru_cache(maxsize=None)
def compile_pattern(pattern: str) -> Optional[Pattern]:
    """Compile a rule pattern once; invalid patterns yield None (never match)"""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        logger.warning(f"Ignoring invalid rule pattern {pattern!r}: {e}")
        return None


def pattern_matches(pattern: str, text: str) -> bool:
    compiled = compile_pattern(pattern)
    return bool(compiled and text and compiled.search(text))


def indicators_match(indicators: Tuple[Tuple[str, str], ...], fields: Mapping[str, str]) -> bool:
    """True if any (field, pattern) pair matches; unknown fields read as empty"""
    return any(pattern_matches(pattern, fields.get(name, "")) for name, pattern in indicators)


@dataclass(frozen=True)
class BoostRule:
    """Flat bonus when the query hits trigger and any indicator hits its field"""
    name: str
    trigger: str
    indicators: Tuple[Tuple[str, str], ...]
    bonus: float

    def triggered_by(self, query: str) -> bool:
        return pattern_matches(self.trigger, query)

    def indicated_by(self, fields: Mapping[str, str]) -> bool:
        return indicators_match(self.indicators, fields)


@dataclass(frozen=True)
class BackfillRule:
    """Append up to `limit` chunks matching indicators when trigger hits the query"""
    name: str
    trigger: str
    indicators: Tuple[Tuple[str, str], ...]
    limit: int

    def triggered_by(self, query: str) -> bool:
        return pattern_matches(self.trigger, query)

    def indicated_by(self, fields: Mapping[str, str]) -> bool:
        return indicators_match(self.indicators, fields)


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


SYNONYMS: Mapping[str, Tuple[str, ...]] = _frozen({
    "sns": ("인터넷", "정보통신망", "카카오톡", "유튜브", "페이스북", "인스타그램", "블로그", "홈페이지", "전자우편"),
    "문자": ("문자메시지", "문자 메시지", "sms", "자동 동보통신", "82의5"),
    "문자메시지": ("문자", "sms", "자동 동보통신", "82의5"),
    "자동동보통신": ("자동 동보통신", "82의5", "문자메시지", "문자"),
    "공무원": ("선거중립", "선거관여", "§85", "85", "§86", "86", "지방자치단체장", "지자체장"),
    "선거운동": ("§58", "58", "정의"),
    "재외선거": ("재외", "국외부재자", "해외투표", "영사관투표"),
    "학생": ("18세", "미성년", "학교", "교내"),
    "정치자금": ("후원금", "회계책임자", "선거비용", "회계실무"),
})

KEYWORD_WEIGHTS: Mapping[str, int] = _frozen({
    "집회": 15,
    "선거운동": 18,
    "선거운동의 정의": 22,
    "정의": 12,
    "의미": 10,
    "후원금": 12,
    "선거사무소": 12,
    "공무원": 12,
    "홍보물": 12,
    "기부행위": 12,
    "문자메시지": 18,
    "자동동보통신": 20,
    "자동 동보통신": 20,
    "82의5": 18,
    "§82의5": 18,
    "59조": 10,
    "제59조": 12,
    "58조": 10,
    "제58조": 12,
    "sns": 15,
    "예비후보자": 8,
    "제한": 8,
    "금지": 8,
    "허용": 8,
})

# Multiplier per field for each expanded query word (content is per occurrence)
FIELD_WEIGHTS: Mapping[str, int] = _frozen({
    "title": 20,
    "category": 10,
    "filename": 12,
    "content": 3,
})

INTERNET = r"sns|인터넷|정보통신망|홈페이지|전자우편"
ABROAD = r"재외선거|국외부재자|재외|해외투표|영사관"

BOOST_RULES: Tuple[BoostRule, ...] = (
    BoostRule("assembly", r"집회", (("title", r"집회"),), 100),
    BoostRule("internet", INTERNET, (("title", INTERNET),), 100),
    BoostRule("donation", r"후원금", (("title", r"후원금"),), 100),
    BoostRule(
        "campaign_definition",
        r"선거운동.*정의|선거운동이 뭐|선거운동이란",
        (("content", r"법 §58"), ("title", r"선거운동의 정의")),
        150,
    ),
    BoostRule(
        "text_message",
        r"문자|sms|자동|82의5",
        (("content", r"82의5|자동 동보통신|문자메시지"),),
        150,
    ),
    BoostRule(
        "official_neutrality",
        r"공무원|지방자치단체장|지자체장|선거중립|선거관여",
        (("content", r"§85|§86|공무원"), ("title", r"공무원")),
        140,
    ),
    BoostRule("overseas_voting", ABROAD, (("filename", r"재외선거"),), 200),
    BoostRule("student", r"학생|미성년|18세", (("filename", r"학생|정당활동"),), 160),
    BoostRule("campaign_finance", r"정치자금|회계|후원금", (("filename", r"정치자금|회계실무"),), 180),
    BoostRule(
        "speech",
        r"연설|대담|공개장소|마이크|확성장치",
        (
            ("content", r"공개장소\s*연설|연설\s*·\s*대담|확성장치|말\(言\)"),
            ("title", r"공개장소\s*연설|연설\s*·\s*대담|확성장치|말\(言\)"),
        ),
        160,
    ),
    BoostRule(
        "food",
        r"밥|식사|음식|음식물|다과|사줘|제공",
        (
            ("content", r"기부행위|음식물|다과|법\s*§?113|§113|제113조"),
            ("title", r"기부행위|음식물|다과|법\s*§?113|§113|제113조"),
        ),
        170,
    ),
    BoostRule(
        "volunteer",
        r"자원봉사|봉사자|자원 봉사|선거사무관계자|전화\s*자원봉사|콜",
        (
            ("content", r"자원봉사자|선거사무관계자|법\s*§?135|§135|전화를\s*이용|\bars\b"),
            ("title", r"자원봉사자|선거사무관계자|법\s*§?135|§135|전화를\s*이용|\bars\b"),
        ),
        150,
    ),
    BoostRule(
        "preliminary_candidate",
        r"예비후보|예비 후보",
        (
            ("content", r"예비후보자|§60의3|§60의4|명함|공약집"),
            ("title", r"예비후보자|§60의3|§60의4|명함|공약집"),
        ),
        140,
    ),
    BoostRule("minor", r"미성년|18세", (("content", r"18세|미성년자"), ("title", r"18세|미성년자")), 120),
)

BACKFILL_RULES: Tuple[BackfillRule, ...] = (
    BackfillRule(
        "internet",
        INTERNET + r"|이메일",
        (("content", r"인터넷\s*홈페이지|전자우편|sns|카카오톡|유튜브|블로그"),),
        6,
    ),
    BackfillRule("overseas_voting", ABROAD, (("filename", r"재외선거"), ("content", ABROAD)), 8),
    BackfillRule(
        "student",
        r"학생|미성년|18세",
        (("filename", r"학생"), ("content", r"학생|미성년|18세|학교|교내")),
        8,
    ),
    BackfillRule(
        "campaign_finance",
        r"정치자금|회계|후원금|회계책임자|선거비용",
        (("filename", r"정치자금|회계실무"), ("content", r"정치자금|회계|후원금|회계책임자|선거비용")),
        8,
    ),
    BackfillRule(
        "speech",
        r"연설|대담|공개장소|마이크|확성장치|말\(言\)",
        (("content", r"공개장소\s*연설|연설\s*·\s*대담|확성장치|말\(言\)|전화를\s*이용"),),
        6,
    ),
    BackfillRule("food", r"밥|식사|음식|음식물|다과|사줘|제공", (("content", r"음식물|다과|기부행위|§113|제113조"),), 6),
    BackfillRule(
        "volunteer",
        r"자원봉사|봉사자|자원 봉사|전화\s*자원봉사|콜",
        (("content", r"자원봉사자|법\s*§?135|§135|전화를\s*이용|\bars\b"),),
        6,
    ),
    BackfillRule(
        "candidate_profile",
        r"명함|학력|비정규학력|홍보물",
        (("content", r"명함|정규학력|비정규학력|예비후보자홍보물|§60의3|§60의4"),),
        6,
    ),
)


@dataclass(frozen=True)
class RuleSet:
    """Immutable bundle of relevance tables handed to the booster and selector"""
    synonyms: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: SYNONYMS)
    keyword_weights: Mapping[str, int] = field(default_factory=lambda: KEYWORD_WEIGHTS)
    field_weights: Mapping[str, int] = field(default_factory=lambda: FIELD_WEIGHTS)
    boost_rules: Tuple[BoostRule, ...] = BOOST_RULES
    backfill_rules: Tuple[BackfillRule, ...] = BACKFILL_RULES
    verbatim_bonus: float = 50

    def keyword_weight(self, word: str) -> int:
        return self.keyword_weights.get(word, 1)

    def expand(self, words) -> Tuple[str, ...]:
        """Query words plus their synonyms, first occurrence order, no duplicates"""
        expanded = dict.fromkeys(words)
        for word in words:
            for synonym in self.synonyms.get(word, ()):
                expanded.setdefault(synonym.lower())
        return tuple(expanded)


DEFAULT_RULES = RuleSet()
