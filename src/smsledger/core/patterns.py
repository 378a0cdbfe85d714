"""Pattern tables used by the extractors, the classifier, and the gate.

Tables are plain data so tests can enumerate them independently of the
matching code. Regex fragments are compiled once at import time.
"""

from __future__ import annotations

import re
from typing import Iterable

# SAR-equivalent currency tokens. Regional tokens are matched but the amount
# is still treated as SAR.
CURRENCY_TOKENS = [
    "SAR",
    "SAU",
    "RAS",
    "SR",
    "ر.س",
    "ريال",
    "د.إ",
    "دينار",
    "درهم",
]

NUMBER_FRAGMENT = r"\d+(?:,\d{3})*(?:\.\d{1,2})?"

# A number must not sit inside a longer digit run ("1,2345", "45.505");
# an overrun grammar means no amount, not a truncated one.
NUMBER_BEFORE = r"(?<!\d)(?<!\d[.,])"
NUMBER_AFTER = r"(?![\d.,]*\d)"

CARD_ANCHORS = [
    "ending in",
    "ending",
    "بطاقة رقم",
    "بطاقة",
    "تنتهي بـ",
    "تنتهي ب",
    ".",
    "*",
]

MERCHANT_ANCHORS = [
    "شراء من",
    "at",
    "to",
    "from",
    "لدى",
    "من",
    "في",
]

MERCHANT_TERMINATORS = [
    "on",
    "dated",
    "date",
    "time",
    "using",
    "with",
    "via",
    "for",
    "card",
    "ending",
    "at",
    "to",
    "from",
    "في",
    "بتاريخ",
    "ببطاقة",
    "بطاقة",
    "عبر",
    "لدى",
    "من",
]

# Arabic prefix particles glued to the next word, so no word boundary.
MERCHANT_PREFIX_TERMINATORS = [
    "بـ",
]

MERCHANT_STOP_WORDS = [
    "on",
    "completed",
    "successfully",
    "using",
    "card",
    "ending",
    "at",
    "with",
    "حسابك",
    "حسابكم",
    "بطاقتك",
]

# Declaration order is evaluation order: the first matching category wins.
# (name, pattern, also_match_body)
CATEGORY_TABLE = [
    (
        "transport",
        r"uber|careem|bolt|jeeny|taxi|gas|petrol|fuel|station|aldrees|sasco|parking"
        r"|أوبر|كريم|بنزين|محطة|الدريس|ساسكو|وقود|مواقف",
        False,
    ),
    (
        "groceries",
        r"market|grocery|food|panda|lulu|carrefour|othaim|danube|tamimi|bindawood|nesto"
        r"|بندة|بنده|لولو|كارفور|عثيم|دانوب|التميمي|بن داود|سوبرماركت|تموينات",
        False,
    ),
    (
        "dining",
        r"restaurant|cafe|coffee|starbucks|burger|pizza|kfc|mcdonald|albaik|shawarma"
        r"|dunkin|hungerstation|jahez"
        r"|مطعم|مقهى|كافيه|قهوة|البيك|شاورما|برجر|بيتزا|هنقرستيشن|جاهز",
        False,
    ),
    (
        "utilities",
        r"\bstc\b(?!\s?pay)|mobily|zain|electricity|water bill|sadad|internet bill|bill payment"
        r"|الكهرباء|المياه|فاتورة|سداد|موبايلي",
        True,
    ),
    (
        "health",
        r"hospital|pharmacy|pharma|clinic|medical|dental|\bdr\b|nahdi|dawaa"
        r"|مستشفى|صيدلية|عيادة|النهدي|الدواء|طبي",
        False,
    ),
    (
        "transfer",
        r"transfer|remittance|stc\s?pay|urpay|wallet|\bpay\b"
        r"|تحويل|حوالة|محفظة",
        False,
    ),
    (
        "shopping",
        r"mall|store|shop|amazon|\bnoon\b|namshi|shein|ikea|jarir|extra|centrepoint|zara"
        r"|مول|متجر|جرير|اكسترا|نون|أمازون|ايكيا",
        False,
    ),
    (
        "entertainment",
        r"netflix|shahid|spotify|anghami|cinema|\bvox\b|muvi|playstation|steam|game"
        r"|نتفليكس|شاهد|سينما|ألعاب",
        False,
    ),
    (
        "travel",
        r"airline|airways|flynas|flyadeal|saudia|hotel|booking|airbnb|agoda|expedia"
        r"|almosafer|flight|طيران|فندق|المسافر|حجز",
        False,
    ),
]

# Substring containment, no word boundaries.
TRANSACTION_KEYWORDS = [
    "purchase",
    "spent",
    "debit",
    "withdraw",
    "transfer",
    "paid",
    "pos",
    "atm",
    "online",
    "declined",
    "شراء",
    "دفع",
    "سحب",
    "تحويل",
    "صرف",
    "مشتريات",
    "خصم",
    "مرفوضة",
]


def _alternation(tokens: Iterable[str]) -> str:
    return "|".join(re.escape(token) for token in tokens)


def _currency_alternation(tokens: Iterable[str]) -> str:
    # Latin tokens must not be glued to other Latin letters ("USR", "SARI").
    parts = []
    for token in tokens:
        escaped = re.escape(token)
        if token.isascii() and token.isalpha():
            escaped = rf"(?<![A-Za-z]){escaped}(?![A-Za-z])"
        parts.append(escaped)
    return "|".join(parts)


_CURRENCY = _currency_alternation(CURRENCY_TOKENS)

AMOUNT_PATTERN = re.compile(
    rf"(?:{_CURRENCY})\s*({NUMBER_FRAGMENT}){NUMBER_AFTER}"
    rf"|{NUMBER_BEFORE}({NUMBER_FRAGMENT}){NUMBER_AFTER}\s*(?:{_CURRENCY})",
    re.IGNORECASE,
)

CARD_PATTERN = re.compile(
    rf"(?:{_alternation(CARD_ANCHORS)})\s*(\d{{4}})(?!\d)",
    re.IGNORECASE,
)

_TERMINATOR_WORDS = _alternation(MERCHANT_TERMINATORS)

MERCHANT_PATTERN = re.compile(
    rf"(?:(?<!\S)(?:{_alternation(MERCHANT_ANCHORS)})\s+|@\s*)"
    r"([A-Za-z0-9\u0600-\u06FF \t_&'\-]+?)"
    rf"(?=\s+(?:(?:{_TERMINATOR_WORDS})(?!\w)|{_alternation(MERCHANT_PREFIX_TERMINATORS)})|\s*[.,،\n]|\s*$)",
    re.IGNORECASE,
)
