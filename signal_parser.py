# file: signal_parser.py
import re
from typing import Dict, List, Optional, Set, Union

from models import Direction, ParsedInstruction, ParseError
from trade_logger import log_event

NUM = r'\d+(?:\.\d+)*'
# Run of numbers: "1870-1860-1850" or "1870 1860"
NUM_RUN = NUM + r'(?:(?:\s*-\s*|\s+)' + NUM + r')*'
DASH_RUN = NUM + r'(?:\s*-\s*' + NUM + r')*'

SYMBOL_RE = re.compile(r'\b[A-Za-z]{6}\b')
ENTRY_RE = re.compile(r'@\s*(' + NUM + r')(?:\s*-\s*(' + NUM + r'))?')
# Not glued to a preceding letter ("tsl"), but may follow a digit: "@1.1250sl1.12"
STOP_LOSS_RE = re.compile(r'(?<![A-Za-z])sl\s*:?\s*(' + NUM + r')', re.IGNORECASE)
TARGETS_RE = re.compile(r'\b(?:targets?|tp\d*)\b\s*:?\s*(' + NUM_RUN + r')', re.IGNORECASE)
RANGE_RE = re.compile(r'\brange\s*:\s*(' + DASH_RUN + r')', re.IGNORECASE)
NUMBER_RE = re.compile(NUM)
# Bare token: starts with a digit and is not glued to a preceding word ("TP1", "H4")
BARE_TOKEN_RE = re.compile(r'(?<![\w.])\d[\w.]*')

GOLD_SYMBOL = "XAUUSD"
CURRENCY_CODES = {
    "USD", "EUR", "GBP", "JPY", "CHF", "AUD", "NZD", "CAD",
    "SEK", "NOK", "DKK", "SGD", "HKD", "ZAR", "MXN", "TRY",
    "PLN", "CNH", "XAU", "XAG",
}
# Upper-case 6-letter words that show up in instructions but are not instruments
RESERVED_WORDS = {"TARGET", "PROFIT", "SIGNAL", "MARKET"}


def _to_float(token: str) -> Optional[float]:
    try:
        return float(token)
    except ValueError:
        return None


def _is_pair_code(token: str) -> bool:
    upper = token.upper()
    if upper == GOLD_SYMBOL:
        return True
    if upper in RESERVED_WORDS:
        return False
    if token.isupper():
        return True
    return upper[:3] in CURRENCY_CODES and upper[3:] in CURRENCY_CODES


def extract_symbol(text: str) -> str:
    """Первый код инструмента в тексте (EURUSD, XAUUSD ...) или пустая строка."""
    for match in SYMBOL_RE.finditer(text):
        if _is_pair_code(match.group(0)):
            return match.group(0).upper()
    return ""


def extract_direction(text: str) -> Direction:
    # Binary rule: any "buy" means BUY, everything else is SELL
    return Direction.BUY if 'buy' in text.lower() else Direction.SELL


def _claim(claimed: Set[int], start: int, end: int):
    claimed.update(range(start, end))


def _numbers_in_group(text: str, match: re.Match, group: int, claimed: Set[int]) -> List[float]:
    """Numbers of a matched run, in order. Already claimed positions are skipped."""
    values = []
    offset = match.start(group)
    for number in NUMBER_RE.finditer(match.group(group)):
        start, end = offset + number.start(), offset + number.end()
        if start in claimed:
            continue
        _claim(claimed, start, end)
        value = _to_float(number.group(0))
        if value is not None:
            values.append(value)
    return values


def _extract_entry(text: str, fields: Dict, claimed: Set[int]):
    match = ENTRY_RE.search(text)
    if not match:
        return
    _claim(claimed, match.start(1), match.end(1))
    entry_min = _to_float(match.group(1))
    entry_max = None
    if match.group(2):
        _claim(claimed, match.start(2), match.end(2))
        entry_max = _to_float(match.group(2))
    if entry_min is None:
        # a zone without a lower bound is not a zone
        return
    fields['entry_min'] = entry_min
    fields['entry_max'] = entry_max


def _extract_stop_loss(text: str, fields: Dict, claimed: Set[int]):
    for match in STOP_LOSS_RE.finditer(text):
        if match.start(1) in claimed:
            continue
        _claim(claimed, match.start(1), match.end(1))
        fields['stop_loss'] = _to_float(match.group(1))
        return


def _extract_explicit_targets(text: str, fields: Dict, claimed: Set[int]):
    for match in TARGETS_RE.finditer(text):
        fields['targets'].extend(_numbers_in_group(text, match, 1, claimed))


def _extract_range_targets(text: str, fields: Dict, claimed: Set[int]):
    for match in RANGE_RE.finditer(text):
        fields['targets'].extend(_numbers_in_group(text, match, 1, claimed))


def _extract_fallback_targets(text: str, fields: Dict, claimed: Set[int]):
    for match in BARE_TOKEN_RE.finditer(text):
        token = match.group(0).rstrip('.')
        if not re.fullmatch(r'[\d.]+', token):
            continue
        start = match.start()
        if start in claimed:
            continue
        _claim(claimed, start, start + len(token))
        value = _to_float(token)
        if value is not None:
            fields['targets'].append(value)


# Порядок важен: каждое правило забирает позиции, которые следующие уже не трогают.
PRICE_RULES = (
    _extract_entry,
    _extract_stop_loss,
    _extract_explicit_targets,
    _extract_range_targets,
    _extract_fallback_targets,
)


def parse_instruction(text: str) -> Union[ParsedInstruction, ParseError]:
    """
    Parses a free-text instruction like "Buy EURUSD @1.1250 SL:1.1200 Targets: 1.1300".

    Missing parts are left empty; only an internal failure produces a ParseError.
    """
    try:
        fields = {'targets': []}
        claimed: Set[int] = set()
        for rule in PRICE_RULES:
            rule(text, fields, claimed)

        return ParsedInstruction(
            symbol=extract_symbol(text),
            direction=extract_direction(text),
            entry_min=fields.get('entry_min'),
            entry_max=fields.get('entry_max'),
            stop_loss=fields.get('stop_loss'),
            targets=tuple(fields['targets']),
        )
    except (re.error, TypeError, AttributeError) as e:
        log_event("PARSE_FAULT", {"error": str(e), "input_type": type(text).__name__})
        return ParseError(detail=str(e))
