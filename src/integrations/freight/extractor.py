"""Response extractor for SSW SOAP replies.

SSW embeds its answer (a ``<cotacao>``/``<coleta>`` fragment) as escaped text
inside a ``<return>`` element, but replies have been seen in several shapes:

a. ``<return>`` directly under the SOAP body, its text an escaped fragment
b. the same ``<return>`` nested inside ``<ns1:cotarSiteResponse>``
c. the fragment inline in the body, no wrapper at all
d. nothing usable

``ResponseExtractor.STRATEGIES`` is the order in which the shapes are tried.
A reply that matches none of them is reported as ``Extraction(found=False)``
with a bounded prefix of the raw body; parsing never raises.
"""

from __future__ import annotations

import html
import logging
import re
import warnings
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from bs4 import (
    BeautifulSoup,
    MarkupResemblesLocatorWarning,
    ParserRejectedMarkup,
    Tag,
    XMLParsedAsHTMLWarning,
)

from src.integrations.contracts.freight import RemoteReply
from src.integrations.freight.converters import as_str, to_decimal

logger = logging.getLogger(__name__)

WRAPPER_TAG = "return"
RESULT_ROOTS = ("cotacao", "coleta", "quote")

# Tag names are compared lower-cased; the first non-empty alias wins.
FIELD_TAGS: Dict[str, Tuple[str, ...]] = {
    "outcome": ("erro", "codigo", "outcome"),
    "message": ("mensagem", "msg", "message"),
    "freight": ("frete", "freight"),
    "deadline": ("prazo", "deadline"),
    "quotation_number": ("cotacao", "quotenumber"),
    "token": ("token",),
    "protocol": ("protocolocoleta", "protocolo"),
}

_INTEGER_RE = re.compile(r"^\s*(-?\d{1,9})\s*$")
_LEADING_INT_RE = re.compile(r"^\s*(\d{1,9})(?!\d)")


@dataclass(frozen=True)
class Extraction:
    found: bool
    strategy: str = ""
    fragment: str = ""
    fields: Dict[str, str] = field(default_factory=dict)
    raw_body_prefix: str = ""


def _local_name(name: Optional[str]) -> str:
    return as_str(name).rsplit(":", 1)[-1].lower()


def _parse(markup: str) -> Optional[BeautifulSoup]:
    # SSW replies are XML read with the HTML parser; prefixed names
    # ("ns1:return") arrive as a single lower-cased tag name.
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            return BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as e:
        logger.warning("Reply markup rejected by parser: %s", e)
        return None


class ResponseExtractor:
    STRATEGIES = ("wrapper", "wrapper_search", "raw_body", "decoded_body")

    def __init__(
        self,
        preview_chars: int = 2000,
        wrapper_tag: str = WRAPPER_TAG,
        result_roots: Iterable[str] = RESULT_ROOTS,
        field_tags: Optional[Dict[str, Tuple[str, ...]]] = None,
    ):
        self.preview_chars = preview_chars
        self.wrapper_tag = wrapper_tag.lower()
        self.result_roots = tuple(r.lower() for r in result_roots)
        self.field_tags = field_tags or FIELD_TAGS

    def extract(self, raw_body) -> Extraction:
        raw = as_str(raw_body)
        decoded_wrapper = self._wrapper_text(raw)

        for strategy in self.STRATEGIES:
            fragment = self._run_strategy(strategy, raw, decoded_wrapper)
            if fragment is not None:
                logger.debug("SSW result fragment found via %s", strategy)
                return Extraction(
                    found=True,
                    strategy=strategy,
                    fragment=str(fragment),
                    fields=self.read_fields(fragment),
                    raw_body_prefix=raw[: self.preview_chars],
                )

        logger.warning("No SSW result payload in reply (%d chars)", len(raw))
        return Extraction(found=False, raw_body_prefix=raw[: self.preview_chars])

    def _run_strategy(self, strategy: str, raw: str, decoded_wrapper: Optional[str]) -> Optional[Tag]:
        if strategy == "wrapper":
            return self._top_level_fragment(decoded_wrapper) if decoded_wrapper else None
        if strategy == "wrapper_search":
            return self._find_fragment(decoded_wrapper) if decoded_wrapper else None
        if strategy == "raw_body":
            return self._find_fragment(raw)
        if strategy == "decoded_body":
            decoded = html.unescape(raw)
            return self._find_fragment(decoded) if decoded != raw else None
        raise ValueError(f"Unknown extraction strategy: {strategy}")

    # -- wrapper ------------------------------------------------------------

    def _wrapper_text(self, raw: str) -> Optional[str]:
        soup = _parse(raw)
        if soup is None:
            return None
        wrapper = soup.find(lambda t: _local_name(t.name) == self.wrapper_tag)
        if wrapper is None:
            return None

        if wrapper.find(True) is not None:
            # fragment sent as markup instead of escaped text
            return wrapper.decode_contents().strip()

        text = wrapper.get_text()
        if "<" not in text and "&lt;" in text:
            text = html.unescape(text)
        return text.strip()

    # -- fragment lookup -----------------------------------------------------

    def _is_root(self, tag: Tag) -> bool:
        return _local_name(tag.name) in self.result_roots

    def _top_level_fragment(self, markup: str) -> Optional[Tag]:
        soup = _parse(markup)
        if soup is None:
            return None
        first = soup.find(True, recursive=False)
        if first is not None and self._is_root(first):
            return first
        return None

    def _find_fragment(self, markup: str) -> Optional[Tag]:
        soup = _parse(markup)
        if soup is None:
            return None
        return soup.find(self._is_root)

    # -- fields ---------------------------------------------------------------

    def read_field(self, fragment: Tag, names: Iterable[str]) -> str:
        for name in names:
            tag = fragment.find(lambda t, n=name: _local_name(t.name) == n)
            if tag is None:
                continue
            text = tag.get_text(strip=True)
            if text:
                return text
        return ""

    def read_fields(self, fragment: Tag) -> Dict[str, str]:
        return {key: self.read_field(fragment, names) for key, names in self.field_tags.items()}

    def to_reply(self, extraction: Extraction) -> RemoteReply:
        fields = extraction.fields
        raw_outcome = fields.get("outcome", "")
        outcome_match = _INTEGER_RE.match(raw_outcome)
        deadline_match = _LEADING_INT_RE.match(fields.get("deadline", ""))

        return RemoteReply(
            outcome_code=int(outcome_match.group(1)) if outcome_match else None,
            raw_outcome=raw_outcome,
            message=fields.get("message", ""),
            freight_value=to_decimal(fields.get("freight")),
            deadline_days=int(deadline_match.group(1)) if deadline_match else None,
            quotation_number=fields.get("quotation_number", ""),
            token=fields.get("token", ""),
            protocol=fields.get("protocol", ""),
        )
