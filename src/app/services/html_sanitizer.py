"""Políticas de sanitização do corpo HTML.

Cada campanha pode registrar sua própria política; na ausência de registro
vale a política canônica (UGC): remove scripts, handlers de evento e URLs
`javascript:`, mantendo formatação comum, links, imagens e tabelas.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

import nh3

logger = logging.getLogger(__name__)

_UGC_TAGS = frozenset(
    {
        "a", "abbr", "acronym", "address", "b", "bdi", "bdo", "blockquote", "br",
        "caption", "center", "cite", "code", "col", "colgroup", "dd", "del", "details",
        "dfn", "div", "dl", "dt", "em", "figcaption", "figure", "font", "h1", "h2", "h3",
        "h4", "h5", "h6", "hr", "i", "img", "ins", "kbd", "li", "mark", "ol", "p", "pre",
        "q", "rp", "rt", "ruby", "s", "samp", "small", "span", "strike", "strong", "sub",
        "summary", "sup", "table", "tbody", "td", "tfoot", "th", "thead", "time", "tr",
        "tt", "u", "ul", "var", "wbr",
    }
)  # fmt: skip

_UGC_ATTRIBUTES: Mapping[str, frozenset[str]] = {
    "*": frozenset({"dir", "lang", "title", "align"}),
    "a": frozenset({"href", "hreflang", "name"}),
    "img": frozenset({"src", "alt", "height", "width"}),
    "td": frozenset({"colspan", "rowspan", "valign", "width"}),
    "th": frozenset({"colspan", "rowspan", "valign", "width", "scope"}),
    "table": frozenset({"border", "cellpadding", "cellspacing", "width", "summary"}),
    "ol": frozenset({"start", "type", "reversed"}),
    "time": frozenset({"datetime"}),
    "font": frozenset({"color", "face", "size"}),
    "blockquote": frozenset({"cite"}),
    "q": frozenset({"cite"}),
}

_UGC_URL_SCHEMES = frozenset({"http", "https", "mailto", "tel", "cid"})

DEFAULT_POLICY_NAME = "ugc"


@dataclass(frozen=True)
class HtmlSanitizationPolicy:
    """Allowlist de tags, atributos e esquemas de URL aplicada via nh3."""

    name: str
    tags: frozenset[str] = _UGC_TAGS
    attributes: Mapping[str, frozenset[str]] = field(default_factory=lambda: dict(_UGC_ATTRIBUTES))
    url_schemes: frozenset[str] = _UGC_URL_SCHEMES
    link_rel: str | None = "noopener noreferrer"
    strip_comments: bool = True

    def sanitize(self, html: str) -> str:
        if not html:
            return ""
        return nh3.clean(
            html,
            tags=set(self.tags),
            attributes={tag: set(attrs) for tag, attrs in self.attributes.items()},
            url_schemes=set(self.url_schemes),
            link_rel=self.link_rel,
            strip_comments=self.strip_comments,
        )


UGC_POLICY = HtmlSanitizationPolicy(name=DEFAULT_POLICY_NAME)


class SanitizationPolicyRegistry:
    """Lookup de política por campaign_id com fallback para a canônica."""

    def __init__(self, default: HtmlSanitizationPolicy = UGC_POLICY) -> None:
        self._default = default
        self._by_campaign: dict[str, HtmlSanitizationPolicy] = {}

    @property
    def default(self) -> HtmlSanitizationPolicy:
        return self._default

    def register(self, campaign_id: str, policy: HtmlSanitizationPolicy) -> None:
        if not campaign_id:
            raise ValueError("campaign_id é obrigatório para registrar política")
        self._by_campaign[campaign_id] = policy
        logger.info(
            "sanitization_policy_registered",
            extra={"campaign_id": campaign_id, "policy": policy.name},
        )

    def for_campaign(self, campaign_id: str | None) -> HtmlSanitizationPolicy:
        if campaign_id and campaign_id in self._by_campaign:
            return self._by_campaign[campaign_id]
        return self._default


default_policy_registry = SanitizationPolicyRegistry()


def security_policy(
    campaign_id: str | None,
    registry: SanitizationPolicyRegistry | None = None,
) -> HtmlSanitizationPolicy:
    """Retorna a política aplicável à campanha."""
    return (registry or default_policy_registry).for_campaign(campaign_id)
