"""
Shortcode policy evaluation.

Recovers shortcode directives from an article body, checks their parameters
and reports unknown or missing monetization shortcodes.

Supported formats:
- [ge_monetization category_id="X" concentration_id="Y" level="Z"] (legacy)
- [degree_table category="X" concentration="Y" level="Z" max="5" sponsored_first="true"]
- [degree_offer program_id="X" school_id="Y" highlight="true"]
- [ge_internal_link url="/path"]text[/ge_internal_link]
- [ge_external_cited url="https://..."]text[/ge_external_cited]

Registry lookups are best-effort: an unreachable registry leaves the
instance unverified, it never fails the check.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from .models import (
    MONETIZATION_TYPES,
    InvalidReferenceError,
    MonetizationPresence,
    ShortcodeConfig,
    ShortcodeInstance,
    ShortcodeParamCheck,
    ShortcodeToken,
    ShortcodeType,
    UnknownShortcodeCheck,
)
from .ports import IdentifierRegistryPort

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\[(\/?)([\w-]+)([^\]]*)\]")
_ATTR_RE = re.compile(r"""([\w-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")

_TRUE_FALSE = ("true", "false")

# Types whose identifiers live in the registry
REGISTRY_CHECKED_TYPES = frozenset({ShortcodeType.MONETIZATION, ShortcodeType.DEGREE_TABLE})


# --- Parsing helpers ---


def tokenize(html: str | None) -> list[ShortcodeToken]:
    """Every shortcode-like token: [tag ...] or [/tag]."""
    if not html:
        return []
    return [
        ShortcodeToken(
            raw=m.group(0),
            tag=m.group(2).lower(),
            is_closing=m.group(1) == "/",
            attributes=m.group(3).strip(),
            position=m.start(),
        )
        for m in _TOKEN_RE.finditer(html)
    ]


def parse_params(attributes: str) -> dict[str, str]:
    return {
        m.group(1).lower(): m.group(2) if m.group(2) is not None else m.group(3)
        for m in _ATTR_RE.finditer(attributes)
    }


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    value = value.strip()
    if not value.lstrip("-").isdigit():
        return None
    return int(value)


def _is_positive_int(value: str | None) -> bool:
    number = _to_int(value)
    return number is not None and number > 0


def _flag(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.strip().lower() != "false"


# --- Tag registry ---


class ShortcodeTagRegistry:
    """Explicit tag -> type mapping."""

    def __init__(self, config: ShortcodeConfig) -> None:
        self._types = dict(config.tags)
        self._passthrough = frozenset(config.extra_allowed_tags)

    def resolve(self, tag: str) -> ShortcodeType:
        tag = tag.lower()
        if tag in self._types:
            return self._types[tag]
        if tag in self._passthrough:
            return ShortcodeType.PASSTHROUGH
        return ShortcodeType.UNRECOGNIZED

    def is_allowed(self, tag: str, extra_allowlist: tuple[str, ...] = ()) -> bool:
        if self.resolve(tag) != ShortcodeType.UNRECOGNIZED:
            return True
        return tag.lower() in {t.lower() for t in extra_allowlist}

    @property
    def known_tags(self) -> tuple[str, ...]:
        return tuple(self._types)


# --- Evaluator ---


class ShortcodePolicyEvaluator:
    """
    Shortcode extraction and policy checks.

    The identifier registry is optional; without it monetization
    shortcodes are checked structurally only.
    """

    def __init__(
        self,
        config: ShortcodeConfig | None = None,
        registry: IdentifierRegistryPort | None = None,
    ) -> None:
        self._config = config or ShortcodeConfig.default()
        self._tags = ShortcodeTagRegistry(self._config)
        self._registry = registry

    @property
    def tags(self) -> ShortcodeTagRegistry:
        return self._tags

    @property
    def has_registry(self) -> bool:
        return self._registry is not None

    # --- Extraction ---

    def extract(self, html: str | None) -> list[ShortcodeInstance]:
        """
        Parse all shortcode instances in order of appearance.

        Closing tags of paired shortcodes are folded into their opener.
        Closing tags of other known types carry no information and are dropped.
        """
        tokens = tokenize(html)
        body = html or ""
        consumed: set[int] = set()
        instances: list[ShortcodeInstance] = []

        for index, token in enumerate(tokens):
            if index in consumed:
                continue

            sc_type = self._tags.resolve(token.tag)

            if token.is_closing:
                if sc_type == ShortcodeType.UNRECOGNIZED:
                    instances.append(
                        ShortcodeInstance(
                            tag=token.tag,
                            type=sc_type,
                            raw=token.raw,
                            position=token.position,
                            is_closing=True,
                        )
                    )
                continue

            raw = token.raw
            anchor_text = None
            if sc_type.is_paired:
                closer = self._find_closer(tokens, index)
                if closer is not None:
                    consumed.add(closer)
                    closing = tokens[closer]
                    anchor_text = body[token.end : closing.position]
                    raw = body[token.position : closing.end]

            instances.append(
                self._build_instance(token, sc_type, raw, anchor_text)
            )

        return instances

    @staticmethod
    def _find_closer(tokens: list[ShortcodeToken], opener: int) -> int | None:
        tag = tokens[opener].tag
        for index in range(opener + 1, len(tokens)):
            candidate = tokens[index]
            if candidate.tag != tag:
                continue
            if candidate.is_closing:
                return index
            # Another opener of the same tag before any closer: unpaired
            return None
        return None

    def _build_instance(
        self,
        token: ShortcodeToken,
        sc_type: ShortcodeType,
        raw: str,
        anchor_text: str | None,
    ) -> ShortcodeInstance:
        params = parse_params(token.attributes)
        base = {
            "tag": token.tag,
            "type": sc_type,
            "raw": raw,
            "position": token.position,
            "params": params,
        }

        match sc_type:
            case ShortcodeType.MONETIZATION:
                return ShortcodeInstance(
                    **base,
                    category_id=_to_int(params.get("category_id")),
                    concentration_id=_to_int(params.get("concentration_id")),
                    level_code=_to_int(params.get("level")),
                )
            case ShortcodeType.DEGREE_TABLE:
                max_programs = _to_int(params.get("max"))
                sponsored_first = _flag(params.get("sponsored_first"))
                return ShortcodeInstance(
                    **base,
                    category_id=_to_int(params.get("category")),
                    concentration_id=_to_int(params.get("concentration")),
                    level_code=_to_int(params.get("level")),
                    max_programs=5 if max_programs is None else max_programs,
                    sponsored_first=True if sponsored_first is None else sponsored_first,
                )
            case ShortcodeType.DEGREE_OFFER:
                highlight = _flag(params.get("highlight"))
                return ShortcodeInstance(
                    **base,
                    program_id=params.get("program_id") or None,
                    school_id=params.get("school_id") or None,
                    highlight=True if highlight is None else highlight,
                )
            case ShortcodeType.INTERNAL_LINK | ShortcodeType.EXTERNAL_CITED:
                return ShortcodeInstance(
                    **base,
                    url=params.get("url") or None,
                    anchor_text=anchor_text,
                )
            case ShortcodeType.PASSTHROUGH | ShortcodeType.UNRECOGNIZED:
                return ShortcodeInstance(**base)

    # --- Parameter validation ---

    def structural_errors(self, instance: ShortcodeInstance) -> list[str]:
        """Parameter rules that need no registry."""
        params = instance.params
        errors: list[str] = []

        match instance.type:
            case ShortcodeType.MONETIZATION:
                for name in ("category_id", "concentration_id"):
                    if not _is_positive_int(params.get(name)):
                        errors.append(f"{name} must be a positive integer")
                if "level" in params and not _is_positive_int(params["level"]):
                    errors.append("level must be a positive integer")
            case ShortcodeType.DEGREE_TABLE:
                for name in ("category", "concentration"):
                    if not _is_positive_int(params.get(name)):
                        errors.append(f"{name} must be a positive integer")
                for name in ("level", "max"):
                    if name in params and not _is_positive_int(params[name]):
                        errors.append(f"{name} must be a positive integer")
                if (
                    "sponsored_first" in params
                    and params["sponsored_first"].strip().lower() not in _TRUE_FALSE
                ):
                    errors.append('sponsored_first must be "true" or "false"')
            case ShortcodeType.DEGREE_OFFER:
                if not (params.get("program_id") or "").strip():
                    errors.append("program_id is required")
                if (
                    "highlight" in params
                    and params["highlight"].strip().lower() not in _TRUE_FALSE
                ):
                    errors.append('highlight must be "true" or "false"')
            case ShortcodeType.INTERNAL_LINK | ShortcodeType.EXTERNAL_CITED:
                if not (params.get("url") or "").strip():
                    errors.append("url is required")
            case ShortcodeType.PASSTHROUGH:
                pass
            case ShortcodeType.UNRECOGNIZED:
                errors.append(f"Unknown shortcode tag: {instance.tag}")

        return errors

    def verify_references(self, instance: ShortcodeInstance) -> None:
        """
        Confirm the instance's identifiers exist in the registry.
        Raises InvalidReferenceError for the first missing identifier.
        Other exceptions from the registry propagate.
        """
        if self._registry is None or instance.type not in REGISTRY_CHECKED_TYPES:
            return
        if instance.category_id is not None and instance.concentration_id is not None:
            category = self._registry.get_category(
                instance.category_id, instance.concentration_id
            )
            if category is None:
                raise InvalidReferenceError(
                    "category_id/concentration_id",
                    (instance.category_id, instance.concentration_id),
                    f"Invalid category_id ({instance.category_id}) or "
                    f"concentration_id ({instance.concentration_id})",
                )
        if instance.level_code is not None:
            if self._registry.get_level(instance.level_code) is None:
                raise InvalidReferenceError(
                    "level",
                    instance.level_code,
                    f"Invalid level code: {instance.level_code}",
                )

    def validate_params(
        self, instance: ShortcodeInstance, use_registry: bool = True
    ) -> ShortcodeParamCheck:
        errors = self.structural_errors(instance)
        if errors:
            return ShortcodeParamCheck(is_valid=False, errors=tuple(errors))

        if instance.type not in REGISTRY_CHECKED_TYPES:
            return ShortcodeParamCheck(is_valid=True)

        if not use_registry or self._registry is None:
            return ShortcodeParamCheck(is_valid=True, verified=False)

        try:
            self.verify_references(instance)
        except InvalidReferenceError as e:
            return ShortcodeParamCheck(is_valid=False, errors=(str(e),))
        except Exception as e:
            logger.warning(
                "Identifier registry unavailable, %s left unverified: %s", instance.raw, e
            )
            return ShortcodeParamCheck(is_valid=True, verified=False)

        return ShortcodeParamCheck(is_valid=True)

    # --- Unknown shortcodes ---

    def find_unknown(
        self, html: str | None, extra_allowlist: tuple[str, ...] = ()
    ) -> list[ShortcodeToken]:
        return [
            token
            for token in tokenize(html)
            if not self._tags.is_allowed(token.tag, extra_allowlist)
        ]

    def check_unknown(
        self,
        html: str | None,
        block_unknown: bool = True,
        extra_allowlist: tuple[str, ...] = (),
    ) -> UnknownShortcodeCheck:
        unknown = self.find_unknown(html, extra_allowlist)
        if not unknown:
            return UnknownShortcodeCheck(is_valid=True)

        unique_tags = tuple(dict.fromkeys(token.tag for token in unknown))
        return UnknownShortcodeCheck(
            is_valid=not block_unknown,
            unknown=tuple(unknown),
            unique_tags=unique_tags,
            message=(
                f"Found {len(unknown)} unknown shortcode(s): {', '.join(unique_tags)}"
            ),
        )

    # --- Monetization presence ---

    def check_monetization_presence(self, html: str | None) -> MonetizationPresence:
        monetization = [i for i in self.extract(html) if i.type in MONETIZATION_TYPES]
        breakdown = {
            sc_type.value: sum(1 for i in monetization if i.type == sc_type)
            for sc_type in (
                ShortcodeType.DEGREE_TABLE,
                ShortcodeType.DEGREE_OFFER,
                ShortcodeType.MONETIZATION,
            )
        }

        recommendation = None
        if not monetization:
            recommendation = (
                "Add at least one monetization shortcode "
                "(degree_table or degree_offer recommended)"
            )
        elif breakdown[ShortcodeType.MONETIZATION.value] == len(monetization):
            recommendation = (
                "Consider upgrading legacy ge_monetization shortcodes "
                "to degree_table or degree_offer format"
            )

        return MonetizationPresence(
            has_monetization=bool(monetization),
            count=len(monetization),
            breakdown=breakdown,
            recommendation=recommendation,
            shortcodes=tuple(monetization),
        )


# --- Generators ---


def build_monetization_shortcode(
    category_id: int | None,
    concentration_id: int | None,
    level_code: int | None = None,
) -> str:
    if not category_id or not concentration_id:
        raise ValueError("category_id and concentration_id are required")
    shortcode = f'[ge_monetization category_id="{category_id}" concentration_id="{concentration_id}"'
    if level_code:
        shortcode += f' level="{level_code}"'
    return shortcode + "]"


def build_degree_table_shortcode(
    category_id: int | None,
    concentration_id: int | None,
    level_code: int | None = None,
    max_programs: int = 5,
    sponsored_first: bool = True,
) -> str:
    if not category_id or not concentration_id:
        raise ValueError("category_id and concentration_id are required")
    shortcode = f'[degree_table category="{category_id}" concentration="{concentration_id}"'
    if level_code:
        shortcode += f' level="{level_code}"'
    shortcode += f' max="{max_programs}"'
    shortcode += f' sponsored_first="{str(sponsored_first).lower()}"'
    return shortcode + "]"


def build_degree_offer_shortcode(
    program_id: str | None,
    school_id: str | None = None,
    highlight: bool = True,
) -> str:
    if not program_id:
        raise ValueError("program_id is required")
    shortcode = f'[degree_offer program_id="{program_id}"'
    if school_id:
        shortcode += f' school_id="{school_id}"'
    shortcode += f' highlight="{str(highlight).lower()}"'
    return shortcode + "]"


def build_internal_link_shortcode(
    url: str | None,
    anchor_text: str,
    local_domains: tuple[str, ...] = ("geteducated.com", "www.geteducated.com"),
) -> str:
    """Internal link shortcode; absolute URLs on the local site become paths."""
    if not url:
        raise ValueError("url is required")
    clean_url = url
    parts = urlsplit(url)
    if parts.hostname and parts.hostname.lower() in local_domains:
        clean_url = parts.path or "/"
        if parts.query:
            clean_url += f"?{parts.query}"
        if parts.fragment:
            clean_url += f"#{parts.fragment}"
    return f'[ge_internal_link url="{clean_url}"]{anchor_text}[/ge_internal_link]'


def build_external_citation_shortcode(url: str | None, anchor_text: str) -> str:
    if not url:
        raise ValueError("url is required")
    return f'[ge_external_cited url="{url}"]{anchor_text}[/ge_external_cited]'
