"""Reduce a provider's raw output to a single asset URL.

Hosted model outputs come in several shapes: a bare URL string, a list whose
first element is the URL, a mapping or object carrying ``url`` (either the URL
itself or a zero-argument accessor returning it) and, for older audio models, a
mapping carrying ``audio``. :func:`classify_output` turns the raw value into one
of three variants with a single ordered match:

    1. non-empty list/tuple        -> LiteralUrl(element 0)
    2. ``url`` field               -> DeferredUrl if callable, else LiteralUrl
    3. ``audio`` field (audio only) -> LiteralUrl
    4. string starting with http   -> LiteralUrl
    otherwise                      -> NoMatch

:func:`normalize_output` resolves the variant and validates the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union

from core.exceptions import EmptyProviderResponseError, MalformedAssetUrlError
from core.observability import render_payload_preview
from features.generation.models import MediaKind

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True)
class LiteralUrl:
    """A value taken directly from the output."""

    value: Any
    rule: str


@dataclass(frozen=True)
class DeferredUrl:
    """A zero-argument accessor that yields the value when invoked."""

    accessor: Callable[[], Any]
    rule: str = "url"


@dataclass(frozen=True)
class NoMatch:
    """No extraction rule applied to the output."""

    rule: str = "none"


ProviderOutput = Union[LiteralUrl, DeferredUrl, NoMatch]


def _field(raw: Any, name: str) -> Any:
    """Return ``raw[name]`` for mappings or ``raw.name`` for objects."""

    if raw is None or isinstance(raw, (str, bytes, bytearray, list, tuple)):
        return _MISSING
    if isinstance(raw, Mapping):
        return raw[name] if name in raw else _MISSING
    return getattr(raw, name, _MISSING)


def classify_output(raw: Any, media_kind: MediaKind) -> ProviderOutput:
    """Match ``raw`` against the extraction rules in order."""

    if isinstance(raw, (list, tuple)):
        if raw:
            return LiteralUrl(raw[0], rule="array")
        return NoMatch()

    url_field = _field(raw, "url")
    if url_field is not _MISSING:
        if callable(url_field):
            return DeferredUrl(url_field)
        return LiteralUrl(url_field, rule="url")

    if media_kind is MediaKind.AUDIO:
        audio_field = _field(raw, "audio")
        if audio_field is not _MISSING:
            return LiteralUrl(audio_field, rule="audio")

    if isinstance(raw, str) and raw.startswith("http"):
        return LiteralUrl(raw, rule="string")

    return NoMatch()


def classify_array_only(raw: Any) -> ProviderOutput:
    """Apply only the list rule; used for fallback model outputs."""

    if isinstance(raw, (list, tuple)) and raw:
        return LiteralUrl(raw[0], rule="array")
    return NoMatch()


def resolve_output(output: ProviderOutput) -> Any:
    """Return the extracted value, invoking deferred accessors."""

    if isinstance(output, LiteralUrl):
        return output.value
    if isinstance(output, DeferredUrl):
        try:
            return output.accessor()
        except Exception as exc:
            logger.error("Error calling output url accessor: %s", exc)
            return None
    return None


def _is_empty(value: Any) -> bool:
    # Any falsy value (None, "", [], {}, 0, False) carries no URL
    return not value


def validate_asset_url(
    value: Any,
    raw: Any,
    *,
    provider: str | None = None,
) -> str:
    """Return ``value`` when it is a usable http(s) URL, else raise."""

    if _is_empty(value):
        raise EmptyProviderResponseError(
            "Provider output contained no asset URL",
            provider=provider,
            raw_output=raw,
        )
    if not isinstance(value, str) or not value.startswith("http"):
        raise MalformedAssetUrlError(
            f"Provider returned a non-http asset reference: {render_payload_preview(value)}",
            provider=provider,
            value=value,
        )
    return value


def normalize_output(
    raw: Any,
    media_kind: MediaKind,
    *,
    provider: str | None = None,
    array_only: bool = False,
) -> str:
    """Return the asset URL carried by ``raw``.

    Raises:
        EmptyProviderResponseError: no rule matched or the value was empty.
        MalformedAssetUrlError: the value does not start with ``http``.
    """

    output = classify_array_only(raw) if array_only else classify_output(raw, media_kind)
    value = resolve_output(output)
    url = validate_asset_url(value, raw, provider=provider)
    logger.debug("Extracted %s URL via %s rule: %s", media_kind.value, output.rule, url)
    return url


__all__ = [
    "DeferredUrl",
    "LiteralUrl",
    "NoMatch",
    "ProviderOutput",
    "classify_array_only",
    "classify_output",
    "normalize_output",
    "resolve_output",
    "validate_asset_url",
]
