"""
Set-difference comparison of attribute keys.

``compare()`` is the only place that decides whether an entity carries
the keys a convention requires.  It looks at key presence only; values
and repeated keys are irrelevant.  Output order follows first appearance
in the inputs so log lines and assertions are stable.

Usage::

    from semconv_checker.compliance.comparator import compare

    result = compare(
        required=("http.request.method", "http.response.status_code"),
        observed=("http.request.method", "custom.tag"),
        ignore={"custom.tag"},
    )
    result.missing  # ("http.response.status_code",)
    result.extra    # ()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class ComparisonResult:
    """Missing and extra keys of one checked entity, ignore list applied."""

    missing: tuple[str, ...] = ()
    extra: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """True when nothing required is missing; extras never fail."""
        return not self.missing


def _ordered(keys: Optional[Iterable[str]]) -> tuple[str, ...]:
    if keys is None:
        return ()
    return tuple(dict.fromkeys(keys))


def compare(
    required: Iterable[str],
    observed: Optional[Iterable[str]],
    ignore: Optional[Iterable[str]] = None,
) -> ComparisonResult:
    """Compare required keys against observed keys.

    ``missing`` is ``required - observed`` and ``extra`` is
    ``observed - required``; keys in ``ignore`` are removed from both.
    ``observed=None`` is treated as an empty set.
    """
    required_keys = _ordered(required)
    observed_keys = _ordered(observed)
    ignored = frozenset(ignore or ())

    required_set = frozenset(required_keys)
    observed_set = frozenset(observed_keys)

    return ComparisonResult(
        missing=tuple(
            k for k in required_keys if k not in observed_set and k not in ignored
        ),
        extra=tuple(
            k for k in observed_keys if k not in required_set and k not in ignored
        ),
    )


def attribute_keys(key_values) -> tuple[str, ...]:
    """Keys of an OTLP ``KeyValue`` sequence, first-seen order, no repeats."""
    if key_values is None:
        return ()
    return _ordered(kv.key for kv in key_values)
