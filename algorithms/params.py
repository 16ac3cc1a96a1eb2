"""
params.py - Bounded Algorithm Parameters
========================================
Each registry card declares its inputs as a list of ParamSpec objects.
The producer wrapper runs every incoming value through `coerce()` so an
algorithm generator only ever sees values inside its documented bounds.

Policy: clamp and continue.  Out-of-range numbers are clamped, unknown
choices and unparseable input fall back to the default, long strings are
truncated.  Nothing here raises.
"""

import copy
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


KINDS = ("int", "float", "bool", "choice", "text", "int_list", "custom")

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


@dataclass
class ParamSpec:
    name:            str
    kind:            str                              # one of KINDS
    default:         Any
    minimum:         Optional[float]    = None        # numeric bound, per-item bound for int_list
    maximum:         Optional[float]    = None
    choices:         List[str]          = field(default_factory=list)
    max_length:      Optional[int]      = None        # text / int_list length cap
    normalise:       Optional[Callable[[Any], Any]] = None   # custom kinds
    randomize_only:  bool               = False       # feeds randomize() only, never the generator
    label:           str                = ""

    # ------------------------------------------------------------------
    def coerce(self, raw: Any) -> Any:
        """Return `raw` forced into this parameter's domain."""
        if raw is None and self.kind != "custom":
            return self.default_value()

        handler = getattr(self, f"_coerce_{self.kind}", None)
        if handler is None:
            logger.warning("Unknown parameter kind %r for %s", self.kind, self.name)
            return raw
        value = handler(raw)
        if value != raw:
            logger.debug("Parameter %s: %r coerced to %r", self.name, raw, value)
        return value

    def default_value(self) -> Any:
        if isinstance(self.default, (list, dict)):
            return copy.deepcopy(self.default)
        return self.default

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name":       self.name,
            "kind":       self.kind,
            "label":      self.label or self.name,
            "default":    self.default_value(),
            "minimum":    self.minimum,
            "maximum":    self.maximum,
            "choices":    list(self.choices),
            "max_length": self.max_length,
        }

    # ------------------------------------------------------------------
    # Kind handlers
    # ------------------------------------------------------------------
    def _clamp(self, value):
        if self.minimum is not None and value < self.minimum:
            value = type(value)(self.minimum)
        if self.maximum is not None and value > self.maximum:
            value = type(value)(self.maximum)
        return value

    def _coerce_int(self, raw: Any) -> int:
        if isinstance(raw, bool):
            return self.default_value()
        try:
            value = int(float(raw))
        except (TypeError, ValueError, OverflowError):
            return self.default_value()
        return self._clamp(value)

    def _coerce_float(self, raw: Any) -> float:
        if isinstance(raw, bool):
            return self.default_value()
        try:
            value = float(raw)
        except (TypeError, ValueError, OverflowError):
            return self.default_value()
        if not math.isfinite(value):
            return self.default_value()
        return self._clamp(value)

    def _coerce_bool(self, raw: Any) -> bool:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, (int, float)):
            return bool(raw)
        text = str(raw).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        return self.default_value()

    def _coerce_choice(self, raw: Any) -> str:
        value = str(raw).strip().lower()
        return value if value in self.choices else self.default_value()

    def _coerce_text(self, raw: Any) -> str:
        value = str(raw)
        if self.max_length is not None:
            value = value[: self.max_length]
        return value

    def _coerce_int_list(self, raw: Any) -> List[int]:
        if isinstance(raw, str):
            raw = raw.replace(",", " ").split()
        if not isinstance(raw, (list, tuple)):
            return self.default_value()
        values: List[int] = []
        for item in raw:
            if isinstance(item, bool):
                continue
            try:
                values.append(self._clamp(int(float(item))))
            except (TypeError, ValueError, OverflowError):
                continue
        if self.max_length is not None:
            values = values[: self.max_length]
        return values

    def _coerce_custom(self, raw: Any) -> Any:
        if self.normalise is None:
            return raw
        value = self.normalise(raw)
        return self.default_value() if value is None else value


# ---------------------------------------------------------------------------
# Normalisers shared by several cards
# ---------------------------------------------------------------------------
def optional_int(raw: Any) -> Optional[int]:
    """Seeds and similar: an int, or None when missing / unparseable."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError):
        return None
