from __future__ import annotations

from typing import Any

from schema_harness.runner.registration import RegistrationPrimitive


def select_variant(selection: Any, primitive: RegistrationPrimitive) -> Any:
    """Pick the only/skip/normal variant of `primitive` for `selection`.

    Only literal `True` counts; name lists are turned into booleans per item
    before reaching here. `only` wins over `skip`.
    """
    if getattr(selection, "only", None) is True:
        return primitive.only
    if getattr(selection, "skip", None) is True:
        return primitive.skip
    return primitive
