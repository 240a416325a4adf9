"""Parameter access for calibrated block data.

Blocks keep calibrated parameters in whatever container suits them: a
plain dict, a pydantic model or a namespace object, holding scalars,
dicts keyed by set elements, numpy arrays or pandas objects labelled by
set elements. ``getparam`` is the one accessor blocks use for all of
them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import numpy as np
import pandas as pd

from cgecore.errors import MissingParameterError


def _lookup(params: Any, name: str) -> Any:
    if isinstance(params, Mapping):
        if name not in params:
            raise MissingParameterError(name)
        return params[name]
    if not hasattr(params, name):
        raise MissingParameterError(name)
    return getattr(params, name)


def getparam(params: Any, name: str, *idxs: Any) -> Any:
    """Get a parameter value from a dict- or attribute-style container.

    Args:
        params: Parameter container (mapping or object with attributes)
        name: Parameter name
        *idxs: Set elements (labels) or positions for indexed parameters

    Returns:
        The parameter value, or the indexed entry when ``idxs`` are given

    Raises:
        MissingParameterError: If the container has no parameter ``name``
        KeyError: If the indexed entry does not exist

    Example:
        >>> params = {"alpha": 0.3, "beta": {("agr", "lab"): 0.6}}
        >>> getparam(params, "alpha")
        0.3
        >>> getparam(params, "beta", "agr", "lab")
        0.6
    """
    data = _lookup(params, name)
    if not idxs:
        return data

    key = idxs[0] if len(idxs) == 1 else tuple(idxs)
    if isinstance(data, (pd.Series, pd.DataFrame)):
        try:
            value = data.loc[key]
        except KeyError as exc:
            msg = f"Parameter '{name}' has no entry {idxs}"
            raise KeyError(msg) from exc
        return value.item() if isinstance(value, np.generic) else value
    if isinstance(data, np.ndarray):
        try:
            return data[idxs].item() if data.ndim == len(idxs) else data[idxs]
        except IndexError as exc:
            msg = f"Parameter '{name}' has no entry {idxs}"
            raise KeyError(msg) from exc
    if isinstance(data, Mapping):
        if key not in data:
            msg = f"Parameter '{name}' has no entry {idxs}"
            raise KeyError(msg)
        return data[key]
    return data[key]
