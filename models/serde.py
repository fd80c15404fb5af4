"""
Serialization utilities for models.

to_jsonable - приводит результаты пайплайна к JSON-совместимым структурам:
dataclasses, Enum, Path, numpy, pydantic (настройки), объекты с to_dict().
"""
from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import numpy as np
from pydantic import BaseModel


def to_jsonable(obj: Any) -> Any:
    """Convert pipeline objects to JSON-serializable types.

    Порядок проверок важен: Enum(str) должен уйти в value раньше,
    чем сработает ветка str.
    """
    if isinstance(obj, Enum):
        return to_jsonable(obj.value)

    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    if isinstance(obj, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]

    if isinstance(obj, (set, frozenset)):
        try:
            return [to_jsonable(v) for v in sorted(obj)]
        except TypeError:
            return [to_jsonable(v) for v in sorted(obj, key=str)]

    if isinstance(obj, Path):
        return str(obj)

    if isinstance(obj, (datetime, date)):
        return obj.isoformat()

    # Кадры в JSON не пишем - только форму
    if isinstance(obj, np.ndarray):
        if obj.ndim >= 2:
            return {"ndarray_shape": list(obj.shape), "dtype": str(obj.dtype)}
        return obj.tolist()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)

    if isinstance(obj, BaseModel):
        return to_jsonable(obj.model_dump())

    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        return to_jsonable(obj.to_dict())

    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))

    return str(obj)

