from typing import Any, Collection


def truncate_large_lists(obj: Any, max_items: int = 10, keep_keys: Collection[str] = ()) -> Any:
    """Сворачивает длинные списки (например frame_delays) для вывода в консоль.

    Списки под ключами из keep_keys выводятся целиком.
    """
    if isinstance(obj, list):
        if len(obj) > max_items:
            return {
                "truncated": True,
                "total_length": len(obj),
                "first_items": obj[: max_items // 2],
                "last_items": obj[-(max_items // 2):],
            }
        return [truncate_large_lists(item, max_items, keep_keys) for item in obj]
    if isinstance(obj, dict):
        return {
            k: v if k in keep_keys else truncate_large_lists(v, max_items, keep_keys)
            for k, v in obj.items()
        }
    return obj
