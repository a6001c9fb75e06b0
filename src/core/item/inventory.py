"""인벤토리 용량 관리 + 정확한 이름 매칭

인벤토리는 순서가 있는 Item 튜플이다. 모든 함수는 새 튜플을 반환하고
입력은 건드리지 않는다.
"""

import logging
from typing import Iterable, Sequence

from .models import Item

logger = logging.getLogger(__name__)


def can_add_item(inventory: Sequence[Item], capacity: int, count: int = 1) -> bool:
    """아이템 count개 추가 가능 여부"""
    return len(inventory) + count <= capacity


def find_matches(
    inventory: Sequence[Item],
    name: str,
    count: int,
    exclude: Iterable[int] = (),
) -> list[int]:
    """이름이 정확히 일치하는 슬롯 인덱스를 앞에서부터 최대 count개.

    exclude: 이미 다른 재료로 예약된 인덱스.
    부분 문자열 일치는 매칭으로 보지 않는다.
    """
    taken = set(exclude)
    found: list[int] = []
    for idx, item in enumerate(inventory):
        if len(found) >= count:
            break
        if idx in taken:
            continue
        if item.name == name:
            found.append(idx)
    return found


def remove_indices(inventory: Sequence[Item], indices: Iterable[int]) -> tuple[Item, ...]:
    """지정 인덱스 제거. 인덱스 밀림을 피하기 위해 큰 인덱스부터 삭제."""
    remaining = list(inventory)
    for idx in sorted(set(indices), reverse=True):
        del remaining[idx]
    return tuple(remaining)


def add_items(
    inventory: Sequence[Item],
    items: Iterable[Item],
    capacity: int,
) -> tuple[tuple[Item, ...], tuple[Item, ...], tuple[Item, ...]]:
    """용량 안에서 아이템 추가.

    Returns:
        (새 인벤토리, 추가된 아이템, 자리가 없어 버려진 아이템)
    """
    result = list(inventory)
    added: list[Item] = []
    discarded: list[Item] = []
    for item in items:
        if len(result) < capacity:
            result.append(item)
            added.append(item)
        else:
            discarded.append(item)
            logger.info("Inventory full (%d), discarded %s", capacity, item.name)
    return tuple(result), tuple(added), tuple(discarded)
