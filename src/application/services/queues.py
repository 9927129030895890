"""
容量上限付きでクローズ可能なスレッド間キュー。
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Generic, Iterator, TypeVar

from domain import QueueClosedError

T = TypeVar("T")


class ClosableQueue(Generic[T]):
    """
    ``put`` は満杯の間、``get`` は空かつ未クローズの間ブロックする FIFO キュー。

    ``close`` 後も残っている要素は ``get`` で取り出せる。空になった時点で
    ``QueueClosedError`` を送出する。``abort`` は残りの要素を破棄して即座に
    クローズし、待機中のスレッドをすべて起こす。
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity は 1 以上である必要があります。")
        self._capacity = capacity
        self._items: Deque[T] = deque()
        self._closed = False
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def put(self, item: T) -> None:
        """
        要素を末尾に追加する。満杯の場合は空きができるまでブロックする。

        Raises:
            QueueClosedError: キューがクローズ済みの場合。
        """

        with self._not_full:
            while len(self._items) >= self._capacity and not self._closed:
                self._not_full.wait()
            if self._closed:
                raise QueueClosedError("クローズ済みのキューには追加できません。")
            self._items.append(item)
            self._not_empty.notify()

    def get(self) -> T:
        """
        先頭の要素を取り出す。空の場合は要素の追加かクローズまでブロックする。

        Raises:
            QueueClosedError: クローズ済みかつ空の場合。
        """

        with self._not_empty:
            while not self._items and not self._closed:
                self._not_empty.wait()
            if not self._items:
                raise QueueClosedError("キューはクローズ済みで空です。")
            item = self._items.popleft()
            self._not_full.notify()
            return item

    def close(self) -> None:
        """以降の ``put`` を拒否する。残りの要素は取り出し可能なまま。"""

        with self._lock:
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

    def abort(self) -> int:
        """
        残りの要素を破棄してクローズする。

        Returns:
            int: 破棄した要素数。
        """

        with self._lock:
            discarded = len(self._items)
            self._items.clear()
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()
            return discarded

    def __iter__(self) -> Iterator[T]:
        """クローズされて空になるまで要素を取り出し続ける。"""

        while True:
            try:
                item = self.get()
            except QueueClosedError:
                return
            yield item
