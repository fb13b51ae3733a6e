from __future__ import annotations

import random
from abc import abstractmethod
from typing import Generic, TypeVar

import reactivex
from reactivex import operators as ops

T = TypeVar("T")


class ObservableProvider(Generic[T]):
    @abstractmethod
    def observable(self) -> reactivex.Observable[T]:
        raise NotImplementedError("")


class StaticStateProvider(ObservableProvider[T]):
    def __init__(self, state: T) -> None:
        self._state = state

    @property
    def state(self) -> T:
        return self._state

    def observable(self) -> reactivex.Observable[T]:
        return reactivex.just(self._state).pipe(ops.share())


class RngStateProvider(ObservableProvider[T], Generic[T]):
    """Base provider that manages a shared random number generator."""

    def __init__(self, *, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    @property
    def rng(self) -> random.Random:
        return self._rng
