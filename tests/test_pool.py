"""Tests for wren.handlers.pool: per-category LIFO handler reuse."""

import threading

from wren.app import App
from wren.config import AppConfig
from wren.handlers.base import BaseHandler
from wren.handlers.pool import HandlerPool


class Alpha(BaseHandler):
    pass


class Beta(BaseHandler):
    pass


class SharedOne(BaseHandler):
    key = "shared"


class SharedTwo(BaseHandler):
    key = "shared"


class Stateful(BaseHandler):
    def __init__(self, app: App) -> None:
        super().__init__(app)
        self.seen: list[str] = []

    def reset(self) -> BaseHandler:
        self.seen = []
        return super().reset()


def _pool(max_size: int | None = None) -> HandlerPool:
    return HandlerPool(App(), max_size=max_size)


class TestTake:
    def test_empty_bucket_constructs(self) -> None:
        app = App()
        pool = HandlerPool(app)
        handler = pool.take(Alpha)
        assert isinstance(handler, Alpha)
        assert handler.app is app
        assert handler.context is None

    def test_take_after_give_returns_same_instance(self) -> None:
        pool = _pool()
        handler = pool.take(Alpha)
        pool.give(handler)
        assert pool.take(Alpha) is handler

    def test_lifo_order(self) -> None:
        pool = _pool()
        first, second = pool.take(Alpha), pool.take(Alpha)
        pool.give(first)
        pool.give(second)
        assert pool.take(Alpha) is second
        assert pool.take(Alpha) is first

    def test_two_takes_without_give_are_distinct(self) -> None:
        pool = _pool()
        assert pool.take(Alpha) is not pool.take(Alpha)

    def test_categories_are_separate(self) -> None:
        pool = _pool()
        pool.give(pool.take(Alpha))
        assert pool.size(Alpha) == 1
        assert pool.size(Beta) == 0
        assert isinstance(pool.take(Beta), Beta)


class TestGive:
    def test_returns_bucket_size(self) -> None:
        pool = _pool()
        a, b = pool.take(Alpha), pool.take(Alpha)
        assert pool.give(a) == 1
        assert pool.give(b) == 2

    def test_capacity_is_enforced(self) -> None:
        pool = _pool(max_size=2)
        a, b = pool.take(Alpha), pool.take(Alpha)
        pool.give(a)
        pool.give(b)
        assert pool.give(Alpha(App())) == 2
        assert pool.size(Alpha) == 2

    def test_retained_never_exceeds_max(self) -> None:
        pool = _pool(max_size=3)
        for _ in range(10):
            assert pool.give(Alpha(App())) <= 3
        assert pool.size(Alpha) == 3

    def test_zero_capacity_retains_nothing(self) -> None:
        pool = _pool(max_size=0)
        assert pool.give(pool.take(Alpha)) == 0
        assert len(pool) == 0

    def test_give_resets_state(self) -> None:
        pool = _pool()
        handler = pool.take(Stateful)
        handler.seen.append("request-1")
        pool.give(handler)
        reused = pool.take(Stateful)
        assert reused is handler
        assert reused.seen == []
        assert reused.context is None

    def test_overflow_instance_is_still_reset(self) -> None:
        pool = _pool(max_size=0)
        handler = pool.take(Stateful)
        handler.seen.append("x")
        pool.give(handler)
        assert handler.seen == []

    def test_len_counts_all_idle(self) -> None:
        pool = _pool()
        pool.give(pool.take(Alpha))
        pool.give(pool.take(Beta))
        assert len(pool) == 2


class TestCategoryKey:
    def test_default_key_is_dotted_name(self) -> None:
        assert Alpha.key == f"{__name__}.Alpha"

    def test_subclass_gets_its_own_key(self) -> None:
        class Child(Alpha):
            pass

        assert Child.key != Alpha.key

    def test_types_sharing_a_key_share_a_bucket(self) -> None:
        pool = _pool()
        pool.give(pool.take(SharedOne))
        assert pool.size(SharedTwo) == 1


class TestDefaults:
    def test_max_comes_from_config(self) -> None:
        pool = HandlerPool(App(AppConfig(handler_pool_max=7)))
        assert pool.max == 7

    def test_default_max(self) -> None:
        assert HandlerPool(App()).max == 1024


class TestThreads:
    def test_concurrent_give_respects_capacity(self) -> None:
        pool = _pool(max_size=50)
        app = App()

        def worker() -> None:
            for _ in range(100):
                pool.give(Alpha(app))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert pool.size(Alpha) == 50
