"""Tests for actions: named mutations batched into one update."""

from reactree import Model, ReactiveStore, action, tracked


class Foo(Model):
    bar = tracked("")
    baz = tracked(0)


class TestAction:
    def test_batches_updates(self):
        store = ReactiveStore(Foo())
        log = []
        store.bind(lambda s: log.append(f"Bar={s.bar}; Baz={s.baz}"), static=True)
        assert log == ["Bar=; Baz=0"]

        @action(store)
        def rename(state, bar, baz):
            state.bar = bar
            state.baz = baz

        rename("wow", 42)
        assert log == ["Bar=; Baz=0", "Bar=wow; Baz=42"]

    def test_store_method_form(self):
        store = ReactiveStore(Foo())
        log = []
        store.bind(lambda s: log.append(s.baz))

        @store.action
        def bump(state, by=1):
            state.baz += by
            return state.baz

        assert bump(by=2) == 2
        assert bump.__name__ == "bump"
        assert log == [0, 2]

    def test_scenario_sequence(self):
        store = ReactiveStore(Foo())
        log = []
        store.bind(lambda s: log.append(f"Bar={s.bar}; Baz={s.baz}"), static=True)
        store.update(lambda s: setattr(s, "bar", "hello"))
        store.update(lambda s: setattr(s, "baz", 1))
        assert log == ["Bar=; Baz=0", "Bar=hello; Baz=0", "Bar=hello; Baz=1"]
