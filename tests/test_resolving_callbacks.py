from types import SimpleNamespace
from typing import Annotated, Any, Protocol

import pytest

from boundwire.container import Container
from boundwire.markers import Inject, Token

CONTRACT = Token("ContainerContractStub")


class ImplementationStub:
    pass


class ImplementationStubTwo:
    pass


class Counter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.fixture()
def counter() -> Counter:
    return Counter()


def test_resolving_callbacks_are_called_for_specific_abstracts(container: Container) -> None:
    def name_it(obj: SimpleNamespace) -> None:
        obj.name = "Riley Martin"

    container.resolving("foo", name_it)
    container.bind("foo", lambda: SimpleNamespace())

    assert container.make("foo").name == "Riley Martin"


def test_global_resolving_callbacks_are_called(container: Container) -> None:
    def name_it(obj: SimpleNamespace) -> None:
        obj.name = "Riley Martin"

    container.resolving(name_it)
    container.bind("foo", lambda: SimpleNamespace())

    assert container.make("foo").name == "Riley Martin"


def test_resolving_callbacks_are_called_for_type(container: Container) -> None:
    def name_it(obj: SimpleNamespace) -> None:
        obj.name = "Riley Martin"

    container.resolving(SimpleNamespace, name_it)
    container.bind("foo", lambda: SimpleNamespace())

    assert container.make("foo").name == "Riley Martin"


def test_resolving_callbacks_should_be_fired_when_called_with_aliases(
    container: Container,
) -> None:
    def name_it(obj: SimpleNamespace) -> None:
        obj.name = "Riley Martin"

    container.alias(SimpleNamespace, "std")
    container.resolving("std", name_it)
    container.bind("foo", lambda: SimpleNamespace())

    assert container.make("foo").name == "Riley Martin"


def test_resolving_callbacks_are_not_fired_for_shared_cache_hits(
    container: Container,
    counter: Counter,
) -> None:
    container.singleton(ImplementationStub)
    container.resolving(ImplementationStub, counter)

    container.make(ImplementationStub)
    container.make(ImplementationStub)

    assert counter.calls == 1


def test_resolving_callbacks_are_called_once_for_implementation(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(CONTRACT, counter)
    container.bind(CONTRACT, ImplementationStub)

    container.make(ImplementationStub)
    assert counter.calls == 1

    container.make(ImplementationStub)
    assert counter.calls == 2


def test_global_resolving_callbacks_are_called_once_for_implementation(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(counter)
    container.bind(CONTRACT, ImplementationStub)

    container.make(ImplementationStub)
    assert counter.calls == 1

    container.make(CONTRACT)
    assert counter.calls == 2


def test_resolving_callbacks_are_called_once_for_singleton_concretes(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(CONTRACT, counter)
    container.bind(CONTRACT, ImplementationStub)
    container.bind(ImplementationStub)

    container.make(ImplementationStub)
    assert counter.calls == 1

    container.make(ImplementationStub)
    assert counter.calls == 2

    container.make(CONTRACT)
    assert counter.calls == 3


def test_resolving_callbacks_can_still_be_added_after_the_first_resolution(
    container: Container,
    counter: Counter,
) -> None:
    container.bind(CONTRACT, ImplementationStub)
    container.make(ImplementationStub)

    container.resolving(CONTRACT, counter)
    container.make(ImplementationStub)

    assert counter.calls == 1


def test_resolving_callbacks_are_canceled_when_interface_gets_bound_to_other_concrete(
    container: Container,
    counter: Counter,
) -> None:
    container.bind(CONTRACT, ImplementationStub)
    container.resolving(ImplementationStub, counter)

    container.make(CONTRACT)
    assert counter.calls == 1

    container.bind(CONTRACT, ImplementationStubTwo)
    container.make(CONTRACT)
    assert counter.calls == 1


def test_resolving_callbacks_are_called_once_for_string_abstractions(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving("foo", counter)
    container.bind("foo", ImplementationStub)

    container.make("foo")
    assert counter.calls == 1

    container.make("foo")
    assert counter.calls == 2


def test_resolving_callbacks_for_concretes_are_called_once_for_string_abstractions(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(ImplementationStub, counter)
    container.bind("foo", ImplementationStub)
    container.bind("bar", ImplementationStub)
    container.bind(CONTRACT, ImplementationStub)

    container.make(ImplementationStub)
    assert counter.calls == 1

    container.make("foo")
    assert counter.calls == 2

    container.make("bar")
    assert counter.calls == 3

    container.make(CONTRACT)
    assert counter.calls == 4


def test_resolving_callbacks_on_token_bound_to_factory(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(CONTRACT, counter)
    container.bind(CONTRACT, lambda: ImplementationStub())

    container.make(CONTRACT)
    assert counter.calls == 1

    container.make(CONTRACT)
    assert counter.calls == 2


def test_rebinding_does_not_affect_resolving_callbacks(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(CONTRACT, counter)
    container.bind(CONTRACT, ImplementationStub)
    container.bind(CONTRACT, lambda: ImplementationStub())

    container.make(CONTRACT)
    assert counter.calls == 1

    container.make(ImplementationStub)
    assert counter.calls == 2

    container.make(ImplementationStub)
    assert counter.calls == 3

    container.make(CONTRACT)
    assert counter.calls == 4


def test_parameters_passed_into_resolving_callbacks(container: Container) -> None:
    received = []

    def remember(obj: object, app: Container) -> None:
        received.append((obj, app))

    container.resolving(CONTRACT, remember)
    container.after_resolving(CONTRACT, remember)
    container.after_resolving(remember)
    container.bind(CONTRACT, ImplementationStubTwo)

    instance = container.make(CONTRACT)

    assert received == [(instance, container)] * 3


def test_callbacks_fire_for_every_identifier_resolving_to_the_same_object(
    container: Container,
) -> None:
    shared = ImplementationStub()
    global_calls = []
    keyed_calls = []

    class Root:
        def __init__(
            self,
            first: Annotated[Any, Inject("first")],
            second: Annotated[Any, Inject("second")],
        ) -> None:
            self.first = first
            self.second = second

    container.bind("first", lambda: shared)
    container.bind("second", lambda: shared)
    container.resolving(global_calls.append)
    container.resolving(ImplementationStub, keyed_calls.append)

    root = container.make(Root)

    assert root.first is root.second is shared
    assert global_calls == [shared, shared, root]
    assert keyed_calls == [shared, shared]


def test_callbacks_fire_once_when_identifier_delegates_to_another(
    container: Container,
) -> None:
    calls = []
    container.bind("first", ImplementationStub)
    container.bind("second", "first")
    container.resolving(calls.append)

    instance = container.make("second")

    assert calls == [instance]


def test_resolving_callbacks_fire_before_after_resolving_callbacks(container: Container) -> None:
    order = []
    container.after_resolving(lambda obj: order.append("after"))
    container.resolving(lambda obj: order.append("global"))
    container.resolving(ImplementationStub, lambda obj: order.append("keyed"))

    container.make(ImplementationStub)

    assert order == ["global", "keyed", "after"]


def test_resolving_callbacks_are_called_when_rebind_happens_for_resolved_abstract(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(CONTRACT, counter)
    container.bind(CONTRACT, ImplementationStub)

    container.make(CONTRACT)
    assert counter.calls == 1

    container.bind(CONTRACT, ImplementationStubTwo)
    assert counter.calls == 2

    container.make(ImplementationStubTwo)
    assert counter.calls == 3

    container.bind(CONTRACT, lambda: ImplementationStubTwo())
    assert counter.calls == 4

    container.make(CONTRACT)
    assert counter.calls == 5


def test_rebinding_does_not_affect_multiple_resolving_callbacks(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(CONTRACT, counter)
    container.resolving(ImplementationStubTwo, counter)
    container.bind(CONTRACT, ImplementationStub)

    container.make(CONTRACT)
    assert counter.calls == 1

    container.make(ImplementationStub)
    assert counter.calls == 2

    # ImplementationStubTwo was never bound to the token, only its own key matches.
    container.make(ImplementationStubTwo)
    assert counter.calls == 3


def test_resolving_callbacks_are_called_for_concretes_when_attached_on_concretes(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(ImplementationStub, counter)
    container.bind(CONTRACT, ImplementationStub)

    container.make(CONTRACT)
    assert counter.calls == 1

    container.make(ImplementationStub)
    assert counter.calls == 2


def test_resolving_callbacks_are_called_for_concretes_with_no_binding(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(ImplementationStub, counter)

    container.make(ImplementationStub)
    assert counter.calls == 1

    container.make(ImplementationStub)
    assert counter.calls == 2


def test_resolving_callbacks_are_not_called_for_tokens_with_no_binding(
    container: Container,
    counter: Counter,
) -> None:
    container.resolving(CONTRACT, counter)

    container.make(ImplementationStub)

    assert counter.calls == 0


def test_resolving_callbacks_match_subclasses(container: Container, counter: Counter) -> None:
    class Base:
        pass

    class Child(Base):
        pass

    container.resolving(Base, counter)

    container.make(Child)

    assert counter.calls == 1


def test_non_runtime_protocols_never_match(container: Container, counter: Counter) -> None:
    class Greeter(Protocol):
        def greet(self) -> str: ...

    class English:
        def greet(self) -> str:
            return "hello"

    container.resolving(Greeter, counter)

    container.make(English)

    assert counter.calls == 0


def test_after_resolving_callbacks_are_called_once_for_implementation(
    container: Container,
    counter: Counter,
) -> None:
    container.after_resolving(CONTRACT, counter)
    container.bind(CONTRACT, ImplementationStub)

    container.make(ImplementationStub)
    assert counter.calls == 1

    container.make(CONTRACT)
    assert counter.calls == 2


def test_global_registration_requires_a_callable(container: Container) -> None:
    with pytest.raises(TypeError):
        container.resolving("foo")
