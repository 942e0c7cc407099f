from types import SimpleNamespace

from boundwire.container import Container


class LazyExtendStub:
    initialized = False

    def init(self) -> None:
        LazyExtendStub.initialized = True


def test_extended_bindings(container: Container) -> None:
    container.set("foo", "foo")
    container.extend("foo", lambda old, c: f"{old}bar")

    assert container.make("foo") == "foobar"


def test_extended_shared_bindings_keep_the_decorated_instance(container: Container) -> None:
    container.singleton("foo", lambda: SimpleNamespace(name="Riley Martin"))

    def add_age(old: SimpleNamespace) -> SimpleNamespace:
        old.age = 69
        return old

    container.extend("foo", add_age)

    result = container.make("foo")

    assert result.name == "Riley Martin"
    assert result.age == 69
    assert container.make("foo") is result


def test_multiple_extends_compose_in_registration_order(container: Container) -> None:
    container.set("foo", "foo")
    container.extend("foo", lambda old: f"{old}bar")
    container.extend("foo", lambda old: f"{old}baz")

    assert container.make("foo") == "foobarbaz"


def test_extenders_run_on_every_unshared_resolution(container: Container) -> None:
    calls = []
    container.bind("foo", lambda: SimpleNamespace())
    container.extend("foo", lambda old: calls.append(old) or old)

    container.make("foo")
    container.make("foo")

    assert len(calls) == 2


def test_extend_instances_are_preserved(container: Container) -> None:
    container.bind("foo", lambda: SimpleNamespace(foo="bar"))
    container.instance("foo", SimpleNamespace(foo="foo"))

    def add_bar(obj: SimpleNamespace) -> SimpleNamespace:
        obj.bar = "baz"
        return obj

    def add_baz(obj: SimpleNamespace) -> SimpleNamespace:
        obj.baz = "foo"
        return obj

    container.extend("foo", add_bar)
    container.extend("foo", add_baz)

    assert container.make("foo").foo == "foo"
    assert container.make("foo").bar == "baz"
    assert container.make("foo").baz == "foo"


def test_extend_is_lazy_initialized(container: Container) -> None:
    LazyExtendStub.initialized = False

    def init(obj: LazyExtendStub) -> LazyExtendStub:
        obj.init()
        return obj

    container.bind(LazyExtendStub)
    container.extend(LazyExtendStub, init)

    assert not LazyExtendStub.initialized

    container.make(LazyExtendStub)

    assert LazyExtendStub.initialized


def test_extend_can_be_called_before_bind(container: Container) -> None:
    container.extend("foo", lambda old: f"{old}bar")
    container.set("foo", "foo")

    assert container.make("foo") == "foobar"


def test_extend_instance_rebinding_callback(container: Container) -> None:
    calls = []
    container.rebinding("foo", lambda: calls.append(True))

    container.instance("foo", SimpleNamespace())
    container.extend("foo", lambda obj: obj)

    assert calls == [True]


def test_extend_bind_rebinding_callback(container: Container) -> None:
    calls = []
    container.rebinding("foo", lambda: calls.append(True))
    container.bind("foo", lambda: SimpleNamespace())

    assert calls == []

    container.make("foo")
    container.extend("foo", lambda obj: obj)

    assert calls == [True]


def test_unset_extend(container: Container) -> None:
    def add_bar(obj: SimpleNamespace) -> SimpleNamespace:
        obj.bar = "baz"
        return obj

    container.bind("foo", lambda: SimpleNamespace(foo="bar"))
    container.extend("foo", add_bar)

    container.unbind("foo")
    container.forget_extenders("foo")

    container.bind("foo", lambda: "foo")

    assert container.make("foo") == "foo"


def test_extension_works_on_aliased_bindings(container: Container) -> None:
    container.singleton("something", lambda: "some value")
    container.alias("something", "something-alias")
    container.extend("something-alias", lambda value: f"{value} extended")

    assert container.make("something") == "some value extended"
