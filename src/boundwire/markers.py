from typing import Any, NamedTuple


class Token:
    """Unique opaque identifier standing for an interface.

    Two tokens never compare equal, even with the same name, so a token can be
    exported from a module and used as a binding key without clashing with
    string names.

    Examples:
        .. code-block:: python

            MAILER = Token("Mailer")

            container.bind(MAILER, SmtpMailer)
            mailer = container.make(MAILER)

    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Token({self.name!r})"


class Inject(NamedTuple):
    """Redirect a constructor parameter to an arbitrary identifier.

    Attach ``Inject`` metadata to ``typing.Annotated`` when the parameter should
    be resolved through a string name or a ``Token`` instead of its declared type.

    Examples:
        .. code-block:: python

            class Newsletter:
                def __init__(self, mailer: Annotated[Mailer, Inject(MAILER)]) -> None:
                    self.mailer = mailer

    """

    key: Any
