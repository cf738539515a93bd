r"""
Helmsman option tokens and their registries.

Overview
- Token: a named, aliasable, described option with an optional default.
  • Switch: presence-only; being present resolves to True.
  • Flag: value-bearing; consumes exactly one value from the command line.
- TokenRegistry: ordered mapping canonical-name → Token, with alias lookup and
  transactional collision checks (a failed declaration leaves it unchanged).
- TokenScope: mixin giving a scope (the application for global options, a
  command for its own options) the switch()/flag() declaration methods.

Names
- The first supplied name is canonical; the rest are aliases.
- Leading dashes are optional in declarations ("--file" ≡ "file").
- 1-character names are typed as '-x', longer ones as '--name'.

Defaults
- `default` is the declared (static) default and never changes.
- `default_value` is the effective default: the configuration overlay when one
  was applied, the declared default otherwise.
"""
import logging

from .faults import NameCollisionError
from .utils import *

logger = logging.getLogger(__name__)


class Token(metaclass=IntrospectableType):
    """
    Shared representation of a named option (see Switch and Flag).
    """

    __introspectable__ = (
        "name",
        "aliases",
        "descr",
        "long_descr",
        "default",
    )

    def __init__(self, *names, descr=Unset, long_descr=Unset, default=Unset):
        if not names:
            raise TypeError(f"{type(self).__typename__} must specify at least one name")

        canonical, *aliases = (normalize(name) for name in names)
        if len(set(aliases) | {canonical}) != len(names):
            raise NameCollisionError(f"{type(self).__typename__} names cannot contain duplicates")

        for field, value in (("descr", descr), ("long_descr", long_descr)):
            if not isinstance(value, str | Unset):
                raise TypeError(f"{type(self).__typename__} {field!r} must be a string")

        self._name = canonical
        self._aliases = tuple(aliases)
        self._descr = coalesce(descr)
        self._long_descr = coalesce(long_descr)
        self._default = coalesce(default)
        self._overlay = Unset

    @property
    def names(self):
        """
        canonical name followed by every alias.
        """
        return (self.name, *self.aliases)

    @property
    def switches(self):
        """
        names as typed on the command line ('-f', '--file', ...).
        """
        return tuple(map(switchify, self.names))

    @property
    def default_value(self):
        return coalesce(self._overlay, self.default)

    def override(self, value, /):
        """
        install a configuration-provided default on top of the declared one.
        """
        logger.debug("default of %s %r overridden with %r", type(self).__typename__, self.name, value)
        self._overlay = value

    def reset(self):
        """
        drop any configuration-provided default.
        """
        self._overlay = Unset


class Switch(Token):
    """
    Presence-only option, e.g. -v/--verbose.
    """


class Flag(Token):
    """
    Value-bearing option, e.g. -f/--file FILE.
    """

    __introspectable__ = Token.__introspectable__ + ("metavar",)

    def __init__(self, *names, descr=Unset, metavar=Unset, default=Unset, long_descr=Unset):
        super().__init__(*names, descr=descr, long_descr=long_descr, default=default)
        if not isinstance(metavar, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{type(self).__typename__} 'metavar' cannot be empty")
        self._metavar = coalesce(metavar, "arg")


class TokenRegistry:
    """
    Ordered registry of the switches and flags declared in one scope.

    Global scope and each command's scope are independent namespaces.
    """

    def __init__(self, context="in global options"):
        self._context = context
        self._tokens = {}

    def register(self, token, /):
        """
        add token after validating every one of its names against the registry.

        raises
        - NameCollisionError when any name is already a name or alias of a
          registered switch or flag. Nothing is written in that case.
        """
        for name in token.names:
            if (other := self.get(name)) is not None:
                if name == other.name:
                    message = "%s has already been specified as a %s %s" % (
                        name, type(other).__typename__, self._context
                    )
                else:
                    message = "%s has already been specified as an alias of %s %s %s" % (
                        name, type(other).__typename__, other.name, self._context
                    )
                raise NameCollisionError(message, name=name, token=other)
        self._tokens[token.name] = token
        return token

    def get(self, name, default=None, /):
        """
        return the token owning name (canonical or alias), or default.
        """
        try:
            return self._tokens[name]
        except KeyError:
            pass
        for token in self._tokens.values():
            if name in token.aliases:
                return token
        return default

    def lookup(self, switch, /):
        """
        return the token typed as switch ('-f', '--file'), or None.

        short spellings only match 1-character names and long spellings only
        match longer ones, mirroring how names are rendered.
        """
        if switch.startswith("--"):
            name = switch[2:]
            if len(name) < 2:
                return None
        elif switch.startswith("-"):
            name = switch[1:]
            if len(name) != 1:
                return None
        else:
            return None
        return self.get(name)

    @property
    def switches(self):
        return {name: token for name, token in self._tokens.items() if isinstance(token, Switch)}

    @property
    def flags(self):
        return {name: token for name, token in self._tokens.items() if isinstance(token, Flag)}

    def __contains__(self, name):
        return self.get(name) is not None

    def __iter__(self):
        return iter(self._tokens.values())

    def __len__(self):
        return len(self._tokens)

    def __repr__(self):
        return f"token-registry({list(self._tokens)!r})"


class TokenScope:
    """
    Mixin for objects owning a TokenRegistry under the attribute `tokens`.
    """

    def switch(self, *names, descr=Unset, long_descr=Unset, default=Unset):
        """
        declare a switch (presence-only option) in this scope and return it.
        """
        return self.tokens.register(Switch(*names, descr=descr, long_descr=long_descr, default=default))

    def flag(self, *names, descr=Unset, metavar=Unset, default=Unset, long_descr=Unset):
        """
        declare a flag (option taking one value) in this scope and return it.
        """
        return self.tokens.register(Flag(*names, descr=descr, metavar=metavar, default=default, long_descr=long_descr))

    @property
    def switches(self):
        return self.tokens.switches

    @property
    def flags(self):
        return self.tokens.flags


__all__ = (
    "Token",
    "Switch",
    "Flag",
    "TokenRegistry",
    "TokenScope",
)
