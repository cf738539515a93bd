"""
Resolved options handed to hooks and command actions.

Options is a plain dict that also answers attribute access, so both
`options["dry-run"]` and `options.dry_run` read the same entry. Unknown
attributes read as None; unknown keys still raise KeyError.
"""
import logging

logger = logging.getLogger(__name__)


class Options(dict):
    __slots__ = ()

    def _key(self, name):
        if name not in self and (dashed := name.replace("_", "-")) in self:
            return dashed
        return name

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)
        return self.get(self._key(name))

    def __setattr__(self, name, value):
        self[self._key(name)] = value

    def __delattr__(self, name):
        try:
            del self[self._key(name)]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self):
        return f"options({dict.__repr__(self)})"


def propagate_aliases(options, tokens, /):
    """
    copy each present canonical value to every alias key of its token.

    must run after defaults are filled in so aliases observe them too.
    """
    for token in tokens:
        if token.name not in options:
            continue
        for alias in token.aliases:
            options[alias] = options[token.name]
    logger.debug("aliases propagated: %r", options)
    return options


__all__ = (
    "Options",
    "propagate_aliases",
)
