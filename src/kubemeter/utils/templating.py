import re
from typing import Mapping

# A token is '$' followed by a whole word, so '$1' never matches inside '$10'.
_TOKEN = re.compile(r"\$(\w+)")


def substitute(template: str, values: Mapping[str, str]) -> str:
    """
    Replaces ``$name`` tokens with ``values[name]`` in a single pass.

    Tokens without a value are left untouched, and inserted text is never
    re-scanned for tokens.
    """

    def _replace(match: re.Match) -> str:
        value = values.get(match.group(1))
        return match.group(0) if value is None else value

    return _TOKEN.sub(_replace, template)
