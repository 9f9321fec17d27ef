"""
Argument tokenizer — split a free-form argument string into argv.

Used for ``deploy-args``, ``install-args`` and the ``run`` override.
The grammar is a small subset of POSIX shell words:

    - ``\\`` escapes the next character, inside quotes too
    - ``'...'`` and ``"..."`` group whitespace; each closes only on itself
    - unquoted whitespace separates tokens
    - a trailing lone ``\\`` is kept literally
    - an unterminated quote is an error

There is no variable expansion, globbing or comment handling, and
``""`` alone does not produce an empty token. ``shlex`` differs on all
of these, so it is not used here.
"""

from __future__ import annotations

from forge_ci.core.errors import TokenizationError

_QUOTES = ("'", '"')


def tokenize(arg_string: str | None) -> list[str]:
    """Split ``arg_string`` into a list of argument tokens.

    Raises:
        TokenizationError: If a quote is left open.
    """
    text = (arg_string or "").strip()
    if not text:
        return []

    args: list[str] = []
    current = ""
    quote: str | None = None
    escape = False

    for ch in text:
        if escape:
            current += ch
            escape = False
            continue

        if ch == "\\":
            escape = True
            continue

        if quote:
            if ch == quote:
                quote = None
            else:
                current += ch
            continue

        if ch in _QUOTES:
            quote = ch
            continue

        if ch.isspace():
            if current:
                args.append(current)
                current = ""
            continue

        current += ch

    if escape:
        current += "\\"
    if quote:
        raise TokenizationError(f"Unterminated quote in args: {arg_string}")
    if current:
        args.append(current)
    return args
