"""Extractor for gettext calls in Python source."""

import ast
from collections.abc import Iterator

from ..errors import ExtractorSyntaxError
from ..models import Phrase
from .base import Extractor

# Function name -> (context argument index, message argument indexes)
_GETTEXT_FUNCTIONS: dict[str, tuple[int | None, tuple[int, ...]]] = {
    "_": (None, (0,)),
    "gettext": (None, (0,)),
    "gettext_lazy": (None, (0,)),
    "ngettext": (None, (0, 1)),
    "ngettext_lazy": (None, (0, 1)),
    "pgettext": (0, (1,)),
    "pgettext_lazy": (0, (1,)),
    "npgettext": (0, (1, 2)),
}


class PythonGettextExtractor(Extractor):
    """Finds string literals passed to gettext-style functions.

    Handles plain calls (``_("Save")``) as well as attribute calls
    (``translation.ngettext("file", "files", n)``). Contexts from
    ``pgettext``/``npgettext`` become the phrase meta key. Only literal
    arguments are extracted; calls with computed messages are skipped.
    """

    language = "python"

    def supports_line_numbers(self) -> bool:
        return True

    def extract_each_from(self, text: str) -> Iterator[tuple[Phrase, int | None]]:
        try:
            tree = ast.parse(text)
        except (SyntaxError, ValueError) as e:
            line = getattr(e, "lineno", None)
            raise ExtractorSyntaxError(
                f"Invalid Python source at line {line}: {e}",
                original_exception=e,
                language=self.language,
            ) from e
        except RecursionError as e:
            raise ExtractorSyntaxError(
                "Python source is nested too deeply to parse",
                original_exception=e,
                language=self.language,
            ) from e

        calls = [node for node in ast.walk(tree) if isinstance(node, ast.Call)]
        calls.sort(key=lambda node: (node.lineno, node.col_offset))

        for call in calls:
            signature = _GETTEXT_FUNCTIONS.get(_function_name(call.func))
            if signature is None:
                continue

            context_index, message_indexes = signature
            context = None
            if context_index is not None:
                context = _string_arg(call, context_index)
                if context is None:
                    continue

            for index in message_indexes:
                message = _string_arg(call, index)
                if message is not None:
                    yield Phrase(key=message, meta_key=context), call.lineno


def _function_name(func: ast.expr) -> str | None:
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def _string_arg(call: ast.Call, index: int) -> str | None:
    if index >= len(call.args):
        return None
    arg = call.args[index]
    if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
        return arg.value
    return None
