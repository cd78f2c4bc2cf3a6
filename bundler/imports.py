"""
Import parsing for module sources.

Extracts the modules referenced by a source file's `use` lines. A line
participates only if, once trimmed, it starts with `use` followed by
whitespace; everything else is ignored verbatim. One import per line.
"""
import os
import re

from lark import Lark, Transformer
from lark.exceptions import LarkError

from bundler.grammar import import_grammar
from bundler.models import ImportStatement

IMPORT_KEYWORD = "use"
IMPORT_LINE = re.compile(r'^\s*' + IMPORT_KEYWORD + r'\s')

_parser = None


def get_parser():
    """Return the shared LALR parser for import lines."""
    global _parser
    if _parser is None:
        _parser = Lark(import_grammar, parser='lalr', start='import_line')
    return _parser


def module_name(reference):
    """Derive a module name from a reference: basename without extension.

    `lib/group/widget.nu` -> `widget`. Directory components only matter for
    lookup, never for naming.
    """
    base = os.path.basename(reference.replace('\\', '/').rstrip('/'))
    return os.path.splitext(base)[0]


class ImportExtractor(Transformer):
    """Turns an `import_line` parse tree into an ImportStatement."""

    def import_line(self, args):
        ref_token, *qualifiers = args
        reference = str(ref_token).strip('"\'')
        return ImportStatement(
            reference=reference,
            name=module_name(reference),
            qualifiers=" ".join(qualifiers),
            start=ref_token.start_pos,
            end=ref_token.end_pos,
        )

    def module_ref(self, args):
        return args[0]

    def qualifier(self, args):
        return str(args[0])


def is_import_line(line):
    return bool(IMPORT_LINE.match(line))


def parse_import_line(line):
    """Parse one line; return an ImportStatement, or None for non-import lines."""
    if not is_import_line(line):
        return None
    try:
        tree = get_parser().parse(line.rstrip('\r\n'))
    except LarkError:
        # `use` with nothing after it, or an unterminated quote
        return None
    return ImportExtractor().transform(tree)


def parse_imports(source):
    """
    Return the distinct imports of a source text in first-occurrence order.

    Args:
        source: Raw text of a module or entry script

    Returns:
        List of ImportStatement, one per distinct module name
    """
    seen = set()
    statements = []
    for line in source.splitlines():
        statement = parse_import_line(line)
        if statement is None or statement.name in seen:
            continue
        seen.add(statement.name)
        statements.append(statement)
    return statements


def rewrite_import_line(line, statement, replacement):
    """Swap the module reference of an import line, keeping everything around it."""
    return line[:statement.start] + replacement + line[statement.end:]
