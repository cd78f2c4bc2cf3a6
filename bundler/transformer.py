"""
Module source transformation.

Rewrites a module's own `use` lines so they point at the inlined module
names instead of file paths, and, for the one module that loads template
files from disk, swaps the disk read for a reference to the embedded
constant.
"""
import re
from enum import Enum

from bundler.imports import parse_import_line, rewrite_import_line
from bundler.templates import constant_name

SHEBANG = "#!"

# def templates-dir [] {
TEMPLATES_DIR_HELPER = re.compile(r'^\s*(?:export\s+)?def\s+["\']?templates-dir["\']?\s*\[')
# let template_path = (templates-dir | path join "settings.xml.template")
TEMPLATE_PATH = re.compile(
    r'^\s*let\s+[\w-]+\s*=\s*\(?\s*\(?\s*templates-dir\s*\)?\s*\|\s*path\s+join\s+'
    r'["\']([^"\']+)["\']\s*\)?\s*$'
)
# let content = (open --raw $template_path)
TEMPLATE_READ = re.compile(
    r'^(\s*)let\s+([\w-]+)\s*=\s*\(?\s*open\s+(?:--raw\s+)?\$[\w-]+(?:\s+--raw)?\s*\)?\s*$'
)


class ScanState(str, Enum):
    NORMAL = "normal"
    SKIP = "skip"


def is_shebang(line):
    return line.startswith(SHEBANG)


def brace_delta(line):
    """Net number of `{` a line leaves open."""
    return line.count("{") - line.count("}")


class ModuleTransformer:
    """
    Line-oriented rewriter for module sources.

    Only imports of modules that are part of the bundle are rewritten;
    anything else (`use std log`, unresolved names) is left as written.
    """

    def __init__(self, bundled_names, templates_module="templates"):
        self.bundled_names = set(bundled_names)
        self.templates_module = templates_module

    def rewrite_line(self, line):
        statement = parse_import_line(line)
        if statement is None or statement.name not in self.bundled_names:
            return line
        return rewrite_import_line(line, statement, statement.name)

    def transform(self, content):
        """Baseline transform: drop shebangs, rewrite bundled imports."""
        return "\n".join(
            self.rewrite_line(line)
            for line in content.splitlines()
            if not is_shebang(line)
        )

    def transform_template_loader(self, content, template_suffix=".template",
                                  constant_suffix="_TEMPLATE"):
        """
        Transform the template-loading module.

        Applies the baseline rewrite, plus:
        - injects `use templates *` right after the first import line
        - drops the `templates-dir` helper function
        - replaces `path join` + `open` pairs with the embedded constant

        Each step fires only on an exact pattern match; a module with a
        different shape comes out with just the baseline rewrite.
        """
        output = []
        state = ScanState.NORMAL
        injected = False
        pending = None
        depth = 0

        for line in content.splitlines():
            if is_shebang(line):
                continue

            if state == ScanState.SKIP:
                depth += brace_delta(line)
                if depth <= 0:
                    state = ScanState.NORMAL
                continue

            if TEMPLATES_DIR_HELPER.match(line):
                # A helper closed on its own line is dropped alone
                depth = brace_delta(line)
                if depth > 0:
                    state = ScanState.SKIP
                pending = None
                continue

            path_match = TEMPLATE_PATH.match(line)
            if path_match:
                pending = constant_name(path_match.group(1), template_suffix, constant_suffix)
                continue

            if pending is not None:
                read_match = TEMPLATE_READ.match(line)
                constant, pending = pending, None
                if read_match:
                    indent, variable = read_match.groups()
                    output.append(f"{indent}let {variable} = ${constant}")
                    continue

            statement = parse_import_line(line)
            if statement is None:
                output.append(line)
                continue

            output.append(self.rewrite_line(line))
            if not injected:
                output.append(f"use {self.templates_module} *")
                injected = True

        return "\n".join(output)
