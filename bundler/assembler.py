"""
Artifact assembly.

Concatenates the transformed modules into one executable script. The
segment order is fixed because later segments use names defined by
earlier ones:

    header
    templates module
    shared modules        (sorted, inline module excluded)
    target modules        (sorted, template loader transformed)
    use declarations      (templates, shared, target)
    inline module body    (unwrapped)
    entry script body     (bundled imports and shebang removed)
"""
import os

from bundler.imports import parse_import_line
from bundler.models import Artifact
from bundler.templates import render_templates_module
from bundler.transformer import ModuleTransformer, is_shebang

ARTIFACT_MODE = 0o755


def wrap_module(name, body):
    body = body.strip("\n")
    return f"module {name} {{\n{body}\n}}"


def strip_entry_imports(content, bundled_names):
    """Drop the shebang and every import of a bundled module from the entry script."""
    kept = []
    for line in content.splitlines():
        if is_shebang(line):
            continue
        statement = parse_import_line(line)
        if statement is not None and statement.name in bundled_names:
            continue
        kept.append(line)
    return "\n".join(kept)


class Assembler:
    """Builds the artifact text for a BuildPlan."""

    def __init__(self, config):
        self.config = config

    def transform_module(self, module, transformer, has_templates):
        if has_templates and module.name == self.config.template_loader_module:
            return transformer.transform_template_loader(
                module.raw_content,
                template_suffix=self.config.template_suffix,
                constant_suffix=self.config.constant_suffix,
            )
        return transformer.transform(module.raw_content)

    def assemble(self, plan):
        """Return the Artifact for `plan` without touching the filesystem."""
        config = self.config
        inline = plan.inline_module
        has_templates = bool(plan.templates)
        transformer = ModuleTransformer(plan.bundled_names, templates_module=config.templates_module)

        shared = sorted(plan.shared_modules, key=lambda m: m.name)
        target = sorted(plan.target_modules, key=lambda m: m.name)
        wrapped_shared = [m for m in shared if m.name != inline]

        segments = [config.header]

        templates_block = render_templates_module(plan.templates, config.templates_module)
        if templates_block is not None:
            segments.append(templates_block)

        for module in wrapped_shared:
            segments.append(wrap_module(module.name, transformer.transform(module.raw_content)))
        for module in target:
            body = self.transform_module(module, transformer, has_templates)
            segments.append(wrap_module(module.name, body))

        uses = []
        if templates_block is not None:
            uses.append(config.templates_module)
        uses.extend(m.name for m in wrapped_shared)
        uses.extend(m.name for m in target)
        if uses:
            segments.append("\n".join(f"use {name} *" for name in uses))

        inline_module = next((m for m in shared if m.name == inline), None)
        if inline_module is not None:
            segments.append(transformer.transform(inline_module.raw_content).strip("\n"))

        entry_body = strip_entry_imports(plan.entry_script.content, plan.bundled_names)
        segments.append(entry_body.strip("\n"))

        text = "\n\n".join(s for s in segments if s) + "\n"
        return Artifact(output_path=plan.output_path, text=text)


def write_artifact(artifact):
    """Write the artifact, creating its directory, and mark it executable."""
    directory = os.path.dirname(artifact.output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(artifact.output_path, 'w', encoding='utf-8', newline='') as f:
        f.write(artifact.text)
    os.chmod(artifact.output_path, ARTIFACT_MODE)
    return artifact.output_path
