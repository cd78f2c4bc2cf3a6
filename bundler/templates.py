"""
Template discovery and embedding.

Template assets are text files the bootstrap scripts would otherwise read
from disk at runtime. They are embedded into the artifact as string
constants of a `templates` module so the artifact needs no companion files.
"""
import os

from bundler.errors import unreadable_path_error
from bundler.models import TemplateAsset

TEMPLATE_SUFFIX = ".template"
CONSTANT_SUFFIX = "_TEMPLATE"


def constant_name(file_name, suffix=TEMPLATE_SUFFIX, constant_suffix=CONSTANT_SUFFIX):
    """`settings.xml.template` -> `SETTINGS_XML_TEMPLATE`."""
    stem = file_name[:-len(suffix)] if suffix and file_name.endswith(suffix) else file_name
    return stem.replace('.', '_').upper() + constant_suffix


def escape_string(content):
    """Escape text for a double-quoted string literal.

    Backslashes must go first, otherwise the backslashes added in front of
    quotes would be doubled again.
    """
    return content.replace('\\', '\\\\').replace('"', '\\"')


def discover_templates(templates_dir, suffix=TEMPLATE_SUFFIX, constant_suffix=CONSTANT_SUFFIX):
    """
    Read every `*.template` file directly inside `templates_dir`.

    Returns:
        List of TemplateAsset sorted by file name; empty if the directory
        does not exist
    """
    if not os.path.isdir(templates_dir):
        return []

    assets = []
    for file_name in sorted(os.listdir(templates_dir)):
        path = os.path.join(templates_dir, file_name)
        if not file_name.endswith(suffix) or not os.path.isfile(path):
            continue
        # newline='' keeps the bytes as they are on disk
        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise unreadable_path_error("template", path, e)
        assets.append(TemplateAsset(
            file_name=file_name,
            content=content,
            constant_name=constant_name(file_name, suffix, constant_suffix),
        ))
    return assets


def render_templates_module(templates, module_name="templates"):
    """Build the namespaced constant block, or None when there is nothing to embed."""
    if not templates:
        return None
    lines = [f"module {module_name} {{"]
    for asset in templates:
        lines.append(f'    export const {asset.constant_name} = "{escape_string(asset.content)}"')
    lines.append("}")
    return "\n".join(lines)
