"""
Bundler configuration.

Defaults describe the repository layout the bootstrap scripts use; a
`nubundle.json` at the repository root can override any of them.
"""
import json
import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from bundler.errors import ConfigurationError, missing_path_error

CONFIG_FILE = "nubundle.json"


class TargetLayout(BaseModel):
    """Absolute input and output paths for one target."""
    model_config = ConfigDict(frozen=True)

    target: str
    root: str
    entry_script: str
    target_dir: str
    target_lib: str
    shared_dir: str
    shared_lib: str
    templates_dir: str
    output_path: str


class BundlerConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra='forbid')

    targets: List[str] = ["java", "node", "python"]
    shared_dir: str = "shared"
    lib_dir: str = "lib"
    entry_script: str = "{target}/setup.nu"
    templates_dir: str = "{target}/templates"
    output: str = "dist/setup-{target}.nu"
    module_extension: str = ".nu"
    template_suffix: str = ".template"
    constant_suffix: str = "_TEMPLATE"
    templates_module: str = "templates"
    template_loader_module: str = "config_files"
    inline_module: Optional[str] = "common"
    header: str = "#!/usr/bin/env nu"
    smoke_test_flag: str = "--help"

    def check_target(self, target):
        if target not in self.targets:
            raise ConfigurationError(
                f"Unknown target '{target}'",
                suggestion=f"Choose one of: {', '.join(self.targets)}",
            )

    def layout(self, root, target):
        """Resolve every path for `target` against an explicit repository root."""
        self.check_target(target)
        root = os.path.abspath(root)

        def resolve(pattern):
            return os.path.normpath(os.path.join(root, pattern.format(target=target)))

        target_dir = os.path.join(root, target)
        shared_dir = os.path.join(root, self.shared_dir)
        return TargetLayout(
            target=target,
            root=root,
            entry_script=resolve(self.entry_script),
            target_dir=target_dir,
            target_lib=os.path.join(target_dir, self.lib_dir),
            shared_dir=shared_dir,
            shared_lib=os.path.join(shared_dir, self.lib_dir),
            templates_dir=resolve(self.templates_dir),
            output_path=resolve(self.output),
        )


def check_layout(layout):
    """Raise ConfigurationError naming the first required path that is missing."""
    if not os.path.isdir(layout.target_dir):
        raise missing_path_error("target directory", layout.target_dir)
    if not os.path.isdir(layout.shared_dir):
        raise missing_path_error("shared module directory", layout.shared_dir)
    if not os.path.isfile(layout.entry_script):
        raise missing_path_error("entry script", layout.entry_script)


def load_config(root, path=None):
    """
    Load the bundler configuration.

    Args:
        root: Repository root; `nubundle.json` there is used when `path` is None
        path: Explicit config file, which must exist

    Returns:
        BundlerConfig (defaults when no file is found)

    Raises:
        ConfigurationError: If the file is missing, not JSON, or has bad keys
    """
    if path is None:
        path = os.path.join(root, CONFIG_FILE)
        if not os.path.exists(path):
            return BundlerConfig()
    elif not os.path.exists(path):
        raise missing_path_error("config file", path)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError("Config file is not valid JSON", path=path, details=str(e))

    try:
        return BundlerConfig(**data)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError("Invalid configuration", path=path, details=str(e))
