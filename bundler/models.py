"""
Data model shared by the bundling pipeline stages.

Every model is frozen: a stage builds its output once and hands it on
without later stages mutating it.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ModuleRoot(str, Enum):
    """Which of the two module roots a module was found in."""
    SHARED = "shared"
    TARGET = "target"


class SourceFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    content: str


class ImportStatement(BaseModel):
    """One parsed `use` line.

    `start`/`end` delimit the module reference inside the original line,
    quotes included, so the reference can be swapped for a bare name.
    """
    model_config = ConfigDict(frozen=True)

    reference: str
    name: str
    qualifiers: str = ""
    start: int
    end: int


class Module(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    root: ModuleRoot
    path: str
    raw_content: str
    imported_names: tuple[str, ...] = ()


class ResolutionResult(BaseModel):
    """Modules reachable from an entry script, split by root and sorted by name."""
    model_config = ConfigDict(frozen=True)

    shared: tuple[Module, ...] = ()
    target: tuple[Module, ...] = ()
    unresolved: tuple[str, ...] = ()

    @property
    def shared_names(self):
        return [m.name for m in self.shared]

    @property
    def target_names(self):
        return [m.name for m in self.target]


class TemplateAsset(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: str
    content: str
    constant_name: str


class BuildPlan(BaseModel):
    """Everything the assembler needs for one target. Built once, never mutated."""
    model_config = ConfigDict(frozen=True)

    target: str
    shared_modules: tuple[Module, ...] = ()
    target_modules: tuple[Module, ...] = ()
    templates: tuple[TemplateAsset, ...] = ()
    entry_script: SourceFile
    output_path: str
    inline_module: Optional[str] = None

    @property
    def shared_module_names(self):
        return sorted(m.name for m in self.shared_modules)

    @property
    def target_module_names(self):
        return sorted(m.name for m in self.target_modules)

    @property
    def bundled_names(self):
        """Every module name that exists inside the artifact."""
        return set(self.shared_module_names) | set(self.target_module_names)


class Artifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    output_path: str
    text: str


class ValidationReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    output_path: str
    byte_size: int
    returncode: int = 0
