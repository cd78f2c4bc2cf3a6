# nu-bundler - Core Bundling Components
"""
Core modules for the Nushell module bundler:
- errors: Error types for configuration and validation failures
- grammar: Lark grammar for `use` import lines
- imports: Import parsing and module naming
- resolver: Dependency traversal over the shared and target roots
- templates: Template discovery and string-constant embedding
- transformer: Import rewriting and template-loader substitution
- assembler: Artifact ordering, writing and permissions
- validator: Post-build smoke test
"""

from .errors import BundleError, ConfigurationError, ArtifactValidationError
from .config import BundlerConfig, load_config
from .imports import parse_imports
from .resolver import DependencyResolver
from .templates import discover_templates
from .transformer import ModuleTransformer
from .assembler import Assembler, write_artifact
from .validator import validate_artifact

__all__ = [
    'BundleError',
    'ConfigurationError',
    'ArtifactValidationError',
    'BundlerConfig',
    'load_config',
    'parse_imports',
    'DependencyResolver',
    'discover_templates',
    'ModuleTransformer',
    'Assembler',
    'write_artifact',
    'validate_artifact',
]
