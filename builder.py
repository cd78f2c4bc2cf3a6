import sys

from bundler.assembler import Assembler, write_artifact
from bundler.config import BundlerConfig, check_layout
from bundler.errors import unreadable_path_error
from bundler.models import BuildPlan, SourceFile
from bundler.resolver import DependencyResolver
from bundler.templates import discover_templates
from bundler.validator import validate_artifact

# Global verbose flag
_VERBOSE = False

def set_verbose(value):
    """Set the global verbose flag."""
    global _VERBOSE
    _VERBOSE = value

def debug_log(message):
    """Log a debug message to stderr if verbose mode is enabled."""
    if _VERBOSE:
        print(f"\033[94mDEBUG:\033[0m {message}", file=sys.stderr)

def warn(message):
    """Log a warning to stderr regardless of verbosity."""
    print(f"\033[93m\033[1mWARNING:\033[0m {message}", file=sys.stderr)

def read_source(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return SourceFile(path=path, content=f.read())
    except (OSError, UnicodeDecodeError) as e:
        raise unreadable_path_error("entry script", path, e)

def plan_build(config, layout):
    """
    Resolve modules and templates for one target into a BuildPlan.

    Raises:
        ConfigurationError: If a required input path is missing
    """
    # STEP 1: CHECK INPUTS
    check_layout(layout)
    entry = read_source(layout.entry_script)
    debug_log(f"Entry script: {entry.path}")

    # STEP 2: RESOLVE MODULES
    resolver = DependencyResolver.for_layout(layout, config)
    resolution = resolver.resolve(entry.content)
    for module in resolution.shared + resolution.target:
        debug_log(f"Resolved {module.name} ({module.root.value}) -> {module.path}")
    if resolution.unresolved:
        # Left out of the bundle on purpose: may be provided at runtime
        warn(f"Unresolved imports not bundled: {', '.join(resolution.unresolved)}")

    # STEP 3: DISCOVER TEMPLATES
    templates = discover_templates(layout.templates_dir, config.template_suffix, config.constant_suffix)
    for asset in templates:
        debug_log(f"Template {asset.file_name} -> {asset.constant_name}")
    if not templates:
        debug_log(f"No templates in {layout.templates_dir}")

    shared_names = {m.name for m in resolution.shared}
    inline = config.inline_module if config.inline_module in shared_names else None
    if inline is not None:
        for module in resolution.shared + resolution.target:
            if module.name != inline and inline in module.imported_names:
                # Inside a module block `use <inline> *` names a module that does not exist
                warn(f"Module '{module.name}' imports top-level module '{inline}'; "
                     f"the bundled import will fail at runtime")

    return BuildPlan(
        target=layout.target,
        shared_modules=resolution.shared,
        target_modules=resolution.target,
        templates=tuple(templates),
        entry_script=entry,
        output_path=layout.output_path,
        inline_module=inline,
    )

def build(root, target, config=None, validate=True):
    """
    Bundle `target` into its artifact and smoke-test it.

    Returns:
        (BuildPlan, Artifact, ValidationReport or None when validate is False)
    """
    config = config or BundlerConfig()
    layout = config.layout(root, target)
    plan = plan_build(config, layout)

    # STEP 4: ASSEMBLE AND WRITE
    artifact = Assembler(config).assemble(plan)
    write_artifact(artifact)
    debug_log(f"Wrote {artifact.output_path}")

    # STEP 5: SMOKE TEST
    report = None
    if validate:
        report = validate_artifact(artifact.output_path, config.smoke_test_flag)
    return plan, artifact, report
