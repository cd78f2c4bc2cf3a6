import argparse
import os
import sys

from bundler.config import load_config
from bundler.errors import BundleError
from builder import build, set_verbose

def log(message):
    """Log informational messages to stderr."""
    print(f"\033[92m\033[1mINFO:\033[0m {message}", file=sys.stderr)

def fail(error):
    print(str(error), file=sys.stderr)
    sys.exit(1)

def cmd_bundle(args):
    set_verbose(args.verbose)
    root = os.path.abspath(args.root)

    try:
        config = load_config(root, args.config)
        # Checked before any work so a bad target never touches the output dir
        config.check_target(args.target)
    except BundleError as e:
        fail(e)

    if not args.yes:
        # Advisory only: the build runs the same way with or without --yes
        log("Running without --yes; bundling anyway. Pass --yes to acknowledge the overwrite.")

    log(f"Bundling target '{args.target}'...")
    try:
        plan, artifact, report = build(root, args.target, config, validate=not args.no_validate)
    except BundleError as e:
        fail(e)

    log(f"  Shared modules: {', '.join(plan.shared_module_names) or '(none)'}")
    log(f"  Target modules: {', '.join(plan.target_module_names) or '(none)'}")
    log(f"  Templates: {len(plan.templates)}")
    if plan.inline_module:
        log(f"  Inlined at top level: {plan.inline_module}")

    if report is None:
        log(f"⚠️  Smoke test skipped for {artifact.output_path}")
    else:
        log(f"✓ Smoke test passed ({report.byte_size} bytes)")
    log(f"📁 Output: {artifact.output_path}")

def main(argv=None):
    parser = argparse.ArgumentParser(description="Bundle a Nushell bootstrap script into one executable file")
    parser.add_argument("target", help="Target variant to bundle (e.g. java, node, python)")
    parser.add_argument("--yes", "-y", action="store_true", help="Acknowledge that the output file is overwritten")
    parser.add_argument("--root", default=".", help="Repository root (default: current directory)")
    parser.add_argument("--config", help="Config file (default: <root>/nubundle.json if present)")
    parser.add_argument("--no-validate", action="store_true", help="Skip running the artifact after writing it")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output (sent to stderr)")

    args = parser.parse_args(argv)
    cmd_bundle(args)

if __name__ == "__main__":
    main()
