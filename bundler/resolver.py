"""
Dependency resolution for bundled modules.

Walks the `use` graph from an entry script and classifies every module it
can find locally into the Shared or Target set. Replaces the recursive
file inlining the bundler used to do: only the reachable set matters
here, the assembler decides the order.
"""
import os
from collections import deque

from bundler.errors import unreadable_path_error
from bundler.imports import parse_imports
from bundler.models import Module, ModuleRoot, ResolutionResult


def lookup_path(reference, skip_segments=(), extension=".nu"):
    """
    Turn an import reference into a path relative to a module root.

    Leading `.`/`..` segments and any of `skip_segments` (the `lib` dir and
    root directory names) are dropped so the same module is found no matter
    which file imports it. `../shared/lib/log.nu` -> `log.nu`,
    `lib/group/widget.nu` -> `group/widget.nu`.
    """
    skip = {".", ".."} | set(skip_segments)
    parts = [p for p in reference.replace('\\', '/').split('/') if p]
    while len(parts) > 1 and parts[0] in skip:
        parts.pop(0)
    relative = "/".join(parts)
    if not os.path.splitext(relative)[1]:
        relative += extension
    return relative


class DependencyResolver:
    """
    Worklist traversal over the imports reachable from an entry script.

    Modules are probed in a fixed priority order: shared lib, shared flat
    dir, target lib. The first hit wins, so a name present in both roots
    is always taken from the shared root.
    """

    def __init__(self, shared_lib, shared_dir, target_lib, extension=".nu", skip_segments=()):
        self.locations = [
            (ModuleRoot.SHARED, shared_lib),
            (ModuleRoot.SHARED, shared_dir),
            (ModuleRoot.TARGET, target_lib),
        ]
        self.extension = extension
        self.skip_segments = tuple(skip_segments)

    @classmethod
    def for_layout(cls, layout, config):
        skip = (config.lib_dir, os.path.basename(os.path.normpath(config.shared_dir)), layout.target)
        return cls(
            layout.shared_lib,
            layout.shared_dir,
            layout.target_lib,
            extension=config.module_extension,
            skip_segments=skip,
        )

    def probe(self, statement):
        """Return (root, path) of the first location holding the module, else None."""
        relative = lookup_path(statement.reference, self.skip_segments, self.extension)
        for root, directory in self.locations:
            candidate = os.path.join(directory, *relative.split('/'))
            if os.path.isfile(candidate):
                return root, candidate
        return None

    def load(self, name, root, path):
        """Read a module; return it with its parsed import statements."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise unreadable_path_error("module", path, e)
        statements = parse_imports(content)
        module = Module(
            name=name,
            root=root,
            path=path,
            raw_content=content,
            imported_names=tuple(s.name for s in statements),
        )
        return module, statements

    def resolve(self, entry_source):
        """
        Discover every module reachable from `entry_source`.

        Names that cannot be found in any location are left out of the
        bundle; they are treated as facilities provided at runtime and only
        reported through `unresolved`.

        Returns:
            ResolutionResult with both module sets sorted by name
        """
        worklist = deque(parse_imports(entry_source))
        found = {}
        missing = set()

        while worklist:
            statement = worklist.popleft()
            if statement.name in found:
                continue

            hit = self.probe(statement)
            if hit is None:
                missing.add(statement.name)
                continue

            root, path = hit
            module, children = self.load(statement.name, root, path)
            found[module.name] = module
            for child in children:
                if child.name not in found:
                    worklist.append(child)

        modules = sorted(found.values(), key=lambda m: m.name)
        return ResolutionResult(
            shared=tuple(m for m in modules if m.root == ModuleRoot.SHARED),
            target=tuple(m for m in modules if m.root == ModuleRoot.TARGET),
            unresolved=tuple(sorted(missing - set(found))),
        )
