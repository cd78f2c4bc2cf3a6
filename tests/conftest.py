"""
Shared fixtures: throwaway repository trees for the bundler to consume.
"""
import os
import sys
import tempfile
import textwrap

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


class RepoTree:
    """Writes `relative path -> contents` entries under a temporary root."""

    def __init__(self, root):
        self.root = root

    def write(self, files):
        for relative, content in files.items():
            path = self.path(relative)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'w', encoding='utf-8', newline='') as f:
                f.write(textwrap.dedent(content).lstrip("\n"))

    def path(self, *parts):
        return os.path.join(self.root, *parts)

    def read(self, *parts):
        with open(self.path(*parts), 'r', encoding='utf-8', newline='') as f:
            return f.read()


# A small but complete java bootstrap: entry script, shared logging, a
# top-level common module, a template loader and one template.
JAVA_REPO = {
    "shared/common.nu": """
        def banner [title: string] {
            print $"== ($title) =="
        }
    """,
    "shared/lib/log.nu": """
        export def info [msg: string] {
            print $"INFO: ($msg)"
        }
    """,
    "java/setup.nu": """
        #!/usr/bin/env nu
        use ../shared/common.nu *
        use ../shared/lib/log.nu *
        use lib/maven.nu *

        def main [--yes] {
            banner "java"
            install-maven
        }
    """,
    "java/lib/maven.nu": """
        use ../../shared/lib/log.nu *
        use config_files.nu *

        export def install-maven [] {
            info "installing maven"
            write-maven-settings ~/.m2/settings.xml
        }
    """,
    "java/lib/config_files.nu": """
        use ../../shared/lib/log.nu *

        def templates-dir [] {
            $env.FILE_PWD | path join ".." "templates"
        }

        export def write-maven-settings [dest: path] {
            let template_path = (templates-dir | path join "settings.xml.template")
            let content = (open --raw $template_path)
            $content | save --force $dest
            info $"wrote ($dest)"
        }
    """,
    "java/lib/unused.nu": """
        export def never-called [] { print "unused" }
    """,
    "java/templates/settings.xml.template": '<settings path="C:\\m2\\repo">\n</settings>\n',
}


@pytest.fixture
def repo():
    """An empty repository tree in a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield RepoTree(tmpdir)


@pytest.fixture
def java_repo(repo):
    """A repository tree holding the java bootstrap sources."""
    repo.write(JAVA_REPO)
    return repo
