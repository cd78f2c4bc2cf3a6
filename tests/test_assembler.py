"""
Unit tests for bundler/assembler.py - artifact ordering and writing.
"""
import os
import re
import stat

import pytest

from builder import plan_build
from bundler.assembler import Assembler, strip_entry_imports, write_artifact
from bundler.config import BundlerConfig
from bundler.models import Artifact


def assemble(repo, target='java', config=None):
    config = config or BundlerConfig()
    plan = plan_build(config, config.layout(repo.root, target))
    return plan, Assembler(config).assemble(plan)


class TestOrdering:
    """Segment order of the generated artifact."""

    def test_alpha_beta_scenario(self, repo):
        repo.write({
            'java/setup.nu': '#!/usr/bin/env nu\nuse lib/alpha.nu *\n\ndef main [] {\n    greet\n}\n',
            'java/lib/alpha.nu': 'use ../../shared/lib/beta.nu *\n\nexport def greet [] { shout "hi" }\n',
            'shared/lib/beta.nu': 'export def shout [msg: string] { print $msg }\n',
        })
        plan, artifact = assemble(repo)

        assert plan.shared_module_names == ['beta']
        assert plan.target_module_names == ['alpha']
        assert artifact.text == (
            '#!/usr/bin/env nu\n'
            '\n'
            'module beta {\n'
            'export def shout [msg: string] { print $msg }\n'
            '}\n'
            '\n'
            'module alpha {\n'
            'use beta *\n'
            '\n'
            'export def greet [] { shout "hi" }\n'
            '}\n'
            '\n'
            'use beta *\n'
            'use alpha *\n'
            '\n'
            'def main [] {\n'
            '    greet\n'
            '}\n'
        )

    def test_full_java_layout(self, java_repo):
        _, artifact = assemble(java_repo)
        text = artifact.text

        markers = [
            '#!/usr/bin/env nu',
            'module templates {',
            'module log {',
            'module config_files {',
            'module maven {',
            'use templates *\nuse log *\nuse config_files *\nuse maven *',
            'def banner [title: string] {',
            'def main [--yes] {',
        ]
        positions = [text.index(m) for m in markers]
        assert positions == sorted(positions)

    def test_inline_module_is_unwrapped(self, java_repo):
        _, artifact = assemble(java_repo)

        assert 'module common {' not in artifact.text
        assert 'use common *' not in artifact.text
        assert artifact.text.count('def banner [title: string] {') == 1

    def test_entry_imports_and_shebang_removed(self, java_repo):
        _, artifact = assemble(java_repo)

        assert artifact.text.count('#!/usr/bin/env nu') == 1
        assert 'use lib/maven.nu *' not in artifact.text
        assert 'use ../shared/common.nu *' not in artifact.text

    def test_template_loader_rewritten(self, java_repo):
        _, artifact = assemble(java_repo)
        loader = artifact.text[artifact.text.index('module config_files {'):]
        loader = loader[:loader.index('\n}\n')]

        assert 'use templates *' in loader
        assert 'let content = $SETTINGS_XML_TEMPLATE' in loader
        assert 'templates-dir' not in loader

    def test_unused_module_excluded(self, java_repo):
        _, artifact = assemble(java_repo)

        assert 'unused' not in artifact.text
        assert 'never-called' not in artifact.text


class TestTemplates:
    def test_constant_round_trip(self, java_repo):
        _, artifact = assemble(java_repo)
        match = re.search(r'export const SETTINGS_XML_TEMPLATE = "((?:[^"\\]|\\.)*)"', artifact.text, re.S)
        value = re.sub(r'\\(.)', r'\1', match.group(1), flags=re.S)

        assert value == java_repo.read('java', 'templates', 'settings.xml.template')

    @pytest.mark.parametrize('remove_dir', [True, False])
    def test_no_templates(self, java_repo, remove_dir):
        """Missing or empty template dir: no block and no injected import."""
        os.remove(java_repo.path('java', 'templates', 'settings.xml.template'))
        if remove_dir:
            os.rmdir(java_repo.path('java', 'templates'))
        _, artifact = assemble(java_repo)

        assert 'module templates' not in artifact.text
        assert 'use templates *' not in artifact.text
        # The loader keeps its disk-based shape
        assert 'def templates-dir [] {' in artifact.text


class TestDeterminism:
    def test_byte_identical(self, java_repo):
        _, first = assemble(java_repo)
        _, second = assemble(java_repo)

        assert first.text.encode('utf-8') == second.text.encode('utf-8')


class TestStripEntryImports:
    def test_keeps_external_imports(self):
        source = '#!/usr/bin/env nu\nuse std log\nuse lib/alpha.nu *\nmain\n'
        assert strip_entry_imports(source, {'alpha'}) == 'use std log\nmain'


class TestWriteArtifact:
    def test_writes_and_sets_executable(self, repo):
        path = repo.path('dist', 'nested', 'setup-java.nu')
        write_artifact(Artifact(output_path=path, text='#!/usr/bin/env nu\nprint 1\n'))

        assert repo.read('dist', 'nested', 'setup-java.nu') == '#!/usr/bin/env nu\nprint 1\n'
        mode = os.stat(path).st_mode
        assert mode & stat.S_IXUSR

    @pytest.mark.skipif(os.name != 'posix', reason="POSIX permission bits")
    def test_mode_is_755_under_strict_umask(self, repo):
        path = repo.path('dist', 'setup-java.nu')
        previous = os.umask(0o077)
        try:
            write_artifact(Artifact(output_path=path, text='print 1\n'))
        finally:
            os.umask(previous)

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o755

    def test_overwrites_existing(self, repo):
        repo.write({'dist/setup-java.nu': 'old contents that are longer\n'})
        path = repo.path('dist', 'setup-java.nu')
        write_artifact(Artifact(output_path=path, text='new\n'))

        assert repo.read('dist', 'setup-java.nu') == 'new\n'
