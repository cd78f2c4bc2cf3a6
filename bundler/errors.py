"""
Error types for the bundler.
"""


class BundleError(Exception):
    """Base exception for bundling failures with path context and hints."""
    def __init__(self, message, path=None, details=None, suggestion=None):
        self.message = message
        self.path = path
        self.details = details  # Captured output, offending value, ...
        self.suggestion = suggestion  # How to fix it
        super().__init__(self._format_error())

    def _format_error(self):
        """Format the error message with path, details and suggestion."""
        lines = [f"\n❌ {self.title}"]
        if self.path:
            lines.append(f" ({self.path})")
        lines.append(":\n")

        lines.append(f"   {self.message}\n")

        if self.details:
            for detail_line in str(self.details).rstrip().split('\n'):
                lines.append(f"   > {detail_line}\n")

        if self.suggestion:
            lines.append(f"   💡 {self.suggestion}\n")

        return "".join(lines)

    @property
    def title(self):
        return "Bundle Error"


class ConfigurationError(BundleError):
    """Bad selector, missing input paths or an invalid config file."""

    @property
    def title(self):
        return "Configuration Error"


class ArtifactValidationError(BundleError):
    """The generated artifact failed its post-build smoke test."""

    @property
    def title(self):
        return "Validation Error"


def missing_path_error(kind, path):
    """Build the ConfigurationError raised for a required path that is absent."""
    return ConfigurationError(
        f"Missing {kind}",
        path=str(path),
        suggestion="Check --root and the layout settings in nubundle.json",
    )


def unreadable_path_error(kind, path, error):
    """Build the ConfigurationError raised when an input file cannot be read."""
    return ConfigurationError(
        f"Cannot read {kind}",
        path=str(path),
        details=str(error),
        suggestion="Inputs must be readable UTF-8 text files",
    )
