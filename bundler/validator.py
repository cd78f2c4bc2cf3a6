"""
Post-build smoke test.

Runs the freshly written artifact with a harmless flag and checks that it
exits cleanly. The artifact stays on disk whatever the outcome.
"""
import os
import subprocess

from bundler.errors import ArtifactValidationError
from bundler.models import ValidationReport


def validate_artifact(output_path, flag="--help"):
    """
    Execute `output_path flag` and return a ValidationReport on exit code 0.

    Raises:
        ArtifactValidationError: On a non-zero exit, or if the artifact
            cannot be executed at all (e.g. its interpreter is missing)
    """
    try:
        result = subprocess.run(
            [output_path, flag],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise ArtifactValidationError(
            "Generated artifact could not be executed",
            path=output_path,
            details=str(e),
            suggestion="Check that the interpreter named in the header is on PATH",
        )

    if result.returncode != 0:
        raise ArtifactValidationError(
            f"Generated artifact exited with status {result.returncode}",
            path=output_path,
            details=result.stderr or result.stdout,
            suggestion="The artifact was left on disk for inspection",
        )

    return ValidationReport(
        output_path=output_path,
        byte_size=os.path.getsize(output_path),
        returncode=result.returncode,
    )
