"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specsubset.exceptions.SpecsubsetError` subclass.
CI pipelines that publish the external spec can inspect the exit code to
tell a bad input document from a failed write without parsing stderr.

Example::

    $ specsubset extract missing.json -o external.json
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- the source could not be read
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred while fetching a remote spec."""

EXIT_SPEC_PARSE_ERROR = 7
"""The source document could not be read, parsed, or is not OpenAPI 3.x."""

EXIT_WRITE_ERROR = 8
"""The output document could not be written."""
