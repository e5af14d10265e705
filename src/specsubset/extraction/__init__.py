"""The extraction engine -- pure functions over parsed OpenAPI documents.

Typical usage::

    from specsubset.extraction import extract_subset

    result = extract_subset(document, ExtractionOptions(path_marker="/public/"))

Sub-modules:

* :mod:`~specsubset.extraction.selector` -- path inclusion predicate.
* :mod:`~specsubset.extraction.scanner` -- ``$ref`` collection over any
  nested value.
* :mod:`~specsubset.extraction.closure` -- transitive closure over
  ``components.schemas``.
* :mod:`~specsubset.extraction.security` -- API-key scheme reconciliation.
* :mod:`~specsubset.extraction.assembler` -- output document assembly.
* :mod:`~specsubset.extraction.engine` -- the pipeline tying them together.
"""

from specsubset.extraction.engine import extract_subset

__all__ = ["extract_subset"]
