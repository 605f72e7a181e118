"""Release bounded context.

- versions: local package manifests
- registry: dist-tag queries and mutations
- reconcile: merge local + registry state and validate it
- names: release name sequence
- publisher: tags + release commit
- ship: the orchestrated workflow
- fetch: published tarball download
"""

from __future__ import annotations
