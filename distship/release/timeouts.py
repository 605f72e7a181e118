from __future__ import annotations

# npm dist-tag ls / add (one registry round trip each)
NPM_TIMEOUT_SECONDS = 60.0

# Tarball download
CURL_TIMEOUT_SECONDS = 5 * 60.0
