"""Allow ``python -m s3_mcp``."""

from __future__ import annotations

from s3_mcp.mcp_servers.storage_server import main

if __name__ == "__main__":
    main()
