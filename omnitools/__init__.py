"""Front-end tool functions registered with the MCP server."""
