"""MCP stdio server exposing context sync operations as tools."""
