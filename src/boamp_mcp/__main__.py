# src/boamp_mcp/__main__.py

from boamp_mcp.server import main

main()
