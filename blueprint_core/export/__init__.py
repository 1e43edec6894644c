"""DXF serialization and SVG blueprint migration."""
