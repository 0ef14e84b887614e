"""HTTP surface for SSE sessions."""
