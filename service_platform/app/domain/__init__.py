"""
Cross-cutting domain helpers: API key auth, payload normalizers and
synthetic fallback data.
"""
