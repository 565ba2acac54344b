"""
Game platform API service package.

The service fronts the Roblox public web APIs, enforcing:
- Optional static API key authentication
- Per-client fixed-window rate limiting
- In-memory response caching through the fetch gateway
- Synthetic fallback data when the upstream cannot answer

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.adapters: Upstream URL and cache-key construction.
- app.caching: TTL cache and cached fetch gateway.
- app.ratelimit: Fixed-window limiter and client identification.
- app.domain: API key auth, payload normalizers, mock data.
"""
