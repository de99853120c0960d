# Middleware package init
"""
Api.Template — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Correlation] → [Logging] → [HTTPS Redirect] → [Authorization]
            → [Compression] → [Exception Handling] → Route Handler

    1. Correlation FIRST: every later log line carries the correlation ID
    2. Logging: sees the final status, including redirects and 500s
    3. HTTPS Redirect: plaintext requests never reach the endpoints
    4. Authorization: no policies yet, pass-through
    5. Compression: gzip for whitelisted content types
    6. Exception Handling: unexpected faults → 500 problem details
"""
