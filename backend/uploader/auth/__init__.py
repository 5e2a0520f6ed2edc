"""Authentication module (shared admin password).

A correct password sets the ``auth`` session cookie; the route guard keeps
the upload page behind it, and the upload API checks it on every request.

Services:
    - AuthGate: password comparison.
    - RouteGuardMiddleware: redirects the protected page to the login page.
"""
