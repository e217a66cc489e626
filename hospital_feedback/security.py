from flask_talisman import Talisman


def init_security(app):
    """
    Production/staging security headers.
    The static pages pull Tailwind, icons and fonts from public CDNs and use inline handlers.
    """
    cdns = [
        "https://cdn.tailwindcss.com",
        "https://unpkg.com",
        "https://cdnjs.cloudflare.com",
        "https://cdn.jsdelivr.net",
    ]
    csp = {
        "default-src": ["'self'"],
        "script-src":  ["'self'", "'unsafe-inline'", *cdns, "blob:"],
        "style-src":   ["'self'", "'unsafe-inline'", "https://cdn.tailwindcss.com", "https://cdnjs.cloudflare.com"],
        "font-src":    ["'self'", "data:", "https://cdnjs.cloudflare.com"],
        "img-src":     ["'self'", "data:", "https:"],
        "connect-src": ["'self'"],
        "frame-ancestors": ["'self'"],
        "base-uri":    ["'self'"],
        "form-action": ["'self'"],
    }

    Talisman(
        app,
        content_security_policy=csp,
        force_https=app.config.get("FORCE_HTTPS", True),
        strict_transport_security=True,
        session_cookie_secure=True,
        frame_options="SAMEORIGIN",
        referrer_policy="strict-origin-when-cross-origin",
    )
