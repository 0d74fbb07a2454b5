"""
Security Module - Request helpers and response hardening
"""

from flask import request

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
}


def get_client_ip():
    """Get real client IP address"""
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr or 'unknown'


def add_security_headers(response):
    """Add security headers to a response"""
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


__all__ = ['get_client_ip', 'add_security_headers', 'SECURITY_HEADERS']
