import hmac
from datetime import datetime, timezone
from ipaddress import ip_address
from typing import Optional

from fastapi import Request


def verify_shared_secret(presented: str, expected: str) -> bool:
    if not presented or not expected:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def utcnow() -> datetime:
    # Always give an aware UTC datetime
    return datetime.now(timezone.utc)


def _first_ip(xff: str) -> Optional[str]:
    for part in xff.split(","):
        s = part.strip()
        if s:
            return s
    return None


def _norm(ip: str) -> Optional[str]:
    try:
        a = ip_address(ip)
        return str(a.ipv4_mapped) if getattr(a, "ipv4_mapped", None) else str(a)
    except ValueError:
        return None


def client_ip(req: Request) -> Optional[str]:
    """Caller address, honouring the reverse proxy headers nginx sets."""
    for h in ("x-real-ip", "x-forwarded-for"):
        v = req.headers.get(h)
        if not v:
            continue
        ip = _first_ip(v) if h == "x-forwarded-for" else v.strip()
        norm = _norm(ip) if ip else None
        if norm:
            return norm
    return _norm(req.client.host) if req.client else None
