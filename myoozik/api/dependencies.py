# ============================================================================
# FILE: myoozik/api/dependencies.py
# ============================================================================
from fastapi import Request
from typing import Optional

DEFAULT_CLIENT_IP = "127.0.0.1"

def get_client_ip(request: Request) -> str:
    """
    Identify the rating submitter by network address.
    Order: first X-Forwarded-For hop, X-Real-IP, socket peer, loopback.
    Clients behind one NAT share an identity (and therefore one rating).
    """
    forwarded_for: Optional[str] = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return DEFAULT_CLIENT_IP
