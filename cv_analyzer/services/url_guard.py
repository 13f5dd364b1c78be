from __future__ import annotations

import ipaddress
import re
import socket
from urllib.parse import urlparse, urlunparse

from cv_analyzer.core.errors import FetchFailed


def normalize_job_url(raw_url: str) -> tuple[str, str]:
    value = (raw_url or "").strip()
    if not value:
        raise FetchFailed("Job URL is required.")
    if not re.match(r"^[a-z][a-z0-9+.-]*://", value, flags=re.IGNORECASE):
        value = f"https://{value}"
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"}:
        raise FetchFailed("Only http/https job URLs are supported.")
    hostname = (parsed.hostname or "").lower().strip()
    if not parsed.netloc or not hostname:
        raise FetchFailed("Invalid job URL host.")
    normalized = urlunparse(
        (
            parsed.scheme.lower(),
            parsed.netloc.lower(),
            parsed.path or "/",
            "",
            parsed.query,
            "",
        )
    )
    return normalized, hostname


def host_is_private_or_local(hostname: str) -> bool:
    host = (hostname or "").strip().lower()
    if host in {"localhost", "127.0.0.1", "::1"} or host.endswith(".local"):
        return True
    try:
        ip = ipaddress.ip_address(host)
        return bool(ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved)
    except ValueError:
        pass
    try:
        infos = socket.getaddrinfo(host, None)
    except OSError:
        # Unresolvable hosts fail later at fetch time.
        return False
    for _family, _socktype, _proto, _canon, sockaddr in infos:
        address = sockaddr[0] if sockaddr else ""
        try:
            resolved = ipaddress.ip_address(address)
        except ValueError:
            continue
        if resolved.is_private or resolved.is_loopback or resolved.is_link_local or resolved.is_reserved:
            return True
    return False
