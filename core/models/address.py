# ============================================================================
# PROCESS ADDRESS MODEL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core model - Network address of a database process
# PURPOSE: Parse and render ip:port[:flag] addresses
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ProcessAddress, AddressMap
# DEPENDENCIES: pydantic
# ============================================================================
"""
Process Address Model

Addresses are exchanged with the management plane in their string form:

    10.1.2.3:4500
    10.1.2.3:4500:tls
    [2001:db8::1]:4500:tls
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class ProcessAddress(BaseModel):
    """A reachable database process address."""

    ip: str = Field(..., min_length=1)
    port: int = Field(..., ge=0, le=65535)
    flags: List[str] = Field(
        default_factory=list,
        description="Trailing address flags such as 'tls'"
    )

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, value: str) -> "ProcessAddress":
        """
        Parse the ip:port[:flag...] form.

        Raises:
            ValueError: If the address is malformed
        """
        if not value:
            raise ValueError("empty process address")

        if value.startswith("["):
            end = value.find("]")
            if end == -1:
                raise ValueError(f"unterminated IPv6 address: {value}")
            ip = value[1:end]
            rest = value[end + 1:]
            if not rest.startswith(":"):
                raise ValueError(f"missing port in address: {value}")
            parts = rest[1:].split(":")
        else:
            ip, _, rest = value.partition(":")
            if not rest:
                raise ValueError(f"missing port in address: {value}")
            parts = rest.split(":")

        try:
            port = int(parts[0])
        except ValueError:
            raise ValueError(f"invalid port in address: {value}") from None

        return cls(ip=ip, port=port, flags=[p for p in parts[1:] if p])

    @property
    def is_tls(self) -> bool:
        return "tls" in self.flags

    def __str__(self) -> str:
        host = f"[{self.ip}]" if ":" in self.ip else self.ip
        return ":".join([f"{host}:{self.port}", *self.flags])


# Process group id -> addresses of its processes
AddressMap = Dict[str, List[ProcessAddress]]


__all__ = ["ProcessAddress", "AddressMap"]
