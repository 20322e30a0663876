from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from django.conf import settings

from .sips import SHA256, Mode, Passphrase

GATEWAY_ID = "sips_payment"


@dataclass(frozen=True)
class GatewayConfig:
    mode: Mode
    interface_version: str
    passphrase: Passphrase
    merchant_id: str
    key_version: Optional[int]
    seal_algorithm: str = SHA256
    timeout: float = 20

    @property
    def is_test(self) -> bool:
        return self.mode != Mode.PRODUCTION

    def missing(self) -> List[str]:
        """Names of required settings that are empty."""
        out = []
        if not self.merchant_id:
            out.append("SIPS_MERCHANT_ID")
        if not self.passphrase:
            out.append("SIPS_PASSPHRASE")
        if not self.interface_version:
            out.append("SIPS_INTERFACE_VERSION")
        if self.key_version is None:
            out.append("SIPS_KEY_VERSION")
        return out


def _mode() -> Mode:
    raw = str(getattr(settings, "SIPS_MODE", "TEST") or "TEST").upper().strip()
    # accept both the enum name and the wire value ("SIMULATION" / "SIMU")
    if raw in Mode.__members__:
        return Mode[raw]
    return Mode(raw)


def _key_version() -> Optional[int]:
    raw = str(getattr(settings, "SIPS_KEY_VERSION", "") or "").strip()
    try:
        return int(raw)
    except ValueError:
        return None


def gateway_config() -> GatewayConfig:
    """Read the SIPS settings once per call; the result is passed around explicitly."""
    return GatewayConfig(
        mode=_mode(),
        interface_version=str(getattr(settings, "SIPS_INTERFACE_VERSION", "") or "").strip(),
        passphrase=Passphrase(getattr(settings, "SIPS_PASSPHRASE", "")),
        merchant_id=str(getattr(settings, "SIPS_MERCHANT_ID", "") or "").strip(),
        key_version=_key_version(),
        seal_algorithm=str(getattr(settings, "SIPS_SEAL_ALGORITHM", SHA256) or SHA256).upper().strip(),
        timeout=float(getattr(settings, "SIPS_TIMEOUT", 20)),
    )
