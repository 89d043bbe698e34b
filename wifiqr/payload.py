from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field as ModelField

HEX_DIGITS = "0123456789abcdef"

class WifiMethod(str, Enum):
    NO_PASS = "no-pass"
    WEP = "wep"
    # also used for WPA2 and WPA3 networks
    WPA = "wpa"
    WPA2_ENTERPRISE = "wpa2-enterprise"
    # WPA plus the transition-disable flag, so capable devices refuse a WPA2 downgrade
    WPA3 = "wpa3"

class EapMethod(str, Enum):
    PEAP = "peap"
    TLS = "tls"
    TTLS = "ttls"
    PWD = "pwd"
    SIM = "sim"
    AKA = "aka"
    AKA_PRIME = "aka-prime"

class Phase2(str, Enum):
    MS_CHAP = "ms-chap"
    MS_CHAP_V2 = "ms-chap-v2"
    PAP = "pap"
    GTC = "gtc"
    SIM = "sim"
    AKA = "aka"
    AKA_PRIME = "aka-prime"

# https://superuser.com/a/1752085 : WPA3 is announced as T:WPA plus R:1
AUTH_KINDS = {
    WifiMethod.NO_PASS: "nopass",
    WifiMethod.WEP: "WEP",
    WifiMethod.WPA: "WPA",
    WifiMethod.WPA2_ENTERPRISE: "WPA2-EAP",
    WifiMethod.WPA3: "WPA",
}

EAP_NAMES = {
    EapMethod.PEAP: "PEAP",
    EapMethod.TLS: "TLS",
    EapMethod.TTLS: "TTLS",
    EapMethod.PWD: "PWD",
    EapMethod.SIM: "SIM",
    EapMethod.AKA: "AKA",
    EapMethod.AKA_PRIME: "AKA_PRIME",
}

PHASE2_NAMES = {
    Phase2.MS_CHAP: "MSCHAP",
    Phase2.MS_CHAP_V2: "MSCHAPV2",
    Phase2.PAP: "PAP",
    Phase2.GTC: "GTC",
    Phase2.SIM: "SIM",
    Phase2.AKA: "AKA",
    Phase2.AKA_PRIME: "AKA_PRIME",
}

# WPA3 transition disable: https://www.wi-fi.org/file/wpa3tm-specification
TRANSITION_DISABLE = bytes([0x01])


def escape_field_value(value: str) -> str:
    """Escape the payload delimiters in `value` and quote it if it could pass for hex."""
    # backslash first so the inserted escapes are not escaped again
    value = (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace('"', '\\"')
        .replace(":", "\\:")
    )
    if could_be_ascii_hex(value):
        return f'"{value}"'
    return value

def could_be_ascii_hex(value: str) -> bool:
    # true for "" as well, which is therefore quoted
    return all(c in HEX_DIGITS for c in value)


@dataclass(frozen=True)
class Field:
    name: str
    value: str

    @classmethod
    def string(cls, name: str, value: str) -> Field:
        return cls(name, escape_field_value(value))

    @classmethod
    def base64(cls, name: str, value: bytes) -> Field:
        return cls(name, base64.b64encode(value).decode("ascii"))

    @classmethod
    def hex(cls, name: str, value: bytes) -> Field:
        # one unpadded lowercase hex group per byte: b"\x01" -> "1"
        return cls(name, "".join(f"{b:x}" for b in value))

    def __str__(self) -> str:
        return f"{self.name}:{self.value};"


def auth_fields(kind: WifiMethod) -> List[Field]:
    fields = [Field.string("T", AUTH_KINDS[kind])]
    if kind is WifiMethod.WPA3:
        fields.append(Field.hex("R", TRANSITION_DISABLE))
    return fields


class Credential(BaseModel):
    """Wi-Fi network credentials as they are announced in a QR code.

    Records are immutable; the ``with_*`` helpers return an updated copy.
    """

    model_config = ConfigDict(frozen=True)

    ssid: str = ModelField(min_length=1)
    kind: Optional[WifiMethod] = None
    hidden: bool = False
    eap_method: Optional[EapMethod] = None
    phase2: Optional[Phase2] = None
    anonymous_identity: Optional[str] = None
    identity: Optional[str] = None
    password: Optional[str] = None
    # only meaningful for WPA3
    public_key: Optional[bytes] = None

    def _with(self, **update) -> Credential:
        # model_copy would skip validation, so "wpa3" would stay a plain str
        return self.model_validate({**self.__dict__, **update})

    def with_method(self, kind: Optional[WifiMethod]) -> Credential:
        return self._with(kind=kind)

    def with_hidden(self, hidden: bool) -> Credential:
        return self._with(hidden=hidden)

    def with_eap_method(self, eap_method: Optional[EapMethod]) -> Credential:
        return self._with(eap_method=eap_method)

    def with_phase2(self, phase2: Optional[Phase2]) -> Credential:
        return self._with(phase2=phase2)

    def with_anonymous_identity(self, anonymous_identity: Optional[str]) -> Credential:
        return self._with(anonymous_identity=anonymous_identity)

    def with_identity(self, identity: Optional[str]) -> Credential:
        return self._with(identity=identity)

    def with_password(self, password: Optional[str]) -> Credential:
        return self._with(password=password)

    def with_public_key(self, public_key: Optional[bytes]) -> Credential:
        return self._with(public_key=public_key)

    def expected_field_count(self) -> int:
        count = 1  # ssid
        if self.kind is not None:
            count += 2 if self.kind is WifiMethod.WPA3 else 1
        optional = (
            self.hidden,
            self.eap_method is not None,
            self.phase2 is not None,
            self.anonymous_identity is not None,
            self.identity is not None,
            self.password is not None,
            self.public_key is not None,
        )
        return count + sum(optional)

    def fields(self) -> List[Field]:
        fields: List[Field] = []

        if self.kind is not None:
            fields.extend(auth_fields(self.kind))

        fields.append(Field.string("S", self.ssid))

        if self.hidden:
            fields.append(Field.string("H", "true"))
        if self.eap_method is not None:
            fields.append(Field.string("E", EAP_NAMES[self.eap_method]))
        if self.phase2 is not None:
            fields.append(Field.string("PH2", PHASE2_NAMES[self.phase2]))
        if self.anonymous_identity is not None:
            fields.append(Field.string("A", self.anonymous_identity))
        if self.identity is not None:
            fields.append(Field.string("I", self.identity))
        if self.password is not None:
            fields.append(Field.string("P", self.password))
        if self.public_key is not None:
            fields.append(Field.base64("K", self.public_key))

        return fields

    def __str__(self) -> str:
        return build(self)


def build(credential: Credential) -> str:
    content = "".join(str(f) for f in credential.fields())
    return f"WIFI:{content};"
