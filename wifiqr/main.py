from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import Base64Bytes, BaseModel, Field

from .payload import Credential, EapMethod, Phase2, WifiMethod, build
from .qr import ImageFormat, ImageError, QrCodeError, make_qr_image

app = FastAPI(title="Wi-Fi QR code generator")

class CredentialRequest(BaseModel):
    ssid: str = Field(min_length=1)
    kind: Optional[WifiMethod] = None
    hidden: bool = False
    eap_method: Optional[EapMethod] = None
    phase2: Optional[Phase2] = None
    anonymous_identity: Optional[str] = None
    identity: Optional[str] = None
    password: Optional[str] = None
    public_key: Optional[Base64Bytes] = None

    def to_credential(self) -> Credential:
        # attribute access keeps the decoded key, model_dump would base64 it again
        return Credential(**{name: getattr(self, name) for name in Credential.model_fields})

class QrRequest(CredentialRequest):
    image_format: ImageFormat = ImageFormat.PNG

@app.post("/payload")
def payload(req: CredentialRequest):
    return {"payload": build(req.to_credential())}

@app.post("/qr")
def qr(req: QrRequest):
    text = build(req.to_credential())
    try:
        data = make_qr_image(text, req.image_format)
    except QrCodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ImageError as e:
        raise HTTPException(status_code=500, detail=f"Render failed: {e}")

    return Response(content=data, media_type=req.image_format.media_type)
