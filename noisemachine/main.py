from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging
import os
import base64

from noisemachine.core.errors import NoiseMachineError
from noisemachine.core.io import AudioIO
from noisemachine.params.resolve import resolve_request
from noisemachine.synth import NoiseSynthesizer

# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("noisemachine")

DEV = os.environ.get("ENV", "development").lower() in ("development", "dev", "test")
if DEV:
    logger.setLevel(logging.DEBUG)

RESPONSE_FORMATS = {"WAV", "AIFF"}

app = FastAPI(
    title="Noise Machine",
    version="1.0.0",
    description="White, pink and red noise generation"
)

# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # Allow any local port
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "noisemachine"}

@app.post("/generate/{noise_type}")
async def generate(noise_type: str, params: dict):
    """
    Generates a noise clip.
    Body: { duration_s, sample_rate, seed, format }; missing fields use defaults.
    Returns JSON with base64-encoded audio, the resolved request and the seed used.
    """
    params_copy = params.copy()
    seed = params_copy.pop("seed", None)
    fmt = str(params_copy.pop("format", "WAV")).upper()
    if fmt not in RESPONSE_FORMATS:
        raise HTTPException(status_code=400, detail=f"Unsupported format: {fmt}")

    try:
        request = resolve_request({**params_copy, "noise_type": noise_type})
        audio = NoiseSynthesizer().render(request, seed=seed)
    except NoiseMachineError as exc:
        logger.warning("Rejected generate request: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))

    audio_bytes = AudioIO.to_bytes(audio.samples, request.sample_rate, format=fmt)

    return {
        "audio": base64.b64encode(audio_bytes).decode("utf-8"),
        "request": request.to_dict(),
        "seed": audio.seed,
    }

if __name__ == "__main__":
    uvicorn.run("noisemachine.main:app", host="0.0.0.0", port=8000, reload=True)
