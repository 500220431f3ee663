from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
import re

app = FastAPI(title="Mock NER Server", version="1.0.0")

# Gazetteer covering the sample messages; anything else is not recognized
KNOWN_ENTITIES = {
    "Omar": ("PER", 0.99),
    "Sarah": ("PER", 0.98),
    "Northwind Studio": ("ORG", 0.93),
    "NW Trading Ltd": ("ORG", 0.88),
    "London": ("LOC", 0.97),
    "Acme": ("ORG", 0.42),
}
LOADING_MODELS = {"mock/loading-model"}


class InferenceRequest(BaseModel):
    inputs: str
    parameters: dict = {}


@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/models/{owner}/{name}")
def token_classification(owner: str, name: str, request: InferenceRequest):
    if f"{owner}/{name}" in LOADING_MODELS:
        raise HTTPException(status_code=503, detail="model is currently loading")
    entities = []
    for word, (label, score) in KNOWN_ENTITIES.items():
        for m in re.finditer(re.escape(word), request.inputs):
            entities.append({"entity_group": label, "score": score, "word": word, "start": m.start(), "end": m.end()})
    return sorted(entities, key=lambda e: e["start"])
