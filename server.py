#!/usr/bin/env python3
"""
server.py - Template preview server

FastAPI-based server for trying out field templates against sample batches
before they are put into a component configuration.
"""

import logging
import math
import os
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from fieldexpr.config import ConfigLoader, MessageLoader, build_fields
from fieldexpr.errors import CompileError, ConfigError, EvalError, ParseError
from fieldexpr.rendering import ComponentRenderer, MessageRenderer
from fieldexpr.template import FieldEvaluator, classify, convert, to_string
from fieldexpr.template.coercion import ValueKind


class MessageModel(BaseModel):
    payload: Any = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)


class EvaluateRequest(BaseModel):
    template: str
    messages: List[MessageModel]
    index: int = 0
    type: str = "auto"


class RenderRequest(BaseModel):
    fields: Dict[str, Any]
    messages: List[MessageModel]


class ComponentRenderRequest(BaseModel):
    messages: List[MessageModel]


def _batch(messages: List[MessageModel]):
    return MessageLoader.batch_from_dicts(m.model_dump() for m in messages)


def _jsonable(value: Any) -> Any:
    kind = classify(value)
    if kind is ValueKind.FLOAT and not math.isfinite(value):
        return to_string(value)
    if value is None or kind is not ValueKind.OPAQUE:
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return to_string(value)


# Initialize FastAPI app
app = FastAPI(title="Field Template Preview API", version="1.0.0")

# Initialize components
config_loader = ConfigLoader(os.environ.get("FIELDEXPR_CONFIG_DIR", "configs"))
component_renderer = ComponentRenderer(config_loader)


@app.post("/evaluate")
async def evaluate(request: EvaluateRequest):
    """
    Evaluate a single template for one message of a batch.

    The "type" field selects the conversion applied to the result: "auto"
    returns the native result, otherwise one of string, int, bool, float.
    """
    if request.type != "auto" and request.type not in ("string", "int", "bool", "float"):
        raise HTTPException(status_code=400, detail=f"Unknown result type: {request.type}")

    try:
        evaluator = FieldEvaluator(request.template)
    except (ParseError, CompileError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = evaluator.eval(_batch(request.messages), request.index)
        if request.type != "auto":
            result = convert(result, request.type)
    except EvalError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {"result": _jsonable(result), "expressions": evaluator.expression_count()}


@app.post("/render")
async def render(request: RenderRequest):
    """Render a set of field declarations for every message of a batch."""
    try:
        renderer = MessageRenderer(build_fields({"fields": request.fields}))
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))

    results = renderer.render_batch(_batch(request.messages))
    return {"messages": [_jsonable(r.to_dict()) for r in results]}


@app.post("/components/{component_name}/render")
async def render_component(component_name: str, request: ComponentRenderRequest):
    """Render a batch against a component config from the config directory."""
    try:
        response = component_renderer.render_component(component_name, _batch(request.messages))
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _jsonable(response)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    uvicorn.run(app, host="0.0.0.0", port=8000)
