"""
Basic usage example of fastapi-dataspec.

Demonstrates:
- Declaring the body type of a route with typeref()
- Decoding and casting the body inside a flow
- Reading the casted value in the endpoint
"""

from fastapi import Depends, FastAPI
from pydantic import BaseModel, NonNegativeInt

from fastapi_dataspec import (
    BodyCast,
    Flow,
    JSONBody,
    RequestContext,
    enrich_openapi,
    flow_dependency,
    typeref,
    value,
)

app = FastAPI(title="Basic DataSpec Example")


class Bar(BaseModel):
    b1: float
    b2: str | None = None


class Foo(BaseModel):
    a: NonNegativeInt
    bars: list[Bar]


# JSON decoding first, then the cast into Foo
foo_flow = Flow(JSONBody(), BodyCast(), typeref(Foo, None))


@app.post("/foo")
async def create_foo(ctx: RequestContext = Depends(flow_dependency(foo_flow))):
    """Only reached when the body conforms to Foo."""
    foo: Foo = value(ctx)
    return {"a": foo.a, "bars": len(foo.bars)}


# Document the Foo request body in the OpenAPI schema
enrich_openapi(app)


if __name__ == "__main__":
    import uvicorn

    print("Starting server on http://localhost:8000")
    print("\nTry these requests:")
    print("  curl -X POST localhost:8000/foo -H 'Content-Type: application/json' \\")
    print("       -d '{\"a\": 3, \"bars\": [{\"b1\": 1.5, \"b2\": null}]}'")
    print("  curl -X POST localhost:8000/foo -H 'Content-Type: application/json' \\")
    print("       -d '{\"a\": -1, \"bars\": []}'   # 400, detail names field a")
    uvicorn.run(app, host="0.0.0.0", port=8000)
