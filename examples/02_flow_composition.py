"""
Flow composition examples.

Demonstrates:
- A shared body flow merged with per-route type declarations
- Looking types up by name inside a namespace
- Swapping the cast engine with OverrideFlow
- Debug traces
"""

from typing import Any

from fastapi import Depends, FastAPI
from pydantic import BaseModel

from fastapi_dataspec import (
    AfterFlow,
    BodyCast,
    Flow,
    JSONBody,
    OverrideFlow,
    PydanticCastEngine,
    RequestContext,
    enrich_openapi,
    flow_dependency,
    merge_flows,
    typeref,
    value,
)

app = FastAPI(title="Flow Composition Examples")


class Tickets:
    """Namespace of ticket body types."""

    class Model(BaseModel):
        title: str
        priority: int = 0

    class Comment(BaseModel):
        body: str


# ========== Shared body flow ==========

body_flow = Flow(JSONBody(), BodyCast())


# ========== Route-level declarations ==========

create_ticket_flow = merge_flows(body_flow, Flow(typeref(Tickets)))
comment_flow = merge_flows(body_flow, Flow(typeref(Tickets, "Comment")))

# Strict casting: "1" is not accepted for an int here
strict_flow = merge_flows(
    body_flow,
    Flow(OverrideFlow(BodyCast(engine=PydanticCastEngine(strict=True)))),
    Flow(typeref(Tickets)),
)


async def print_trace(ctx: RequestContext) -> None:
    trace = ctx.state["trace"]
    for entry in trace.entries:
        print(f"[TRACE] {entry.component_name}: {entry.outcome} ({entry.duration_ms:.2f}ms)")


debug_flow = Flow(body_flow, typeref(Tickets), debug=True).add_hook(
    AfterFlow(print_trace)
)


@app.post("/tickets")
async def create_ticket(
    ctx: RequestContext = Depends(flow_dependency(create_ticket_flow)),
) -> dict[str, Any]:
    ticket: Tickets.Model = value(ctx)
    return {"title": ticket.title, "priority": ticket.priority}


@app.post("/tickets/{ticket_id}/comments")
async def add_comment(
    ticket_id: int,
    ctx: RequestContext = Depends(flow_dependency(comment_flow)),
) -> dict[str, Any]:
    comment: Tickets.Comment = value(ctx)
    return {"ticket": ticket_id, "comment": comment.body}


@app.post("/strict/tickets")
async def create_ticket_strict(
    ctx: RequestContext = Depends(flow_dependency(strict_flow)),
) -> dict[str, Any]:
    return value(ctx).model_dump()


@app.post("/debug/tickets")
async def create_ticket_debug(
    ctx: RequestContext = Depends(flow_dependency(debug_flow)),
) -> dict[str, Any]:
    return value(ctx).model_dump()


enrich_openapi(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Try:
    #   curl -X POST localhost:8000/tickets -H 'Content-Type: application/json' \
    #     -d '{"title": "Broken login", "priority": "2"}'
    #
    #   curl -X POST localhost:8000/strict/tickets -H 'Content-Type: application/json' \
    #     -d '{"title": "Broken login", "priority": "2"}'   # 400 in strict mode
